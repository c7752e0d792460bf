"""Result records shared by the domain resolvers and the certificate inspector."""

from dataclasses import dataclass

from .errors import InvalidDomainError


def extract_tld(domain: str) -> str:
    """
    Return the lowercased top-level label of a dotted domain name.

    Raises:
        InvalidDomainError: if the name has no dot or ends with one.
    """
    if "." not in domain:
        raise InvalidDomainError(f"Invalid domain format: {domain!r}")
    tld = domain.rsplit(".", 1)[1].strip().lower()
    if not tld:
        raise InvalidDomainError(f"Invalid domain format: {domain!r}")
    return tld


@dataclass(frozen=True)
class DomainRecord:
    """Registration facts for a domain. Every field but domain is best-effort."""

    domain: str
    registration_date: str | None = None
    expiration_date: str | None = None
    registrar: str | None = None
    registrant: str | None = None
    status: str | None = None

    def to_dict(self) -> dict:
        data = {
            "domain": self.domain,
            "registrationDate": self.registration_date,
            "expirationDate": self.expiration_date,
            "registrar": self.registrar,
            "registrant": self.registrant,
            "status": self.status,
        }
        return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True)
class CertificateRecord:
    """Validity metadata of a leaf certificate seen during one handshake."""

    domain: str
    valid_from: str
    valid_to: str
    issuer_common_name: str
    subject_common_name: str
    is_currently_valid: bool
    days_until_expiry: int

    def to_dict(self) -> dict:
        return {
            "domain": self.domain,
            "validFrom": self.valid_from,
            "validTo": self.valid_to,
            "issuerCommonName": self.issuer_common_name,
            "subjectCommonName": self.subject_common_name,
            "isCurrentlyValid": self.is_currently_valid,
            "daysUntilExpiry": self.days_until_expiry,
        }
