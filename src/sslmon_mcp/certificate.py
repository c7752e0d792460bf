"""
TLS certificate inspection.

Performs one handshake against host:port and reports the validity window
of the leaf certificate the server presents. Chain and revocation checks
are deliberately not done: an expired or self-signed certificate is still
read and reported as such.
"""

import json
import logging
import math
import socket
import ssl
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from cryptography import x509
from cryptography.x509.oid import NameOID

from .config import get_timeout
from .dates import to_iso8601
from .models import CertificateRecord

logger = logging.getLogger(__name__)

DEFAULT_PORT = 443
SECONDS_PER_DAY = 86400


class InspectionStatus(Enum):
    """Outcome categories for a certificate inspection."""

    OK = "ok"
    NO_CERTIFICATE = "no_certificate"
    TIMEOUT = "timeout"
    CONNECTION_ERROR = "connection_error"


@dataclass(frozen=True)
class CertificateInspection:
    """Result of inspecting one host:port. Exactly one of record / error_message is set."""

    domain: str
    port: int
    status: InspectionStatus
    record: CertificateRecord | None = None
    error_message: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == InspectionStatus.OK

    def to_text(self) -> str:
        """Render the outcome as the text payload returned to callers."""
        if self.record is not None:
            return json.dumps(self.record.to_dict(), indent=2)
        return self.error_message or f"SSL inspection failed for {self.domain}:{self.port}"


def _common_name(name: x509.Name) -> str | None:
    attributes = name.get_attributes_for_oid(NameOID.COMMON_NAME)
    if not attributes:
        return None
    value = attributes[0].value
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    return value or None


def build_certificate_record(domain: str, der: bytes, now: datetime | None = None) -> CertificateRecord:
    """
    Build a CertificateRecord from a DER-encoded certificate.

    Args:
        domain: The host that was asked for; used as subject CN fallback.
        der: The leaf certificate in DER form.
        now: Evaluation instant (defaults to the current UTC time).

    Raises:
        ValueError: the bytes are not a parseable X.509 certificate.
    """
    cert = x509.load_der_x509_certificate(der)
    now = now or datetime.now(timezone.utc)

    valid_from = cert.not_valid_before_utc
    valid_to = cert.not_valid_after_utc

    return CertificateRecord(
        domain=domain,
        valid_from=to_iso8601(valid_from),
        valid_to=to_iso8601(valid_to),
        issuer_common_name=_common_name(cert.issuer) or "Unknown",
        subject_common_name=_common_name(cert.subject) or domain,
        is_currently_valid=valid_from <= now <= valid_to,
        days_until_expiry=math.ceil((valid_to - now).total_seconds() / SECONDS_PER_DAY),
    )


def fetch_peer_certificate(domain: str, port: int, timeout: float) -> bytes | None:
    """
    Handshake with domain:port (SNI = domain) and return the leaf certificate as DER.

    Returns None when the server completes the handshake without presenting
    a certificate. The TCP connect and the handshake share one timeout.
    """
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE

    deadline = time.monotonic() + timeout
    with socket.create_connection((domain, port), timeout=timeout) as sock:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise socket.timeout("timed out before TLS handshake")
        sock.settimeout(remaining)
        with context.wrap_socket(sock, server_hostname=domain) as tls_sock:
            return tls_sock.getpeercert(binary_form=True)


def inspect_certificate(domain: str, port: int = DEFAULT_PORT, timeout: float | None = None) -> CertificateInspection:
    """
    Inspect the TLS certificate served on domain:port.

    Network problems never raise; they come back as TIMEOUT or
    CONNECTION_ERROR outcomes naming the target and the reason.

    Raises:
        ValueError: port is not an integer in 1..65535.
    """
    if isinstance(port, bool) or not isinstance(port, int) or not 0 < port <= 65535:
        raise ValueError(f"Port must be a positive integer up to 65535, got {port!r}")

    timeout = timeout or get_timeout()
    target = f"{domain}:{port}"
    logger.debug("Inspecting TLS certificate on %s", target)

    try:
        der = fetch_peer_certificate(domain, port, timeout)
    except socket.timeout:
        logger.warning("SSL connection timeout for %s", target)
        return CertificateInspection(
            domain, port, InspectionStatus.TIMEOUT,
            error_message=f"SSL connection timeout for {target}",
        )
    except (OSError, UnicodeError) as e:
        # UnicodeError: the idna codec rejects empty or over-long labels during name lookup.
        logger.warning("SSL connection failed for %s: %s", target, e)
        return CertificateInspection(
            domain, port, InspectionStatus.CONNECTION_ERROR,
            error_message=f"SSL connection failed for {target}: {e}",
        )

    if not der:
        return CertificateInspection(
            domain, port, InspectionStatus.NO_CERTIFICATE,
            error_message=f"No SSL certificate found for {target}",
        )

    try:
        record = build_certificate_record(domain, der)
    except ValueError as e:
        logger.warning("Unparseable certificate from %s: %s", target, e)
        return CertificateInspection(
            domain, port, InspectionStatus.CONNECTION_ERROR,
            error_message=f"SSL connection failed for {target}: unparseable certificate ({e})",
        )

    return CertificateInspection(domain, port, InspectionStatus.OK, record=record)
