"""
Domain information resolution: RDAP first, WHOIS as fallback.

The two lookups are an ordered strategy list. Each step returns a tagged
StepOutcome:

    SUCCESS       -> stop, report the record
    SOFT_FAILURE  -> log and move on to the next step
    HARD_FAILURE  -> stop, report the failure

RDAP problems are soft (WHOIS may still answer); WHOIS problems are hard.
Running out of steps is reported like a hard failure. The only exception
that escapes is InvalidDomainError.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from .certificate import DEFAULT_PORT, inspect_certificate
from .errors import InvalidDomainError, SSLMonError
from .models import DomainRecord, extract_tld
from .rdap_client import query_rdap
from .whois_client import query_whois

logger = logging.getLogger(__name__)


class StepStatus(Enum):
    SUCCESS = "success"
    SOFT_FAILURE = "soft_failure"
    HARD_FAILURE = "hard_failure"


@dataclass(frozen=True)
class StepOutcome:
    status: StepStatus
    record: DomainRecord | None = None
    error: str | None = None


@dataclass(frozen=True)
class DomainLookup:
    """Final result of a domain lookup."""

    domain: str
    record: DomainRecord | None = None
    source: str | None = None  # "rdap" or "whois"
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.record is not None

    def to_text(self) -> str:
        """Render the outcome as the text payload returned to callers."""
        if self.record is not None:
            return json.dumps(self.record.to_dict(), indent=2)
        return f"Domain info lookup failed for {self.domain}: {self.error}"


def _rdap_step(domain: str) -> StepOutcome:
    try:
        record = query_rdap(domain)
    except InvalidDomainError:
        raise
    except SSLMonError as e:
        return StepOutcome(StepStatus.SOFT_FAILURE, error=str(e))
    if record is None:
        return StepOutcome(StepStatus.SOFT_FAILURE, error="no RDAP server for this TLD")
    return StepOutcome(StepStatus.SUCCESS, record=record)


def _whois_step(domain: str) -> StepOutcome:
    try:
        record = query_whois(domain)
    except InvalidDomainError:
        raise
    except SSLMonError as e:
        return StepOutcome(StepStatus.HARD_FAILURE, error=str(e))
    return StepOutcome(StepStatus.SUCCESS, record=record)


LOOKUP_STRATEGIES: list[tuple[str, Callable[[str], StepOutcome]]] = [
    ("rdap", _rdap_step),
    ("whois", _whois_step),
]


def lookup_domain(domain: str) -> DomainLookup:
    """
    Resolve registration information for a domain.

    Raises:
        InvalidDomainError: the domain has no top-level label.
    """
    domain = domain.strip()
    extract_tld(domain)

    last_error = "no lookup method available"
    for name, step in LOOKUP_STRATEGIES:
        outcome = step(domain)
        if outcome.status == StepStatus.SUCCESS:
            return DomainLookup(domain=domain, record=outcome.record, source=name)

        last_error = outcome.error or f"{name} lookup failed"
        if outcome.status == StepStatus.HARD_FAILURE:
            logger.warning("%s lookup failed for %s: %s", name.upper(), domain, last_error)
            break
        logger.info("%s lookup failed for %s, falling back: %s", name.upper(), domain, last_error)

    return DomainLookup(domain=domain, error=last_error)


def get_domain_info(domain: str) -> str:
    """
    Domain registration and expiration info as text.

    Returns a JSON document on success, or a human-readable failure
    description. Raises only InvalidDomainError.
    """
    return lookup_domain(domain).to_text()


def get_ssl_cert_info(domain: str, port: int = DEFAULT_PORT) -> str:
    """
    TLS certificate validity info for domain:port as text.

    Returns a JSON document on success, or a human-readable description of
    why no certificate could be read. Raises only ValueError for a bad port.
    """
    return inspect_certificate(domain.strip(), port).to_text()
