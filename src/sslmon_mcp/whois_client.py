"""
WHOIS domain lookups.

Finds the TLD's WHOIS server through whois.iana.org, queries it over
port 43 and pulls registration facts out of the free-text answer.

WHOIS output has no schema. Each field is recognized by a small table of
cues (case-insensitive substrings plus one exact-case label used by
some double-byte-locale registries), and the first value found wins.
"""

import logging
import re
from typing import Callable

from . import transport
from .config import get_whois_root
from .dates import normalize_date
from .errors import NoWhoisServerError
from .models import DomainRecord, extract_tld

logger = logging.getLogger(__name__)

# Leftmost match wins; at the same position the longer shapes are tried first.
WHOIS_DATE_RE = re.compile(
    r"(\d{4}-\d{2}-\d{2}T[\d:.]+(?:Z|[+-]\d{2}:?\d{2})?"
    r"|\d{4}-\d{2}-\d{2}\s+\d{2}:\d{2}:\d{2}"
    r"|\d{4}-\d{2}-\d{2}"
    r"|\d{2}/\d{2}/\d{4}"
    r"|\d{2}-[A-Za-z]{3}-\d{4})",
    re.IGNORECASE,
)


def _extract_date(line: str) -> str | None:
    match = WHOIS_DATE_RE.search(line)
    if not match:
        return None
    return normalize_date(match.group(1))


def _extract_after_colon(line: str) -> str | None:
    # Only the segment between the first and second colon is kept, so a
    # value such as "ok https://icann.org/epp#ok" ends up as "ok https".
    parts = line.split(":")
    if len(parts) < 2:
        return None
    return parts[1].strip() or None


# field -> (lowercase substrings, exact-case literal or None, extractor)
WHOIS_FIELD_CUES: dict[str, tuple[tuple[str, ...], str | None, Callable[[str], str | None]]] = {
    "registration_date": (
        ("creation date", "created", "registered", "registration time"),
        "Registration Time:",
        _extract_date,
    ),
    "expiration_date": (
        ("expiry date", "expiration", "expires", "expiration time"),
        "Expiration Time:",
        _extract_date,
    ),
    "registrar": (
        ("registrar:", "sponsoring registrar:"),
        "Sponsoring Registrar:",
        _extract_after_colon,
    ),
    "registrant": (
        ("registrant:", "registrant name:", "registrant organization:", "registrant contact:"),
        "Registrant:",
        _extract_after_colon,
    ),
    "status": (
        ("status:",),
        None,
        _extract_after_colon,
    ),
}


def _matches(line: str, lower: str, substrings: tuple[str, ...], literal: str | None) -> bool:
    return any(s in lower for s in substrings) or (literal is not None and literal in line)


def parse_whois_data(data: str, domain: str) -> DomainRecord:
    """
    Parse a raw WHOIS response into a DomainRecord.

    A response with no recognizable fields still yields a record holding
    just the domain.
    """
    fields: dict[str, str] = {}

    for line in data.splitlines():
        lower = line.lower().strip()
        if not lower:
            continue
        for field, (substrings, literal, extract) in WHOIS_FIELD_CUES.items():
            if field in fields or not _matches(line, lower, substrings, literal):
                continue
            if value := extract(line):
                fields[field] = value
        if len(fields) == len(WHOIS_FIELD_CUES):
            break

    return DomainRecord(domain=domain, **fields)


def find_whois_server(iana_response: str) -> str | None:
    """Return the server named on the first "whois:" line of an IANA answer."""
    for line in iana_response.splitlines():
        if line.lower().strip().startswith("whois:"):
            return line.split(":", 1)[1].strip() or None
    return None


def get_whois_server(tld: str) -> str | None:
    """
    Ask the root WHOIS authority which server is responsible for a TLD.

    Returns:
        The WHOIS host name, or None if the root authority names none.

    Raises:
        TransportError: the root authority could not be queried.
    """
    root = get_whois_root()
    response = transport.whois_query(tld.lower(), root)
    server = find_whois_server(response)
    if server is None:
        logger.info("%s lists no whois server for .%s", root, tld)
    return server


def query_whois(domain: str) -> DomainRecord:
    """
    Look a domain up over WHOIS.

    Raises:
        InvalidDomainError: the domain has no top-level label.
        NoWhoisServerError: no WHOIS server is known for the TLD.
        TransportError: a query failed or timed out.
    """
    tld = extract_tld(domain)

    server = get_whois_server(tld)
    if not server:
        raise NoWhoisServerError(f"No whois server found for TLD: {tld}")

    logger.info("Querying whois server: %s", server)
    return parse_whois_data(transport.whois_query(domain, server), domain)
