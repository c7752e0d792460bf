"""
RDAP Bootstrap Module

Finds the authoritative RDAP server for a top-level domain using the IANA
bootstrap registry (RFC 9224).

The registry is fetched fresh for every lookup; nothing is cached between
calls.
"""

import json
import logging

from . import transport
from .config import get_rdap_bootstrap_url
from .errors import TransportError

logger = logging.getLogger(__name__)


def fetch_bootstrap() -> dict | None:
    """Download the bootstrap registry, returning None if it is unreachable or invalid."""
    url = get_rdap_bootstrap_url()
    try:
        data = json.loads(transport.http_get(url))
    except TransportError as e:
        logger.warning("Failed to get RDAP bootstrap data from %s: %s", url, e)
        return None
    except json.JSONDecodeError as e:
        logger.warning("RDAP bootstrap data from %s is not JSON: %s", url, e)
        return None

    if not isinstance(data, dict):
        logger.warning("RDAP bootstrap data from %s has unexpected shape", url)
        return None
    return data


def _iter_services(bootstrap: dict):
    """
    Yield (labels, urls) pairs from the bootstrap, skipping malformed entries.

    Bootstrap format:
    {
        "services": [
            [["com", "net"], ["https://rdap.verisign.com/com/v1/"]],
            [["org"], ["https://rdap.publicinterestregistry.org/rdap/"]],
            ...
        ]
    }
    """
    services = bootstrap.get("services")
    if not isinstance(services, list):
        return
    for entry in services:
        if not isinstance(entry, list) or len(entry) < 2:
            continue
        labels, urls = entry[0], entry[1]
        if isinstance(labels, list) and isinstance(urls, list):
            yield labels, urls


def find_rdap_server(bootstrap: dict, tld: str) -> str | None:
    """
    Pick the RDAP base URL for a TLD from a bootstrap document.

    The first service listing the label wins, and its first URL is used.

    Returns:
        The base URL with a trailing slash (e.g. "https://rdap.verisign.com/com/v1/"),
        or None if no service lists the label.
    """
    tld_lower = tld.lower()
    for labels, urls in _iter_services(bootstrap):
        if tld_lower not in (str(label).lower() for label in labels):
            continue
        if urls and isinstance(urls[0], str) and urls[0]:
            server = urls[0]
            return server if server.endswith("/") else server + "/"
    return None


def get_rdap_server(tld: str) -> str | None:
    """
    Get the RDAP server URL for a given TLD.

    Args:
        tld: The top-level domain (without leading dot), e.g. "com", "io"

    Returns:
        The RDAP server URL, or None if the TLD is not in the bootstrap
        or the bootstrap could not be fetched.
    """
    bootstrap = fetch_bootstrap()
    if bootstrap is None:
        return None
    return find_rdap_server(bootstrap, tld)


def get_supported_tlds() -> list[str]:
    """
    Get list of all TLDs supported by RDAP.

    Returns:
        List of TLD strings, sorted alphabetically. Empty if the bootstrap
        could not be fetched.
    """
    bootstrap = fetch_bootstrap()
    if bootstrap is None:
        return []

    tlds = set()
    for labels, _urls in _iter_services(bootstrap):
        tlds.update(str(label).lower() for label in labels)
    return sorted(tlds)
