"""
RDAP domain lookups.

Queries the registry's RDAP server found through the IANA bootstrap and
turns the JSON answer into a DomainRecord.
"""

import json
import logging

from . import transport
from .errors import RdapResponseError
from .models import DomainRecord, extract_tld
from .rdap_bootstrap import get_rdap_server

logger = logging.getLogger(__name__)


def _vcard_name(entity: dict) -> str | None:
    """Return the formatted name ("fn") from an entity's vCard, if any."""
    vcard_array = entity.get("vcardArray")
    if not isinstance(vcard_array, list) or len(vcard_array) < 2:
        return None
    properties = vcard_array[1]
    if not isinstance(properties, list):
        return None

    # jCard property: [name, params, type, value]
    for prop in properties:
        if isinstance(prop, list) and len(prop) >= 4 and prop[0] == "fn":
            if isinstance(prop[3], str) and prop[3].strip():
                return prop[3]
    return None


def parse_rdap_data(data: dict, domain: str) -> DomainRecord:
    """
    Extract registration facts from an RDAP domain object.

    Dates are copied verbatim since RDAP already uses RFC 3339. For every
    field the first usable value wins. Shapes we do not understand are
    skipped, never raised.
    """
    fields: dict[str, str] = {}

    events = data.get("events")
    if isinstance(events, list):
        for event in events:
            if not isinstance(event, dict) or not event.get("eventDate"):
                continue
            action = event.get("eventAction")
            if action == "registration":
                fields.setdefault("registration_date", event["eventDate"])
            elif action == "expiration":
                fields.setdefault("expiration_date", event["eventDate"])

    entities = data.get("entities")
    if isinstance(entities, list):
        for entity in entities:
            if not isinstance(entity, dict):
                continue
            roles = entity.get("roles")
            if not isinstance(roles, list) or not roles:
                continue
            name = _vcard_name(entity)
            if not name:
                continue
            if "registrar" in roles:
                fields.setdefault("registrar", name)
            if "registrant" in roles:
                fields.setdefault("registrant", name)

    status = data.get("status")
    if isinstance(status, list) and status:
        fields["status"] = ", ".join(str(s) for s in status)

    return DomainRecord(domain=domain, **fields)


def query_rdap(domain: str) -> DomainRecord | None:
    """
    Look a domain up over RDAP.

    Returns:
        The parsed record, or None when the bootstrap has no server for
        the domain's TLD.

    Raises:
        InvalidDomainError: the domain has no top-level label.
        TransportError: the request failed or timed out.
        RdapResponseError: the body was not a JSON object.
    """
    tld = extract_tld(domain)

    server = get_rdap_server(tld)
    if not server:
        logger.info("No RDAP server in bootstrap for .%s", tld)
        return None

    url = f"{server}domain/{domain}"
    logger.info("Querying RDAP server: %s", url)
    body = transport.http_get(url)

    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise RdapResponseError(f"Invalid RDAP JSON from {url}: {e}") from e
    if not isinstance(data, dict):
        raise RdapResponseError(f"Unexpected RDAP response from {url}")

    return parse_rdap_data(data, domain)
