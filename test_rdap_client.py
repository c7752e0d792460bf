#!/usr/bin/env python3
"""
Tests for the RDAP bootstrap and RDAP client.

All network access is replaced by fakes of transport.http_get.

Usage:
    source .venv/bin/activate
    pytest test_rdap_client.py
"""

import json

import pytest

from sslmon_mcp import rdap_bootstrap, transport
from sslmon_mcp.errors import InvalidDomainError, RdapResponseError, TransportError
from sslmon_mcp.rdap_bootstrap import find_rdap_server, get_rdap_server, get_supported_tlds
from sslmon_mcp.rdap_client import parse_rdap_data, query_rdap

BOOTSTRAP_URL = "https://data.iana.org/rdap/dns.json"

BOOTSTRAP = {
    "version": "1.0",
    "services": [
        [["com", "net"], ["https://rdap.verisign.com/com/v1/"]],
        [["org"], ["https://rdap.publicinterestregistry.org/rdap"]],
        [["dev", "app"], ["https://pubapi.registry.google/rdap/", "http://backup.example/"]],
        [["org"], ["https://second.example/rdap/"]],
        "garbage",
        [["broken"]],
    ],
}

MOCK_RDAP_DATA = {
    "events": [
        {"eventAction": "registration", "eventDate": "2020-01-01T00:00:00Z"},
        {"eventAction": "expiration", "eventDate": "2025-01-01T00:00:00Z"},
    ],
    "entities": [
        {
            "roles": ["registrar"],
            "vcardArray": ["vcard", [["version", {}, "text", "4.0"], ["fn", {}, "text", "Example Registrar Inc."]]],
        },
        {
            "roles": ["registrant"],
            "vcardArray": ["vcard", [["fn", {}, "text", "John Doe"]]],
        },
    ],
    "status": ["client transfer prohibited", "server delete prohibited"],
}


def fake_http(responses: dict[str, str]):
    """Build an http_get replacement answering from a URL -> body map."""
    calls = []

    def http_get(url, timeout=None):
        calls.append(url)
        if url not in responses:
            raise TransportError("HTTP 404: Not Found")
        return responses[url]

    http_get.calls = calls
    return http_get


# =============================================================================
# Bootstrap
# =============================================================================

def test_find_rdap_server_known_tld():
    assert find_rdap_server(BOOTSTRAP, "com") == "https://rdap.verisign.com/com/v1/"
    assert find_rdap_server(BOOTSTRAP, "net") == "https://rdap.verisign.com/com/v1/"


def test_find_rdap_server_adds_trailing_slash():
    assert find_rdap_server(BOOTSTRAP, "org") == "https://rdap.publicinterestregistry.org/rdap/"


def test_find_rdap_server_first_entry_and_first_url_win():
    assert find_rdap_server(BOOTSTRAP, "org").startswith("https://rdap.publicinterestregistry.org")
    assert find_rdap_server(BOOTSTRAP, "app") == "https://pubapi.registry.google/rdap/"


def test_find_rdap_server_case_insensitive():
    assert find_rdap_server(BOOTSTRAP, "COM") == "https://rdap.verisign.com/com/v1/"


def test_find_rdap_server_unknown_tld():
    assert find_rdap_server(BOOTSTRAP, "nonexistenttld") is None
    assert find_rdap_server({}, "com") is None
    assert find_rdap_server({"services": "nope"}, "com") is None


def test_get_rdap_server_fetches_every_time(monkeypatch):
    http_get = fake_http({BOOTSTRAP_URL: json.dumps(BOOTSTRAP)})
    monkeypatch.setattr(transport, "http_get", http_get)

    assert get_rdap_server("com") == "https://rdap.verisign.com/com/v1/"
    assert get_rdap_server("com") == "https://rdap.verisign.com/com/v1/"
    assert http_get.calls == [BOOTSTRAP_URL, BOOTSTRAP_URL]


def test_get_rdap_server_honors_configured_url(monkeypatch):
    url = "https://mirror.example/dns.json"
    monkeypatch.setenv("SSLMON_RDAP_BOOTSTRAP_URL", url)
    monkeypatch.setattr(transport, "http_get", fake_http({url: json.dumps(BOOTSTRAP)}))

    assert get_rdap_server("dev") == "https://pubapi.registry.google/rdap/"


def test_get_rdap_server_unreachable_bootstrap_is_a_miss(monkeypatch):
    monkeypatch.setattr(transport, "http_get", fake_http({}))
    assert get_rdap_server("com") is None


def test_get_rdap_server_invalid_json_is_a_miss(monkeypatch):
    monkeypatch.setattr(transport, "http_get", fake_http({BOOTSTRAP_URL: "<html>"}))
    assert get_rdap_server("com") is None


def test_get_supported_tlds(monkeypatch):
    monkeypatch.setattr(transport, "http_get", fake_http({BOOTSTRAP_URL: json.dumps(BOOTSTRAP)}))
    # Malformed entries ("garbage", the one-element "broken" entry) are skipped.
    assert get_supported_tlds() == ["app", "com", "dev", "net", "org"]


def test_fetch_bootstrap_rejects_non_object(monkeypatch):
    monkeypatch.setattr(transport, "http_get", fake_http({BOOTSTRAP_URL: "[1, 2]"}))
    assert rdap_bootstrap.fetch_bootstrap() is None


# =============================================================================
# Parsing
# =============================================================================

def test_parse_rdap_data():
    result = parse_rdap_data(MOCK_RDAP_DATA, "example.com")

    assert result.domain == "example.com"
    assert result.registration_date == "2020-01-01T00:00:00Z"
    assert result.expiration_date == "2025-01-01T00:00:00Z"
    assert result.registrar == "Example Registrar Inc."
    assert result.registrant == "John Doe"
    assert result.status == "client transfer prohibited, server delete prohibited"


def test_parse_rdap_dates_are_verbatim():
    data = {"events": [
        {"eventAction": "registration", "eventDate": "1997-09-15T04:00:00Z"},
        {"eventAction": "expiration", "eventDate": "2028-09-14T04:00:00+00:00"},
    ]}
    result = parse_rdap_data(data, "google.com")
    assert result.registration_date == "1997-09-15T04:00:00Z"
    assert result.expiration_date == "2028-09-14T04:00:00+00:00"


def test_parse_rdap_first_match_wins():
    data = {
        "events": [
            {"eventAction": "last changed", "eventDate": "2024-01-01T00:00:00Z"},
            {"eventAction": "expiration", "eventDate": "2025-01-01T00:00:00Z"},
            {"eventAction": "expiration", "eventDate": "2030-01-01T00:00:00Z"},
        ],
        "entities": [
            {"roles": ["registrar"], "vcardArray": ["vcard", [["fn", {}, "text", ""]]]},
            {"roles": ["registrar", "registrant"], "vcardArray": ["vcard", [["fn", {}, "text", "First"]]]},
            {"roles": ["registrar"], "vcardArray": ["vcard", [["fn", {}, "text", "Second"]]]},
        ],
    }
    result = parse_rdap_data(data, "example.com")

    assert result.expiration_date == "2025-01-01T00:00:00Z"
    assert result.registration_date is None
    assert result.registrar == "First"
    assert result.registrant == "First"


def test_parse_rdap_tolerates_odd_shapes():
    data = {
        "events": "not a list",
        "entities": [
            "nope",
            {"roles": [], "vcardArray": ["vcard", [["fn", {}, "text", "No Role"]]]},
            {"roles": ["registrar"]},
            {"roles": ["registrar"], "vcardArray": ["vcard"]},
            {"roles": ["registrar"], "vcardArray": ["vcard", [["fn", {}]]]},
        ],
        "status": [],
    }
    result = parse_rdap_data(data, "example.com")
    assert result.to_dict() == {"domain": "example.com"}


# =============================================================================
# Queries
# =============================================================================

def test_query_rdap(monkeypatch):
    http_get = fake_http({
        BOOTSTRAP_URL: json.dumps(BOOTSTRAP),
        "https://rdap.verisign.com/com/v1/domain/example.com": json.dumps(MOCK_RDAP_DATA),
    })
    monkeypatch.setattr(transport, "http_get", http_get)

    result = query_rdap("example.com")

    assert result.registrar == "Example Registrar Inc."
    assert http_get.calls[-1] == "https://rdap.verisign.com/com/v1/domain/example.com"


def test_query_rdap_no_server_returns_none(monkeypatch):
    monkeypatch.setattr(transport, "http_get", fake_http({BOOTSTRAP_URL: json.dumps(BOOTSTRAP)}))
    assert query_rdap("example.nonexistenttld") is None


def test_query_rdap_http_error_raises(monkeypatch):
    monkeypatch.setattr(transport, "http_get", fake_http({BOOTSTRAP_URL: json.dumps(BOOTSTRAP)}))
    with pytest.raises(TransportError, match="404"):
        query_rdap("example.com")


def test_query_rdap_malformed_json_raises(monkeypatch):
    monkeypatch.setattr(transport, "http_get", fake_http({
        BOOTSTRAP_URL: json.dumps(BOOTSTRAP),
        "https://rdap.verisign.com/com/v1/domain/example.com": "{not json",
    }))
    with pytest.raises(RdapResponseError):
        query_rdap("example.com")


def test_query_rdap_invalid_domain():
    with pytest.raises(InvalidDomainError):
        query_rdap("localhost")
