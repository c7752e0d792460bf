"""
Runtime configuration for SSL Monitor MCP.

All settings come from environment variables and are read at call time,
so a long-running server picks up nothing stale and tests can monkeypatch
os.environ freely.

Variables:
    SSLMON_TIMEOUT              Network timeout in seconds (default 10)
    SSLMON_RDAP_BOOTSTRAP_URL   IANA RDAP bootstrap document
    SSLMON_WHOIS_ROOT           Root WHOIS authority (default whois.iana.org)
    SSLMON_USER_AGENT           User-Agent for HTTP requests
    SSLMON_HTTP_PORT            Default port for the HTTP transport
    SSLMON_HTTP_HOST            Interface for the HTTP transport (default 0.0.0.0)
    SSLMON_DEBUG                Verbose logging, including httpx
"""

import logging
import os
import sys

DEFAULT_TIMEOUT = 10.0
DEFAULT_HTTP_PORT = 3000
DEFAULT_HTTP_HOST = "0.0.0.0"
DEFAULT_RDAP_BOOTSTRAP_URL = "https://data.iana.org/rdap/dns.json"
DEFAULT_WHOIS_ROOT = "whois.iana.org"


def _env_float(name: str, default: float) -> float:
    """Read a positive float from the environment, falling back on bad input."""
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def get_timeout() -> float:
    """Timeout applied to every blocking network step."""
    return _env_float("SSLMON_TIMEOUT", DEFAULT_TIMEOUT)


def get_rdap_bootstrap_url() -> str:
    return os.environ.get("SSLMON_RDAP_BOOTSTRAP_URL") or DEFAULT_RDAP_BOOTSTRAP_URL


def get_whois_root() -> str:
    return os.environ.get("SSLMON_WHOIS_ROOT") or DEFAULT_WHOIS_ROOT


def get_user_agent() -> str:
    if agent := os.environ.get("SSLMON_USER_AGENT"):
        return agent
    from . import __version__
    return f"sslmon-mcp/{__version__}"


def get_http_port() -> int:
    raw = os.environ.get("SSLMON_HTTP_PORT")
    try:
        port = int(raw) if raw else DEFAULT_HTTP_PORT
    except ValueError:
        return DEFAULT_HTTP_PORT
    return port if port > 0 else DEFAULT_HTTP_PORT


def get_http_host() -> str:
    return os.environ.get("SSLMON_HTTP_HOST") or DEFAULT_HTTP_HOST


def is_debug() -> bool:
    return os.environ.get("SSLMON_DEBUG", "").lower() in ("1", "true", "yes", "on")


def configure_logging() -> None:
    """
    Send log records to stderr.

    stdout belongs to the MCP stdio transport, so nothing may be logged there.
    httpx logs every request at INFO; keep it quiet unless SSLMON_DEBUG is set.
    """
    level = logging.DEBUG if is_debug() else logging.INFO
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not is_debug():
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)
