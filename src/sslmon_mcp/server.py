"""
SSL Monitor MCP Server

An MCP server exposing two tools:
- get_domain_info: registration and expiration data (RDAP, WHOIS fallback)
- get_ssl_cert_info: validity window of the TLS certificate on host:port
"""

import logging

import anyio
from mcp.server.fastmcp import FastMCP

from . import __version__
from .certificate import DEFAULT_PORT
from .config import configure_logging, get_http_host
from .resolver import get_domain_info as _get_domain_info
from .resolver import get_ssl_cert_info as _get_ssl_cert_info

configure_logging()
logger = logging.getLogger(__name__)

# Server version
VERSION = __version__

# Initialize the MCP server
mcp = FastMCP("sslmon-mcp")
mcp._mcp_server.version = VERSION


# =============================================================================
# MCP Tools
# =============================================================================

@mcp.tool()
def version() -> str:
    """Get the server version."""
    return VERSION


@mcp.tool()
async def get_domain_info(domain: str) -> str:
    """
    Get domain registration and expiration information using RDAP and WHOIS.

    RDAP is tried first; if the registry has no RDAP service or the query
    fails, the TLD's WHOIS server is used instead.

    Args:
        domain: The domain to check (e.g., "sslmon.dev")

    Returns:
        JSON with domain, registrationDate, expirationDate, registrar,
        registrant and status (absent fields are omitted), or a text
        message describing why the lookup failed.
    """
    # The lookup blocks on sockets; keep it off the event loop.
    return await anyio.to_thread.run_sync(_get_domain_info, domain)


@mcp.tool()
async def get_ssl_cert_info(domain: str, port: int = DEFAULT_PORT) -> str:
    """
    Get SSL certificate information for a host and port.

    Args:
        domain: The host to check (e.g., "www.sslmon.dev")
        port: Port number to check (default: 443)

    Returns:
        JSON with domain, validFrom, validTo, issuerCommonName,
        subjectCommonName, isCurrentlyValid and daysUntilExpiry, or a text
        message when no certificate could be read.
    """
    if port <= 0:
        raise ValueError("port must be a positive integer")
    return await anyio.to_thread.run_sync(_get_ssl_cert_info, domain, port)


def run_http(port: int) -> None:
    """Serve the tools over stateless streamable HTTP at /mcp."""
    host = get_http_host()
    mcp.settings.host = host
    mcp.settings.port = port
    mcp.settings.stateless_http = True
    logger.info("MCP stateless streamable HTTP server listening on %s:%d", host, port)
    mcp.run(transport="streamable-http")


def run_stdio() -> None:
    logger.info("SSL Monitor MCP server running on stdio")
    mcp.run()
