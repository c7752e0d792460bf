"""
SSL Monitor MCP Server

An MCP server for checking domain registration expiry (RDAP/WHOIS) and
TLS certificate validity.
"""

__version__ = "1.0.1"


def main():
    """Main entry point for the CLI."""
    import sys

    # Handle CLI arguments before importing heavy dependencies
    args = sys.argv[1:]

    if "--help" in args or "-h" in args:
        print_help()
        sys.exit(0)

    if "--version" in args or "-V" in args:
        print(f"sslmon-mcp {__version__}")
        sys.exit(0)

    if "--show-config" in args:
        show_config()
        sys.exit(0)

    if "--check-bootstrap" in args:
        sys.exit(0 if check_bootstrap() else 1)

    if "--http" in args:
        port = parse_http_port(args)
        if port is None:
            print("Error: --http expects a positive port number", file=sys.stderr)
            sys.exit(2)
        from .server import run_http
        run_http(port)
        return

    # Default: run the MCP server on stdio
    from .server import run_stdio
    run_stdio()


def parse_http_port(args: list[str]) -> int | None:
    """
    Return the port following --http, the configured default if none is given,
    or None if the value is not a positive integer.
    """
    from .config import get_http_port

    index = args.index("--http")
    if index + 1 >= len(args) or args[index + 1].startswith("-"):
        return get_http_port()
    try:
        port = int(args[index + 1])
    except ValueError:
        return None
    return port if 0 < port <= 65535 else None


def print_help():
    """Print help message."""
    print(f"""sslmon-mcp {__version__}

An MCP server for checking domain registration expiry and SSL certificates.

Usage:
    sslmon-mcp                  Run the MCP server on stdio
    sslmon-mcp --http [PORT]    Run a stateless streamable HTTP server on /mcp
    sslmon-mcp --show-config    Show current configuration
    sslmon-mcp --check-bootstrap Fetch the RDAP bootstrap and list supported TLDs
    sslmon-mcp --version        Show version
    sslmon-mcp --help           Show this help

Tools:
    get_domain_info(domain)             Registration/expiration via RDAP, WHOIS fallback
    get_ssl_cert_info(domain, port=443) Certificate validity window

Environment:
    SSLMON_TIMEOUT              Network timeout in seconds (default 10)
    SSLMON_RDAP_BOOTSTRAP_URL   RDAP bootstrap registry URL
    SSLMON_WHOIS_ROOT           Root WHOIS server (default whois.iana.org)
    SSLMON_USER_AGENT           HTTP User-Agent
    SSLMON_HTTP_PORT            Default port for --http (default 3000)
    SSLMON_HTTP_HOST            Interface for --http (default 0.0.0.0)
    SSLMON_DEBUG=1              Verbose logging

MCP Client Setup:
    Add to your client's mcpServers configuration:
    {{
      "mcpServers": {{
        "sslmon": {{
          "command": "uvx",
          "args": ["sslmon-mcp"]
        }}
      }}
    }}
""")


def show_config():
    """Show current configuration."""
    from .config import (
        get_http_host,
        get_http_port,
        get_rdap_bootstrap_url,
        get_timeout,
        get_user_agent,
        get_whois_root,
        is_debug,
    )

    print("Configuration")
    print("=" * 50)
    print()
    print(f"Network timeout:     {get_timeout():g}s")
    print(f"RDAP bootstrap:      {get_rdap_bootstrap_url()}")
    print(f"WHOIS root server:   {get_whois_root()}")
    print(f"User-Agent:          {get_user_agent()}")
    print(f"HTTP host (--http):  {get_http_host()}")
    print(f"HTTP port (--http):  {get_http_port()}")
    print(f"Debug logging:       {'on' if is_debug() else 'off'}")


def check_bootstrap() -> bool:
    """Fetch the RDAP bootstrap registry and report how many TLDs it covers."""
    from .config import configure_logging, get_rdap_bootstrap_url
    from .rdap_bootstrap import get_supported_tlds

    configure_logging()
    print(f"Fetching {get_rdap_bootstrap_url()} ...")
    tlds = get_supported_tlds()
    if not tlds:
        print("✗ RDAP bootstrap unavailable or empty")
        return False

    print(f"✓ RDAP bootstrap lists {len(tlds)} TLDs")
    preview = ", ".join(tlds[:20])
    print(f"  {preview}{', ...' if len(tlds) > 20 else ''}")
    return True
