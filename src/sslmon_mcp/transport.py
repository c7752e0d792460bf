"""
Blocking network helpers.

Two primitives: a line-oriented WHOIS exchange over TCP port 43 and an
HTTP(S) GET. Both are bounded by the configured timeout and close their
connection on every exit path. Failures are raised as TransportError /
TransportTimeoutError so callers deal with one exception family.
"""

import logging
import socket
import time

import httpx

from .config import get_timeout, get_user_agent
from .errors import TransportError, TransportTimeoutError

logger = logging.getLogger(__name__)

WHOIS_PORT = 43
RECV_SIZE = 4096


def whois_query(query: str, server: str, port: int = WHOIS_PORT, timeout: float | None = None) -> str:
    """
    Send a WHOIS query and return the full response text.

    Reads until the server closes the connection. The timeout bounds each
    read and the exchange as a whole.

    Args:
        query: The bare query (a domain or a top-level label).
        server: WHOIS host name.
        port: TCP port, 43 unless a referral says otherwise.
        timeout: Seconds; defaults to the configured network timeout.

    Raises:
        TransportTimeoutError: the server went quiet or the deadline passed.
        TransportError: the host name is malformed, or the connection could not
            be made or was reset.
    """
    timeout = timeout or get_timeout()
    deadline = time.monotonic() + timeout
    chunks: list[bytes] = []

    logger.debug("WHOIS query %r -> %s:%d", query, server, port)
    try:
        with socket.create_connection((server, port), timeout=timeout) as sock:
            sock.sendall(f"{query}\r\n".encode("utf-8"))
            while True:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise TransportTimeoutError(f"Whois query timeout for {server}")
                sock.settimeout(remaining)
                chunk = sock.recv(RECV_SIZE)
                if not chunk:
                    break
                chunks.append(chunk)
    except socket.timeout as e:
        raise TransportTimeoutError(f"Whois query timeout for {server}") from e
    except (OSError, UnicodeError) as e:
        raise TransportError(f"Whois query to {server} failed: {e}") from e

    return b"".join(chunks).decode("utf-8", errors="replace")


def http_get(url: str, timeout: float | None = None) -> str:
    """
    GET a URL and return the response body.

    The timeout bounds each network operation and the whole request,
    so a server trickling its body cannot hold the call open.

    Raises:
        TransportTimeoutError: no complete response within the timeout.
        TransportError: non-2xx status, a malformed URL or any other HTTP failure.
    """
    timeout = timeout or get_timeout()
    deadline = time.monotonic() + timeout
    headers = {
        "Accept": "application/rdap+json, application/json",
        "User-Agent": get_user_agent(),
    }
    chunks: list[bytes] = []

    logger.debug("HTTP GET %s", url)
    try:
        with httpx.Client(headers=headers, timeout=timeout, follow_redirects=True) as client:
            with client.stream("GET", url) as response:
                if not response.is_success:
                    raise TransportError(f"HTTP {response.status_code}: {response.reason_phrase}")
                for chunk in response.iter_bytes():
                    if time.monotonic() > deadline:
                        raise TransportTimeoutError(f"HTTP request timeout for {url}")
                    chunks.append(chunk)
                encoding = response.encoding or "utf-8"
    except httpx.TimeoutException as e:
        raise TransportTimeoutError(f"HTTP request timeout for {url}") from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise TransportError(f"HTTP request to {url} failed: {e}") from e

    return b"".join(chunks).decode(encoding, errors="replace")
