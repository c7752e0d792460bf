"""
Exceptions raised inside the SSL Monitor core.

Only InvalidDomainError is meant to reach a caller of the public
operations. Everything else is turned into a reportable outcome by the
resolver or the certificate inspector.
"""


class SSLMonError(Exception):
    """Base class for all sslmon-mcp errors."""


class InvalidDomainError(SSLMonError, ValueError):
    """The domain has no extractable top-level label."""


class TransportError(SSLMonError):
    """A network request failed (refused, reset, bad HTTP status)."""


class TransportTimeoutError(TransportError):
    """A network request exceeded its time bound."""


class RdapResponseError(SSLMonError):
    """The RDAP server answered with something that is not a JSON object."""


class NoWhoisServerError(SSLMonError):
    """No WHOIS server is known for a top-level label."""
