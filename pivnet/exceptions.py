"""Errors raised by the Pivotal Network client."""


class PivnetError(RuntimeError):
    """Base class for every error surfaced by the client."""


class TransportError(PivnetError):
    """The request never produced an HTTP response (DNS, connection, TLS...)."""


class AuthError(PivnetError):
    """The service rejected the API token."""


class ProtocolError(PivnetError):
    """The response body could not be decoded into the expected schema."""


class UnexpectedStatus(PivnetError):
    """A valid response arrived with the wrong status code for the operation."""

    def __init__(self, message: str, *, status_code: int, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class NotFound(PivnetError):
    """Domain-level absence, e.g. no release matches a version."""

    pass
