from enum import Enum


class ErrorKind(Enum):
    UPSTREAM = "upstream"
    TRANSPORT = "transport"
    CONFIGURATION = "configuration"


class ContributionsError(Exception):
    """Base error for every failure surfaced to callers."""

    kind = None

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self):
        payload = {"error": self.kind.value, "message": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class UpstreamError(ContributionsError):
    """GitHub answered, but with an error payload or without the requested user."""

    kind = ErrorKind.UPSTREAM


class TransportError(ContributionsError):
    """The call itself failed: network error, timeout or non-2xx status."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, message, status=None, body=None):
        details = {"status": status, "body": body} if status is not None else None
        super().__init__(message, details)
        self.status = status
        self.body = body


class ConfigurationError(ContributionsError):
    kind = ErrorKind.CONFIGURATION
