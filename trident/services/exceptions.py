class ServiceError(Exception):
    """Base exception for campaign client failures."""

    def __init__(self, message: str, *, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause

    def __str__(self) -> str:
        message = super().__str__()
        if self.cause is not None:
            return f"{message}: {self.cause}"
        return message


class ConfigurationError(ServiceError):
    """Raised when the configuration file cannot be loaded."""


class WordlistError(ServiceError):
    """Raised when a username or password file cannot be read."""

    def __init__(self, message: str, path: str, *, cause: Exception | None = None):
        super().__init__(message, cause=cause)
        self.path = path


class ConfirmationError(ServiceError):
    """Raised when the operator's answer cannot be read from the console."""


class TimestampError(ServiceError):
    """Raised when the not-before timestamp is not valid RFC3339."""


class SerializationError(ServiceError):
    """Raised when the campaign request cannot be encoded as JSON."""


class RequestBuildError(ServiceError):
    """Raised when the outgoing orchestrator request cannot be constructed."""


class AuthenticationError(ServiceError):
    """Raised when the authenticator cannot sign the outgoing request."""


class DownstreamServiceError(ServiceError):
    """Raised when the orchestrator cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None, *, cause: Exception | None = None):
        super().__init__(message, cause=cause)
        self.status_code = status_code
