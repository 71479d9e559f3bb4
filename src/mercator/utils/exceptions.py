"""Custom exceptions for the mercator package."""

from __future__ import annotations

from mercator.utils.compat_typing import StrEnum


class CloneErrorKind(StrEnum):
    """Stable classification of clone failures."""

    REFERENCE_NOT_FOUND = "reference-not-found"
    AUTH_REQUIRED = "auth-required"
    ALREADY_EXISTS = "already-exists"
    TRANSPORT_FAILURE = "transport-failure"
    KEY_INVALID = "key-invalid"


class AsyncTimeoutError(Exception):
    """Exception raised when an async operation exceeds its timeout limit.

    This exception is used by the ``async_timeout`` decorator to signal that the wrapped
    asynchronous function has exceeded the specified time limit for execution.
    """


class CloneError(Exception):
    """Base class for classified clone failures.

    Attributes
    ----------
    kind : CloneErrorKind
        The stable error kind callers can branch on instead of matching messages.

    """

    kind: CloneErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ReferenceNotFoundError(CloneError):
    """Exception raised when the requested branch does not exist on the remote."""

    kind = CloneErrorKind.REFERENCE_NOT_FOUND

    def __init__(self) -> None:
        super().__init__("reference not found")


class AuthenticationRequiredError(CloneError):
    """Exception raised when the remote rejects anonymous or keyed access.

    Hosting providers answer unauthenticated requests for a missing repository the same way
    they answer requests for a private one, so this also covers "repository does not exist".
    """

    kind = CloneErrorKind.AUTH_REQUIRED

    def __init__(self) -> None:
        super().__init__("authentication required")


class RepositoryAlreadyExistsError(CloneError):
    """Exception raised when the destination already holds an initialized repository."""

    kind = CloneErrorKind.ALREADY_EXISTS

    def __init__(self) -> None:
        super().__init__("repository already exists")


class TransportError(CloneError):
    """Exception raised when the remote cannot be reached or the transfer breaks off."""

    kind = CloneErrorKind.TRANSPORT_FAILURE


class InvalidKeyError(CloneError):
    """Exception raised when the supplied private key cannot be parsed or decrypted."""

    kind = CloneErrorKind.KEY_INVALID
