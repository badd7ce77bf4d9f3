"""Exception hierarchy for gitlab-client.

Every failure raised by the library derives from :class:`GitLabError`, so
callers can branch on the kind of failure instead of parsing messages.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gitlab_client.response import Response


class GitLabError(Exception):
    """Base class for all gitlab-client errors."""


class ConfigurationError(GitLabError, ValueError):
    """Client configuration is missing or invalid."""


class InvalidIDTypeError(GitLabError, TypeError):
    """An identifier was neither an int nor a string."""

    def __init__(self, value: object):
        super().__init__(f"invalid ID type {value!r}, the ID must be an int or a string")
        self.value = value


class RequestConstructionError(GitLabError):
    """The request could not be built (path templating, encoding or a request option failed)."""


class TransportError(GitLabError):
    """The request could not be sent or its response could not be received."""


class RequestTimeoutError(TransportError):
    """The request deadline expired before the response was received."""


class RequestCancelledError(TransportError):
    """The request context was cancelled before the call completed."""


class DecodeError(GitLabError):
    """The response body could not be decoded into the requested type."""

    def __init__(self, message: str, response: Response | None = None):
        super().__init__(message)
        self.response = response


class APIError(GitLabError):
    """GitLab answered with a non-success status code."""

    def __init__(
        self,
        status_code: int,
        message: str = "",
        body: bytes = b"",
        response: Response | None = None,
        method: str = "",
        url: str = "",
    ):
        self.status_code = status_code
        self.message = message
        self.body = body
        self.response = response
        self.method = method
        self.url = url
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.message:
            return f"{self.method} {self.url}: {self.status_code} {self.message}"
        return f"{self.method} {self.url}: {self.status_code}"

    def has_status_code(self, status_code: int) -> bool:
        return self.status_code == status_code


class AuthenticationError(APIError):
    """GitLab rejected the credentials (401)."""


class NotFoundError(APIError):
    """The requested resource does not exist (404)."""


class GraphQLResponseError(APIError):
    """A GraphQL request failed; carries the messages from the ``errors`` envelope."""

    def __init__(self, error: APIError, messages: list[str]):
        self.error = error
        self.messages = messages
        super().__init__(
            error.status_code,
            message=error.message,
            body=error.body,
            response=error.response,
            method=error.method,
            url=error.url,
        )

    def __str__(self) -> str:
        base = APIError.__str__(self.error)
        if not self.messages:
            return f"{base} (no additional error messages)"
        return f"{base} (GraphQL errors: {', '.join(self.messages)})"


# User moderation refinements


class UserNotFoundError(NotFoundError):
    """The user targeted by a moderation action does not exist."""


class UserActionPreventedError(APIError):
    """GitLab refused a user moderation action (403)."""

    action = ""


class UserBlockPreventedError(UserActionPreventedError):
    action = "block"


class UserUnblockPreventedError(UserActionPreventedError):
    action = "unblock"


class UserBanPreventedError(UserActionPreventedError):
    action = "ban"


class UserUnbanPreventedError(UserActionPreventedError):
    action = "unban"


class UserActivatePreventedError(UserActionPreventedError):
    action = "activate"


class UserDeactivatePreventedError(UserActionPreventedError):
    action = "deactivate"


class UserApprovePreventedError(UserActionPreventedError):
    action = "approve"


class UserRejectPreventedError(UserActionPreventedError):
    action = "reject"


class UserConflictError(APIError):
    """The user is in a state that conflicts with the requested action (409)."""


class UnexpectedResultCodeError(APIError):
    """A status code the endpoint family does not define."""

    def __str__(self) -> str:
        return f"received unexpected result code: {self.status_code}"


def has_status_code(err: BaseException, status_code: int) -> bool:
    """Return True if ``err`` (or an error in its cause chain) is an APIError with ``status_code``."""
    current: BaseException | None = err
    while current is not None:
        if isinstance(current, APIError):
            return current.has_status_code(status_code)
        current = current.__cause__
    return False
