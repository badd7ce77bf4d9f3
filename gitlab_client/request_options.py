"""Per-request customizations.

A request option is a callable applied to the built ``httpx.Request`` before
it is sent. Options run in the order given; one that raises stops the chain
and the call fails with ``RequestConstructionError``.
"""

from collections.abc import Callable, Mapping
from enum import Enum

import httpx

from gitlab_client.context import RequestContext
from gitlab_client.utils.resolvers import parse_id

RequestOption = Callable[[httpx.Request], None]

CONTEXT_EXTENSION = "gitlab_client.context"

ACCESS_TOKEN_HEADER = "PRIVATE-TOKEN"
JOB_TOKEN_HEADER = "JOB-TOKEN"


class AuthType(Enum):
    PRIVATE_TOKEN = "private_token"
    JOB_TOKEN = "job_token"
    OAUTH_TOKEN = "oauth_token"


def auth_header(auth_type: AuthType, token: str) -> tuple[str, str]:
    """Header name and value that carry ``token`` for the given auth type."""
    if auth_type is AuthType.JOB_TOKEN:
        return JOB_TOKEN_HEADER, token
    if auth_type is AuthType.OAUTH_TOKEN:
        return "Authorization", f"Bearer {token}"
    return ACCESS_TOKEN_HEADER, token


def with_header(name: str, value: str) -> RequestOption:
    def apply(request: httpx.Request) -> None:
        request.headers[name] = value

    return apply


def with_headers(headers: Mapping[str, str]) -> RequestOption:
    def apply(request: httpx.Request) -> None:
        request.headers.update(headers)

    return apply


def with_context(ctx: RequestContext) -> RequestOption:
    """Bind the call to a cancellable context with an optional deadline."""

    def apply(request: httpx.Request) -> None:
        request.extensions[CONTEXT_EXTENSION] = ctx

    return apply


def with_timeout(seconds: float) -> RequestOption:
    """Override the client's transport timeout for this call."""

    def apply(request: httpx.Request) -> None:
        request.extensions["timeout"] = httpx.Timeout(seconds).as_dict()

    return apply


def with_sudo(uid: int | str) -> RequestOption:
    """Perform the call as another user (administrators only)."""
    user = parse_id(uid)
    return with_header("Sudo", user)


def with_token(auth_type: AuthType, token: str) -> RequestOption:
    """Authenticate this call with a different token than the client's."""
    name, value = auth_header(auth_type, token)
    return with_header(name, value)


def with_keyset_pagination_parameters(next_link: str) -> RequestOption:
    """Copy the query parameters (the cursor included) of a ``rel="next"`` link onto the request."""

    def apply(request: httpx.Request) -> None:
        params = httpx.URL(next_link).params
        request.url = request.url.copy_merge_params(params)

    return apply


def with_offset_pagination_parameters(page: int) -> RequestOption:
    """Request a specific page of an offset-paginated list."""

    def apply(request: httpx.Request) -> None:
        request.url = request.url.copy_set_param("page", str(page))

    return apply
