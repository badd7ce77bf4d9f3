"""gitlab-client - typed Python client for the GitLab REST v4 and GraphQL APIs.

This package provides:
- GitLabClient, with one service per API resource family
- Typed request options and response models (pydantic)
- Per-request options (context, timeout, sudo, token override, pagination)
- A classified exception hierarchy rooted at GitLabError
- Opt-in pagination helpers
"""

from gitlab_client.auth import (
    AccessTokenAuthSource,
    AuthSource,
    JobTokenAuthSource,
    OAuthToken,
    OAuthTokenSource,
    PasswordCredentialsAuthSource,
)
from gitlab_client.client import BaseClient, GitLabClient
from gitlab_client.context import RequestContext
from gitlab_client.exceptions import (
    APIError,
    AuthenticationError,
    ConfigurationError,
    DecodeError,
    GitLabError,
    GraphQLResponseError,
    InvalidIDTypeError,
    NotFoundError,
    RequestCancelledError,
    RequestConstructionError,
    RequestTimeoutError,
    TransportError,
    UnexpectedResultCodeError,
    UserActionPreventedError,
    UserConflictError,
    UserNotFoundError,
    has_status_code,
)
from gitlab_client.graphql import GQL, GraphQL, GraphQLQuery, GraphQLVariable, gql_variables
from gitlab_client.models import AccessLevel, BuildState, ListOptions, RequestOptions, Visibility
from gitlab_client.pagination import collect, scan
from gitlab_client.request_options import (
    AuthType,
    RequestOption,
    with_context,
    with_header,
    with_headers,
    with_keyset_pagination_parameters,
    with_offset_pagination_parameters,
    with_sudo,
    with_timeout,
    with_token,
)
from gitlab_client.response import Response
from gitlab_client.utils.resolvers import NumericID, PathString, parse_id, path_escape

__all__ = [
    "APIError",
    "AccessLevel",
    "AccessTokenAuthSource",
    "AuthSource",
    "AuthType",
    "AuthenticationError",
    "BaseClient",
    "BuildState",
    "ConfigurationError",
    "DecodeError",
    "GQL",
    "GitLabClient",
    "GitLabError",
    "GraphQL",
    "GraphQLQuery",
    "GraphQLResponseError",
    "GraphQLVariable",
    "InvalidIDTypeError",
    "JobTokenAuthSource",
    "ListOptions",
    "NotFoundError",
    "NumericID",
    "OAuthToken",
    "OAuthTokenSource",
    "PasswordCredentialsAuthSource",
    "PathString",
    "RequestCancelledError",
    "RequestConstructionError",
    "RequestContext",
    "RequestOption",
    "RequestOptions",
    "RequestTimeoutError",
    "Response",
    "TransportError",
    "UnexpectedResultCodeError",
    "UserActionPreventedError",
    "UserConflictError",
    "UserNotFoundError",
    "Visibility",
    "collect",
    "gql_variables",
    "has_status_code",
    "parse_id",
    "path_escape",
    "scan",
    "with_context",
    "with_header",
    "with_headers",
    "with_keyset_pagination_parameters",
    "with_offset_pagination_parameters",
    "with_sudo",
    "with_timeout",
    "with_token",
]
