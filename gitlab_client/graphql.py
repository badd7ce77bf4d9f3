"""GraphQL access for gitlab-client.

Queries are posted to ``<base_url>/api/graphql`` as a ``{"query", "variables"}``
envelope. GitLab answers with a ``{"data", "errors"}`` envelope; failures are
raised as :class:`GraphQLResponseError`, which keeps the underlying APIError
and the messages from the ``errors`` list.

Example:
    envelope, resp = client.graphql.do(
        GraphQLQuery(query='query { project(fullPath: "gitlab-org/gitlab") { id } }')
    )
    project_id = envelope["data"]["project"]["id"]
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from pydantic.alias_generators import to_camel
from typing_extensions import NotRequired, TypedDict

from gitlab_client.exceptions import (
    APIError,
    DecodeError,
    GraphQLResponseError,
    NotFoundError,
    RequestConstructionError,
)
from gitlab_client.models import GitLabModel
from gitlab_client.request_options import RequestOption
from gitlab_client.response import Response
from gitlab_client.utils.decoding import result_name, type_adapter
from gitlab_client.utils.errors import display_url

if TYPE_CHECKING:
    from gitlab_client.client.base import BaseClient

logger = logging.getLogger(__name__)

GRAPHQL_API_ENDPOINT = "/api/graphql"

GLOBAL_ID_PATTERN = re.compile(r"^gid://gitlab/([^/]+)/(\d+)$")


class GraphQLErrorEntry(TypedDict):
    message: NotRequired[str]
    locations: NotRequired[list[dict[str, int]]]
    path: NotRequired[list[str | int]]
    extensions: NotRequired[dict[str, Any]]


class GraphQLEnvelope(TypedDict):
    data: NotRequired[Any]
    errors: NotRequired[list[GraphQLErrorEntry]]


@dataclass
class GraphQLQuery:
    query: str
    variables: dict[str, Any] = field(default_factory=dict)

    def body(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"query": self.query}
        if self.variables:
            payload["variables"] = self.variables
        return payload


@dataclass(frozen=True)
class GQL:
    """Marks an options field as a GraphQL variable: ``Annotated[str | None, GQL("state", "IssuableState")]``."""

    name: str
    type: str


@dataclass(frozen=True)
class GraphQLVariable:
    name: str
    type: str
    value: Any

    def definition(self) -> str:
        return f"${self.name}: {self.type}"

    def argument(self) -> str:
        return f"{self.name}: ${self.name}"


class GraphQLVariables(list[GraphQLVariable]):
    """Variables extracted from an options model, in field order."""

    def definitions(self) -> str:
        """Declarations for the operation signature, e.g. ``$state: IssuableState, $search: String``."""
        return ", ".join(variable.definition() for variable in self)

    def arguments(self) -> str:
        """Arguments for a field, e.g. ``state: $state, search: $search``."""
        return ", ".join(variable.argument() for variable in self)

    def as_dict(self, base: dict[str, Any] | None = None) -> dict[str, Any]:
        values = dict(base or {})
        for variable in self:
            values[variable.name] = variable.value
        return values


def gql_variables(options: BaseModel | None) -> GraphQLVariables:
    """Build GraphQL variables from the fields of an options model.

    Every field must carry a :class:`GQL` marker. Fields left as None are
    skipped; values are converted to their JSON form (datetimes as ISO-8601).

    Raises:
        RequestConstructionError: If a field has no GQL marker
    """
    variables = GraphQLVariables()
    if options is None:
        return variables

    values = options.model_dump(mode="json")
    for name, info in type(options).model_fields.items():
        marker = next((item for item in info.metadata if isinstance(item, GQL)), None)
        if marker is None:
            raise RequestConstructionError(f"field {type(options).__name__}.{name} is missing a GQL marker")
        if values.get(name) is None:
            continue
        variables.append(GraphQLVariable(marker.name, marker.type, values[name]))
    return variables


def parse_global_id(value: str) -> tuple[str, int]:
    """Split a global ID such as ``gid://gitlab/WorkItem/42`` into its type and numeric ID.

    Raises:
        ValueError: If the value is not a GitLab global ID
    """
    match = GLOBAL_ID_PATTERN.match(value)
    if match is None:
        raise ValueError(f"invalid global ID format: {value!r}")
    return match.group(1), int(match.group(2))


def global_id(type_name: str, numeric_id: int) -> str:
    return f"gid://gitlab/{type_name}/{numeric_id}"


class GraphQLModel(GitLabModel):
    """Base class for GraphQL nodes: camelCase keys on the wire, snake_case in Python."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, alias_generator=to_camel)


class GlobalIDModel(GraphQLModel):
    """A node whose ``id`` is a global ID, decoded to its numeric part."""

    id: int = 0

    @field_validator("id", mode="before")
    @classmethod
    def _numeric_id(cls, value: Any) -> Any:
        if isinstance(value, str) and value.startswith("gid://"):
            return parse_global_id(value)[1]
        return value


def not_found_error(meta: Response, what: str) -> NotFoundError:
    """NotFoundError for a GraphQL lookup that answered without the requested node."""
    request = meta.request
    return NotFoundError(
        404,
        message=f"{what} not found",
        response=meta,
        method=request.method,
        url=display_url(request.url),
    )


def _error_messages(envelope: Any) -> list[str]:
    errors = envelope.get("errors") if isinstance(envelope, dict) else None
    if not isinstance(errors, list):
        return []
    return [entry["message"] for entry in errors if isinstance(entry, dict) and isinstance(entry.get("message"), str)]


class GraphQL:
    """Sends GraphQL queries through a client's transport and credentials."""

    def __init__(self, client: "BaseClient"):
        self.client = client

    @property
    def url(self) -> str:
        return f"{self.client.base_url}{GRAPHQL_API_ENDPOINT}"

    def do(self, query: GraphQLQuery, result: Any = None, *options: RequestOption) -> tuple[Any, Response]:
        """Send a query and decode the response envelope.

        Args:
            query: Query text and variables
            result: Type the whole ``{"data", "errors"}`` envelope is validated into;
                None returns the envelope as a dict
            options: Request options

        Returns:
            Tuple of (envelope, response metadata). An envelope carrying both
            data and errors is a partial result and is returned as-is.

        Raises:
            GraphQLResponseError: Non-success status with a JSON object body, or
                a success status whose envelope has errors and no data
            APIError: Non-success status with any other body
        """
        request = self.client.new_request_to_url("POST", self.url, query.body(), options)
        try:
            envelope, meta = self.client.do(request, GraphQLEnvelope)
        except APIError as e:
            try:
                body = json.loads(e.body) if e.body else None
            except ValueError:
                body = None
            if isinstance(body, dict):
                raise GraphQLResponseError(e, _error_messages(body)) from e
            raise

        envelope = envelope or {}
        messages = _error_messages(envelope)
        if envelope.get("errors") and envelope.get("data") is None:
            failure = APIError(
                meta.status_code,
                message="GraphQL query failed",
                response=meta,
                method=request.method,
                url=display_url(request.url),
            )
            raise GraphQLResponseError(failure, messages)
        if messages:
            logger.debug(f"GraphQL query returned partial data with errors: {', '.join(messages)}")

        if result is None:
            return envelope, meta
        try:
            return type_adapter(result).validate_python(envelope), meta
        except ValidationError as e:
            raise DecodeError(f"failed to decode GraphQL response into {result_name(result)}: {e}", response=meta) from e
