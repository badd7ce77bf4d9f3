"""Shared type definitions for gitlab-client."""

from datetime import datetime
from enum import IntEnum, StrEnum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, model_validator


class RequestOptions(BaseModel):
    """Base class for the options of one API call.

    Every field is optional. Only fields the caller set to a non-None value
    are sent; explicit zero values (``False``, ``0``, ``""``) are sent as-is.
    A ``reset_<field>`` flag sends an explicit ``null`` for ``<field>`` so the
    API clears it.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    def reset_fields(self) -> list[str]:
        """Wire names of the fields whose reset flag is set."""
        fields = type(self).model_fields
        names = []
        for name, info in fields.items():
            # Only flags declared with reset_flag(); reset_password is a plain option
            if not name.startswith("reset_") or info.exclude is not True or not getattr(self, name):
                continue
            target = fields.get(name.removeprefix("reset_"))
            if target is not None:
                names.append(target.alias or name.removeprefix("reset_"))
        return names


class GitLabModel(BaseModel):
    """Base class for decoded API responses.

    Unknown fields are ignored and ``null`` values fall back to the field
    default, so a missing or null field decodes to its zero value.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


def reset_flag() -> Any:
    """Declare a ``reset_<field>`` flag on an options model."""
    return Field(default=False, exclude=True)


# Label lists travel as a single comma-separated string
Labels = Annotated[list[str], PlainSerializer(lambda labels: ",".join(labels), return_type=str)]


class AccessLevel(IntEnum):
    """Permission levels for users in projects and groups."""

    NO_PERMISSIONS = 0
    MINIMAL_ACCESS = 5
    GUEST = 10
    PLANNER = 15
    REPORTER = 20
    DEVELOPER = 30
    MAINTAINER = 40
    OWNER = 50
    ADMIN = 60


class Visibility(StrEnum):
    PRIVATE = "private"
    INTERNAL = "internal"
    PUBLIC = "public"


class BuildState(StrEnum):
    """Job and pipeline states."""

    CREATED = "created"
    WAITING_FOR_RESOURCE = "waiting_for_resource"
    PREPARING = "preparing"
    PENDING = "pending"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"
    CANCELED = "canceled"
    SKIPPED = "skipped"
    MANUAL = "manual"
    SCHEDULED = "scheduled"


class VariableType(StrEnum):
    ENV_VAR = "env_var"
    FILE = "file"


class ListOptions(RequestOptions):
    """Pagination and ordering shared by list endpoints.

    ``pagination="keyset"`` switches supported endpoints to cursor-based
    pagination; follow ``Response.next_link`` with
    ``with_keyset_pagination_parameters`` to get the next page.
    """

    pagination: str | None = None
    per_page: int | None = None
    page: int | None = None
    page_token: str | None = None
    order_by: str | None = None
    sort: str | None = None


class BasicUser(GitLabModel):
    id: int = 0
    username: str = ""
    name: str = ""
    state: str = ""
    locked: bool = False
    created_at: datetime | None = None
    avatar_url: str = ""
    web_url: str = ""


class Commit(GitLabModel):
    id: str = ""
    short_id: str = ""
    title: str = ""
    message: str = ""
    author_name: str = ""
    author_email: str = ""
    authored_date: datetime | None = None
    committer_name: str = ""
    committer_email: str = ""
    committed_date: datetime | None = None
    created_at: datetime | None = None
    parent_ids: list[str] = Field(default_factory=list)
    web_url: str = ""
