"""Project labels service."""

from typing import Any

from pydantic import model_validator

from gitlab_client.client.service import Endpoint, Service
from gitlab_client.models import GitLabModel, ListOptions, RequestOptions


class Label(GitLabModel):
    id: int = 0
    name: str = ""
    color: str = ""
    text_color: str = ""
    description: str = ""
    open_issues_count: int = 0
    closed_issues_count: int = 0
    open_merge_requests_count: int = 0
    subscribed: bool = False
    priority: int = 0
    is_project_label: bool = False

    @model_validator(mode="before")
    @classmethod
    def _title_as_name(cls, data: Any) -> Any:
        # Some endpoints (e.g. subscribe) answer with "title" instead of "name"
        if isinstance(data, dict) and not data.get("name") and isinstance(data.get("title"), str):
            return {**data, "name": data["title"]}
        return data


class ListLabelsOptions(ListOptions):
    with_counts: bool | None = None
    include_ancestor_groups: bool | None = None
    search: str | None = None


class CreateLabelOptions(RequestOptions):
    name: str | None = None
    color: str | None = None
    description: str | None = None
    priority: int | None = None


class UpdateLabelOptions(RequestOptions):
    new_name: str | None = None
    color: str | None = None
    description: str | None = None
    priority: int | None = None


class LabelsService(Service):
    """Labels of a project. A label is addressed by its ID or its name.

    Wraps https://docs.gitlab.com/api/labels/
    """

    list_labels = Endpoint("GET", "projects/{pid}/labels", options=ListLabelsOptions, result=list[Label])
    get_label = Endpoint("GET", "projects/{pid}/labels/{label}", result=Label)
    create_label = Endpoint("POST", "projects/{pid}/labels", options=CreateLabelOptions, result=Label)
    update_label = Endpoint("PUT", "projects/{pid}/labels/{label}", options=UpdateLabelOptions, result=Label)
    delete_label = Endpoint("DELETE", "projects/{pid}/labels/{label}")
    subscribe_to_label = Endpoint("POST", "projects/{pid}/labels/{label}/subscribe", result=Label)
    unsubscribe_from_label = Endpoint("POST", "projects/{pid}/labels/{label}/unsubscribe")
    promote_label = Endpoint(
        "PUT",
        "projects/{pid}/labels/{label}/promote",
        doc="Promote a project label to a group label.",
    )
