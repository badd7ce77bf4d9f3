"""Issues service.

Updating an issue distinguishes three states for the due date, epic,
milestone and weight: left unchanged (field unset), set to a value, or
cleared (``reset_<field>=True``, sent as JSON ``null``)::

    client.issues.update_issue("group/project", 7, UpdateIssueOptions(reset_due_date=True))
"""

from datetime import date, datetime
from typing import Any

from pydantic import Field, field_validator

from gitlab_client.client.service import Endpoint, Service
from gitlab_client.models import BasicUser, GitLabModel, Labels, ListOptions, RequestOptions, reset_flag


class IssueReferences(GitLabModel):
    short: str = ""
    relative: str = ""
    full: str = ""


class IssueLinks(GitLabModel):
    self_url: str = Field(default="", alias="self")
    notes: str = ""
    award_emoji: str = ""
    project: str = ""


class TimeStats(GitLabModel):
    human_time_estimate: str = ""
    human_total_time_spent: str = ""
    time_estimate: int = 0
    total_time_spent: int = 0


class Milestone(GitLabModel):
    id: int = 0
    iid: int = 0
    group_id: int = 0
    project_id: int = 0
    title: str = ""
    description: str = ""
    state: str = ""
    expired: bool = False
    start_date: date | None = None
    due_date: date | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    web_url: str = ""


class LabelDetails(GitLabModel):
    id: int = 0
    name: str = ""
    color: str = ""
    description: str = ""
    description_html: str = ""
    text_color: str = ""


class TaskCompletionStatus(GitLabModel):
    count: int = 0
    completed_count: int = 0


class Issue(GitLabModel):
    id: int = 0
    iid: int = 0
    external_id: str = ""
    state: str = ""
    title: str = ""
    description: str = ""
    health_status: str = ""
    author: BasicUser | None = None
    milestone: Milestone | None = None
    project_id: int = 0
    assignee: BasicUser | None = None
    assignees: list[BasicUser] = Field(default_factory=list)
    closed_by: BasicUser | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    closed_at: datetime | None = None
    moved_to_id: int = 0
    labels: list[str] = Field(default_factory=list)
    label_details: list[LabelDetails] = Field(default_factory=list)
    upvotes: int = 0
    downvotes: int = 0
    due_date: date | None = None
    web_url: str = ""
    references: IssueReferences | None = None
    time_stats: TimeStats | None = None
    confidential: bool = False
    weight: int = 0
    discussion_locked: bool = False
    issue_type: str = ""
    subscribed: bool = False
    user_notes_count: int = 0
    merge_requests_count: int = 0
    epic_issue_id: int = 0
    epic: dict[str, Any] | None = None
    iteration: dict[str, Any] | None = None
    task_completion_status: TaskCompletionStatus | None = None
    service_desk_reply_to: str = ""
    links: IssueLinks | None = Field(default=None, alias="_links")

    @field_validator("labels", mode="before")
    @classmethod
    def _label_names(cls, value: Any) -> Any:
        # with_labels_details=true returns label objects instead of names
        if isinstance(value, list):
            return [item.get("name", "") if isinstance(item, dict) else item for item in value]
        return value


class ListIssuesOptions(ListOptions):
    state: str | None = None
    labels: Labels | None = None
    not_labels: Labels | None = Field(default=None, alias="not[labels]")
    with_labels_details: bool | None = None
    milestone: str | None = None
    not_milestone: str | None = Field(default=None, alias="not[milestone]")
    scope: str | None = None
    author_id: int | None = None
    author_username: str | None = None
    not_author_username: str | None = Field(default=None, alias="not[author_username]")
    assignee_id: int | str | None = None
    assignee_username: str | None = None
    my_reaction_emoji: str | None = None
    iids: list[int] | None = None
    search: str | None = None
    in_fields: str | None = Field(default=None, alias="in")
    created_after: datetime | None = None
    created_before: datetime | None = None
    due_date: str | None = None
    updated_after: datetime | None = None
    updated_before: datetime | None = None
    confidential: bool | None = None
    issue_type: str | None = None
    iteration_id: int | None = None


class ListProjectIssuesOptions(ListIssuesOptions):
    pass


class ListGroupIssuesOptions(ListIssuesOptions):
    pass


class CreateIssueOptions(RequestOptions):
    iid: int | None = None
    title: str | None = None
    description: str | None = None
    confidential: bool | None = None
    assignee_ids: list[int] | None = None
    milestone_id: int | None = None
    labels: Labels | None = None
    created_at: datetime | None = None
    due_date: date | None = None
    epic_id: int | None = None
    merge_request_to_resolve_discussions_of: int | None = None
    discussion_to_resolve: str | None = None
    weight: int | None = None
    issue_type: str | None = None


class UpdateIssueOptions(RequestOptions):
    """Options of UpdateIssue.

    ``reset_due_date``, ``reset_epic_id``, ``reset_milestone_id`` and
    ``reset_weight`` clear the matching field on the issue and take precedence
    over a value set for it.
    """

    title: str | None = None
    description: str | None = None
    confidential: bool | None = None
    assignee_ids: list[int] | None = None
    milestone_id: int | None = None
    labels: Labels | None = None
    add_labels: Labels | None = None
    remove_labels: Labels | None = None
    state_event: str | None = None
    updated_at: datetime | None = None
    due_date: date | None = None
    epic_id: int | None = None
    weight: int | None = None
    discussion_locked: bool | None = None
    issue_type: str | None = None

    reset_due_date: bool = reset_flag()
    reset_epic_id: bool = reset_flag()
    reset_milestone_id: bool = reset_flag()
    reset_weight: bool = reset_flag()


class ReorderIssueOptions(RequestOptions):
    move_after_id: int | None = None
    move_before_id: int | None = None


class MoveIssueOptions(RequestOptions):
    to_project_id: int | None = None


class SetTimeEstimateOptions(RequestOptions):
    duration: str | None = None


class AddSpentTimeOptions(RequestOptions):
    duration: str | None = None
    summary: str | None = None


class IssuesService(Service):
    """Project and group issues.

    Wraps https://docs.gitlab.com/api/issues/
    """

    list_issues = Endpoint(
        "GET",
        "issues",
        options=ListIssuesOptions,
        result=list[Issue],
        doc="List issues visible to the authenticated user (created by them unless scope says otherwise).",
    )
    list_group_issues = Endpoint("GET", "groups/{gid}/issues", options=ListGroupIssuesOptions, result=list[Issue])
    list_project_issues = Endpoint(
        "GET", "projects/{pid}/issues", options=ListProjectIssuesOptions, result=list[Issue]
    )
    get_issue_by_id = Endpoint("GET", "issues/{issue}", result=Issue, doc="Get an issue by its global ID (admin only).")
    get_issue = Endpoint("GET", "projects/{pid}/issues/{issue}", result=Issue)
    create_issue = Endpoint("POST", "projects/{pid}/issues", options=CreateIssueOptions, result=Issue)
    update_issue = Endpoint("PUT", "projects/{pid}/issues/{issue}", options=UpdateIssueOptions, result=Issue)
    delete_issue = Endpoint("DELETE", "projects/{pid}/issues/{issue}")
    reorder_issue = Endpoint(
        "PUT", "projects/{pid}/issues/{issue}/reorder", options=ReorderIssueOptions, result=Issue
    )
    move_issue = Endpoint("POST", "projects/{pid}/issues/{issue}/move", options=MoveIssueOptions, result=Issue)
    subscribe_to_issue = Endpoint("POST", "projects/{pid}/issues/{issue}/subscribe", result=Issue)
    unsubscribe_from_issue = Endpoint("POST", "projects/{pid}/issues/{issue}/unsubscribe", result=Issue)
    create_todo = Endpoint("POST", "projects/{pid}/issues/{issue}/todo", result=dict[str, Any])
    list_merge_requests_closing_issue = Endpoint(
        "GET",
        "projects/{pid}/issues/{issue}/closed_by",
        options=ListOptions,
        result=list[dict[str, Any]],
    )
    list_merge_requests_related_to_issue = Endpoint(
        "GET",
        "projects/{pid}/issues/{issue}/related_merge_requests",
        options=ListOptions,
        result=list[dict[str, Any]],
    )
    set_time_estimate = Endpoint(
        "POST", "projects/{pid}/issues/{issue}/time_estimate", options=SetTimeEstimateOptions, result=TimeStats
    )
    reset_time_estimate = Endpoint("POST", "projects/{pid}/issues/{issue}/reset_time_estimate", result=TimeStats)
    add_spent_time = Endpoint(
        "POST", "projects/{pid}/issues/{issue}/add_spent_time", options=AddSpentTimeOptions, result=TimeStats
    )
    reset_spent_time = Endpoint("POST", "projects/{pid}/issues/{issue}/reset_spent_time", result=TimeStats)
    get_time_spent = Endpoint("GET", "projects/{pid}/issues/{issue}/time_stats", result=TimeStats)
    get_participants = Endpoint("GET", "projects/{pid}/issues/{issue}/participants", result=list[BasicUser])
