"""Merge requests service, including notes and discussion threads."""

from datetime import datetime
from typing import Any

from pydantic import Field

from gitlab_client.client.issues import (
    AddSpentTimeOptions,
    Issue,
    IssueReferences,
    LabelDetails,
    Milestone,
    SetTimeEstimateOptions,
    TaskCompletionStatus,
    TimeStats,
)
from gitlab_client.client.pipelines import PipelineInfo
from gitlab_client.client.service import Endpoint, Service
from gitlab_client.models import BasicUser, Commit, GitLabModel, Labels, ListOptions, RequestOptions


class BasicMergeRequest(GitLabModel):
    """Merge request as returned by the list endpoints."""

    id: int = 0
    iid: int = 0
    target_branch: str = ""
    source_branch: str = ""
    project_id: int = 0
    title: str = ""
    state: str = ""
    imported: bool = False
    imported_from: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    upvotes: int = 0
    downvotes: int = 0
    author: BasicUser | None = None
    assignee: BasicUser | None = None
    assignees: list[BasicUser] = Field(default_factory=list)
    reviewers: list[BasicUser] = Field(default_factory=list)
    source_project_id: int = 0
    target_project_id: int = 0
    labels: list[str] = Field(default_factory=list)
    label_details: list[LabelDetails] = Field(default_factory=list)
    description: str = ""
    draft: bool = False
    milestone: Milestone | None = None
    merge_when_pipeline_succeeds: bool = False
    detailed_merge_status: str = ""
    merge_user: BasicUser | None = None
    merged_by: BasicUser | None = None
    merged_at: datetime | None = None
    closed_by: BasicUser | None = None
    closed_at: datetime | None = None
    sha: str = ""
    merge_commit_sha: str = ""
    squash_commit_sha: str = ""
    user_notes_count: int = 0
    should_remove_source_branch: bool = False
    force_remove_source_branch: bool = False
    allow_collaboration: bool = False
    web_url: str = ""
    references: IssueReferences | None = None
    discussion_locked: bool = False
    time_stats: TimeStats | None = None
    squash: bool = False
    squash_on_merge: bool = False
    task_completion_status: TaskCompletionStatus | None = None
    has_conflicts: bool = False
    blocking_discussions_resolved: bool = False


class MergeRequestDiffRefs(GitLabModel):
    base_sha: str = ""
    head_sha: str = ""
    start_sha: str = ""


class MergeRequestDiff(GitLabModel):
    old_path: str = ""
    new_path: str = ""
    a_mode: str = ""
    b_mode: str = ""
    diff: str = ""
    new_file: bool = False
    renamed_file: bool = False
    deleted_file: bool = False
    generated_file: bool = False


class MergeRequest(BasicMergeRequest):
    merge_error: str = ""
    first_contribution: bool = False
    changes_count: str = ""
    user: dict[str, Any] = Field(default_factory=dict)
    pipeline: PipelineInfo | None = None
    head_pipeline: dict[str, Any] | None = None
    diff_refs: MergeRequestDiffRefs | None = None
    changes: list[MergeRequestDiff] = Field(default_factory=list)
    diverged_commits_count: int = 0
    rebase_in_progress: bool = False
    approvals_before_merge: int = 0


class MergeRequestApprovals(GitLabModel):
    id: int = 0
    iid: int = 0
    project_id: int = 0
    title: str = ""
    state: str = ""
    approved: bool = False
    approvals_required: int = 0
    approvals_left: int = 0
    user_has_approved: bool = False
    user_can_approve: bool = False
    approved_by: list[dict[str, Any]] = Field(default_factory=list)


class Note(GitLabModel):
    id: int = 0
    type: str = ""
    body: str = ""
    attachment: str = ""
    title: str = ""
    file_name: str = ""
    author: BasicUser | None = None
    system: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
    noteable_id: int = 0
    noteable_type: str = ""
    noteable_iid: int = 0
    commit_id: str = ""
    position: dict[str, Any] | None = None
    resolvable: bool = False
    resolved: bool = False
    resolved_by: BasicUser | None = None
    confidential: bool = False
    internal: bool = False


class Discussion(GitLabModel):
    id: str = ""
    individual_note: bool = False
    notes: list[Note] = Field(default_factory=list)


class ListMergeRequestsOptions(ListOptions):
    iids: list[int] | None = None
    state: str | None = None
    milestone: str | None = None
    view: str | None = None
    labels: Labels | None = None
    not_labels: Labels | None = Field(default=None, alias="not[labels]")
    with_labels_details: bool | None = None
    with_merge_status_recheck: bool | None = None
    created_after: datetime | None = None
    created_before: datetime | None = None
    updated_after: datetime | None = None
    updated_before: datetime | None = None
    scope: str | None = None
    author_id: int | None = None
    author_username: str | None = None
    not_author_username: str | None = Field(default=None, alias="not[author_username]")
    assignee_id: int | str | None = None
    reviewer_id: int | str | None = None
    reviewer_username: str | None = None
    my_reaction_emoji: str | None = None
    source_branch: str | None = None
    target_branch: str | None = None
    search: str | None = None
    draft: bool | None = None


class ListProjectMergeRequestsOptions(ListMergeRequestsOptions):
    pass


class ListGroupMergeRequestsOptions(ListMergeRequestsOptions):
    pass


class GetMergeRequestsOptions(RequestOptions):
    render_html: bool | None = None
    include_diverged_commits_count: bool | None = None
    include_rebase_in_progress: bool | None = None


class GetMergeRequestChangesOptions(RequestOptions):
    access_raw_diffs: bool | None = None
    unidiff: bool | None = None


class CreateMergeRequestOptions(RequestOptions):
    title: str | None = None
    description: str | None = None
    source_branch: str | None = None
    target_branch: str | None = None
    labels: Labels | None = None
    assignee_id: int | None = None
    assignee_ids: list[int] | None = None
    reviewer_ids: list[int] | None = None
    target_project_id: int | None = None
    milestone_id: int | None = None
    remove_source_branch: bool | None = None
    squash: bool | None = None
    allow_collaboration: bool | None = None
    approvals_before_merge: int | None = None


class UpdateMergeRequestOptions(RequestOptions):
    title: str | None = None
    description: str | None = None
    target_branch: str | None = None
    assignee_id: int | None = None
    assignee_ids: list[int] | None = None
    reviewer_ids: list[int] | None = None
    labels: Labels | None = None
    add_labels: Labels | None = None
    remove_labels: Labels | None = None
    milestone_id: int | None = None
    state_event: str | None = None
    remove_source_branch: bool | None = None
    squash: bool | None = None
    discussion_locked: bool | None = None
    allow_collaboration: bool | None = None


class AcceptMergeRequestOptions(RequestOptions):
    auto_merge: bool | None = None
    merge_commit_message: str | None = None
    squash_commit_message: str | None = None
    squash: bool | None = None
    should_remove_source_branch: bool | None = None
    sha: str | None = None


class RebaseMergeRequestOptions(RequestOptions):
    skip_ci: bool | None = None


class CreateMergeRequestNoteOptions(RequestOptions):
    body: str | None = None
    internal: bool | None = None
    created_at: datetime | None = None


class DiffPositionOptions(RequestOptions):
    """Anchor of an inline comment on a diff line."""

    position_type: str | None = None
    base_sha: str | None = None
    head_sha: str | None = None
    start_sha: str | None = None
    new_path: str | None = None
    old_path: str | None = None
    new_line: int | None = None
    old_line: int | None = None


class CreateMergeRequestDiscussionOptions(RequestOptions):
    body: str | None = None
    commit_id: str | None = None
    created_at: datetime | None = None
    position: DiffPositionOptions | None = None


class AddMergeRequestDiscussionNoteOptions(RequestOptions):
    body: str | None = None
    created_at: datetime | None = None


class ResolveMergeRequestDiscussionOptions(RequestOptions):
    resolved: bool | None = None


class MergeRequestsService(Service):
    """Merge requests and their notes, discussions and pipelines.

    Wraps https://docs.gitlab.com/api/merge_requests/, https://docs.gitlab.com/api/notes/
    and https://docs.gitlab.com/api/discussions/
    """

    list_merge_requests = Endpoint("GET", "merge_requests", options=ListMergeRequestsOptions, result=list[BasicMergeRequest])
    list_project_merge_requests = Endpoint(
        "GET",
        "projects/{pid}/merge_requests",
        options=ListProjectMergeRequestsOptions,
        result=list[BasicMergeRequest],
    )
    list_group_merge_requests = Endpoint(
        "GET",
        "groups/{gid}/merge_requests",
        options=ListGroupMergeRequestsOptions,
        result=list[BasicMergeRequest],
    )
    get_merge_request = Endpoint(
        "GET", "projects/{pid}/merge_requests/{mr}", options=GetMergeRequestsOptions, result=MergeRequest
    )
    get_merge_request_approvals = Endpoint(
        "GET", "projects/{pid}/merge_requests/{mr}/approvals", result=MergeRequestApprovals
    )
    get_merge_request_commits = Endpoint(
        "GET", "projects/{pid}/merge_requests/{mr}/commits", options=ListOptions, result=list[Commit]
    )
    get_merge_request_changes = Endpoint(
        "GET",
        "projects/{pid}/merge_requests/{mr}/changes",
        options=GetMergeRequestChangesOptions,
        result=MergeRequest,
    )
    list_merge_request_diffs = Endpoint(
        "GET", "projects/{pid}/merge_requests/{mr}/diffs", options=ListOptions, result=list[MergeRequestDiff]
    )
    show_merge_request_raw_diffs = Endpoint(
        "GET",
        "projects/{pid}/merge_requests/{mr}/raw_diffs",
        result=bytes,
        doc="Download the diffs of a merge request as a plain-text patch.",
    )
    get_merge_request_participants = Endpoint(
        "GET", "projects/{pid}/merge_requests/{mr}/participants", result=list[BasicUser]
    )
    list_merge_request_pipelines = Endpoint(
        "GET", "projects/{pid}/merge_requests/{mr}/pipelines", result=list[PipelineInfo]
    )
    create_merge_request_pipeline = Endpoint(
        "POST", "projects/{pid}/merge_requests/{mr}/pipelines", result=PipelineInfo
    )
    get_issues_closed_on_merge = Endpoint(
        "GET", "projects/{pid}/merge_requests/{mr}/closes_issues", options=ListOptions, result=list[Issue]
    )
    list_related_issues = Endpoint(
        "GET", "projects/{pid}/merge_requests/{mr}/related_issues", options=ListOptions, result=list[Issue]
    )
    create_merge_request = Endpoint(
        "POST", "projects/{pid}/merge_requests", options=CreateMergeRequestOptions, result=MergeRequest
    )
    update_merge_request = Endpoint(
        "PUT",
        "projects/{pid}/merge_requests/{mr}",
        options=UpdateMergeRequestOptions,
        result=MergeRequest,
        doc="Update a merge request; state_event='close' or 'reopen' changes its state.",
    )
    delete_merge_request = Endpoint("DELETE", "projects/{pid}/merge_requests/{mr}")
    accept_merge_request = Endpoint(
        "PUT",
        "projects/{pid}/merge_requests/{mr}/merge",
        options=AcceptMergeRequestOptions,
        result=MergeRequest,
        doc="Merge a merge request, or set it to merge automatically when auto_merge is true.",
    )
    cancel_merge_when_pipeline_succeeds = Endpoint(
        "POST", "projects/{pid}/merge_requests/{mr}/cancel_merge_when_pipeline_succeeds", result=MergeRequest
    )
    rebase_merge_request = Endpoint(
        "PUT", "projects/{pid}/merge_requests/{mr}/rebase", options=RebaseMergeRequestOptions
    )
    subscribe_to_merge_request = Endpoint("POST", "projects/{pid}/merge_requests/{mr}/subscribe", result=MergeRequest)
    unsubscribe_from_merge_request = Endpoint(
        "POST", "projects/{pid}/merge_requests/{mr}/unsubscribe", result=MergeRequest
    )
    set_time_estimate = Endpoint(
        "POST",
        "projects/{pid}/merge_requests/{mr}/time_estimate",
        options=SetTimeEstimateOptions,
        result=TimeStats,
    )
    reset_time_estimate = Endpoint(
        "POST", "projects/{pid}/merge_requests/{mr}/reset_time_estimate", result=TimeStats
    )
    add_spent_time = Endpoint(
        "POST",
        "projects/{pid}/merge_requests/{mr}/add_spent_time",
        options=AddSpentTimeOptions,
        result=TimeStats,
    )
    reset_spent_time = Endpoint("POST", "projects/{pid}/merge_requests/{mr}/reset_spent_time", result=TimeStats)
    get_time_spent = Endpoint("GET", "projects/{pid}/merge_requests/{mr}/time_stats", result=TimeStats)

    # Notes and discussions

    list_merge_request_notes = Endpoint(
        "GET", "projects/{pid}/merge_requests/{mr}/notes", options=ListOptions, result=list[Note]
    )
    create_merge_request_note = Endpoint(
        "POST",
        "projects/{pid}/merge_requests/{mr}/notes",
        options=CreateMergeRequestNoteOptions,
        result=Note,
    )
    list_merge_request_discussions = Endpoint(
        "GET", "projects/{pid}/merge_requests/{mr}/discussions", options=ListOptions, result=list[Discussion]
    )
    create_merge_request_discussion = Endpoint(
        "POST",
        "projects/{pid}/merge_requests/{mr}/discussions",
        options=CreateMergeRequestDiscussionOptions,
        result=Discussion,
        doc="Start a discussion thread; with a position it becomes an inline comment on a diff line.",
    )
    add_merge_request_discussion_note = Endpoint(
        "POST",
        "projects/{pid}/merge_requests/{mr}/discussions/{discussion}/notes",
        options=AddMergeRequestDiscussionNoteOptions,
        result=Note,
    )
    resolve_merge_request_discussion = Endpoint(
        "PUT",
        "projects/{pid}/merge_requests/{mr}/discussions/{discussion}",
        options=ResolveMergeRequestDiscussionOptions,
        result=Discussion,
    )
