"""Releases service."""

from datetime import date, datetime

from pydantic import Field

from gitlab_client.client.release_links import LinkType, ReleaseLink
from gitlab_client.client.service import Endpoint, Service
from gitlab_client.models import Commit, GitLabModel, ListOptions, RequestOptions


class ReleaseAuthor(GitLabModel):
    id: int = 0
    name: str = ""
    username: str = ""
    state: str = ""
    avatar_url: str = ""
    web_url: str = ""


class ReleaseMilestoneIssueStats(GitLabModel):
    total: int = 0
    closed: int = 0


class ReleaseMilestone(GitLabModel):
    id: int = 0
    iid: int = 0
    project_id: int = 0
    title: str = ""
    description: str = ""
    state: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    due_date: date | None = None
    start_date: date | None = None
    web_url: str = ""
    issue_stats: ReleaseMilestoneIssueStats | None = None


class ReleaseSource(GitLabModel):
    format: str = ""
    url: str = ""


class ReleaseAssets(GitLabModel):
    count: int = 0
    sources: list[ReleaseSource] = Field(default_factory=list)
    links: list[ReleaseLink] = Field(default_factory=list)
    evidence_file_path: str = ""


class ReleaseEvidence(GitLabModel):
    sha: str = ""
    filepath: str = ""
    collected_at: datetime | None = None


class ReleaseURLs(GitLabModel):
    closed_issues_url: str = ""
    closed_merge_requests_url: str = ""
    edit_url: str = ""
    merged_merge_requests_url: str = ""
    opened_issues_url: str = ""
    opened_merge_requests_url: str = ""
    self_url: str = Field(default="", alias="self")


class Release(GitLabModel):
    tag_name: str = ""
    name: str = ""
    description: str = ""
    description_html: str = ""
    created_at: datetime | None = None
    released_at: datetime | None = None
    author: ReleaseAuthor | None = None
    commit: Commit | None = None
    milestones: list[ReleaseMilestone] = Field(default_factory=list)
    upcoming_release: bool = False
    commit_path: str = ""
    tag_path: str = ""
    assets: ReleaseAssets | None = None
    evidences: list[ReleaseEvidence] = Field(default_factory=list)
    links: ReleaseURLs | None = Field(default=None, alias="_links")


class ListReleasesOptions(ListOptions):
    include_html_description: bool | None = None


class ReleaseAssetLinkOptions(RequestOptions):
    name: str | None = None
    url: str | None = None
    file_path: str | None = Field(default=None, alias="filepath")
    direct_asset_path: str | None = None
    link_type: LinkType | None = None


class ReleaseAssetsOptions(RequestOptions):
    links: list[ReleaseAssetLinkOptions] | None = None


class CreateReleaseOptions(RequestOptions):
    name: str | None = None
    tag_name: str | None = None
    tag_message: str | None = None
    description: str | None = None
    ref: str | None = None
    milestones: list[str] | None = None
    assets: ReleaseAssetsOptions | None = None
    released_at: datetime | None = None


class UpdateReleaseOptions(RequestOptions):
    name: str | None = None
    description: str | None = None
    milestones: list[str] | None = None
    released_at: datetime | None = None


class ReleasesService(Service):
    """Project releases.

    Tag names are escaped as a single path segment, so tags containing
    slashes (``release/1.0``) address the right release.

    Wraps https://docs.gitlab.com/api/releases/
    """

    list_releases = Endpoint(
        "GET",
        "projects/{pid}/releases",
        options=ListReleasesOptions,
        result=list[Release],
        doc="List releases of a project, sorted by released_at descending unless ordered otherwise.",
    )
    get_release = Endpoint("GET", "projects/{pid}/releases/{tag_name}", result=Release)
    get_latest_release = Endpoint(
        "GET",
        "projects/{pid}/releases/permalink/latest",
        result=Release,
        doc="Get the most recent release, following the latest-release permalink.",
    )
    create_release = Endpoint("POST", "projects/{pid}/releases", options=CreateReleaseOptions, result=Release)
    update_release = Endpoint(
        "PUT", "projects/{pid}/releases/{tag_name}", options=UpdateReleaseOptions, result=Release
    )
    delete_release = Endpoint(
        "DELETE",
        "projects/{pid}/releases/{tag_name}",
        result=Release,
        doc="Delete a release; the tag itself is kept.",
    )
