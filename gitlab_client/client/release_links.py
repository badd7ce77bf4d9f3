"""Release asset links service."""

from enum import StrEnum

from pydantic import Field

from gitlab_client.client.service import Endpoint, Service
from gitlab_client.models import GitLabModel, ListOptions, RequestOptions


class LinkType(StrEnum):
    OTHER = "other"
    RUNBOOK = "runbook"
    IMAGE = "image"
    PACKAGE = "package"


class ReleaseLink(GitLabModel):
    id: int = 0
    name: str = ""
    url: str = ""
    direct_asset_url: str = ""
    external: bool = False
    link_type: str = ""


class ReleaseLinkOptions(RequestOptions):
    """Fields shared by creating and updating a release link."""

    name: str | None = None
    url: str | None = None
    file_path: str | None = Field(default=None, alias="filepath")
    direct_asset_path: str | None = None
    link_type: LinkType | None = None


class CreateReleaseLinkOptions(ReleaseLinkOptions):
    pass


class UpdateReleaseLinkOptions(ReleaseLinkOptions):
    pass


class ReleaseLinksService(Service):
    """Links attached as assets to a release.

    Wraps https://docs.gitlab.com/api/releases/links/
    """

    list_release_links = Endpoint(
        "GET", "projects/{pid}/releases/{tag_name}/assets/links", options=ListOptions, result=list[ReleaseLink]
    )
    get_release_link = Endpoint("GET", "projects/{pid}/releases/{tag_name}/assets/links/{link}", result=ReleaseLink)
    create_release_link = Endpoint(
        "POST",
        "projects/{pid}/releases/{tag_name}/assets/links",
        options=CreateReleaseLinkOptions,
        result=ReleaseLink,
    )
    update_release_link = Endpoint(
        "PUT",
        "projects/{pid}/releases/{tag_name}/assets/links/{link}",
        options=UpdateReleaseLinkOptions,
        result=ReleaseLink,
    )
    delete_release_link = Endpoint(
        "DELETE",
        "projects/{pid}/releases/{tag_name}/assets/links/{link}",
        result=ReleaseLink,
        doc="Delete a release link; GitLab answers with the deleted link.",
    )
