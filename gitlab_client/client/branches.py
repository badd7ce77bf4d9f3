"""Repository branches service."""

from gitlab_client.client.service import Endpoint, Service
from gitlab_client.models import Commit, GitLabModel, ListOptions, RequestOptions


class Branch(GitLabModel):
    commit: Commit | None = None
    name: str = ""
    protected: bool = False
    merged: bool = False
    default: bool = False
    can_push: bool = False
    developers_can_push: bool = False
    developers_can_merge: bool = False
    web_url: str = ""


class ListBranchesOptions(ListOptions):
    search: str | None = None
    regex: str | None = None


class CreateBranchOptions(RequestOptions):
    branch: str | None = None
    ref: str | None = None


class BranchesService(Service):
    """Branches of a project repository.

    Branch names are escaped as one path segment; ``feature/x`` is sent as
    ``feature%2Fx``.

    Wraps https://docs.gitlab.com/api/branches/
    """

    list_branches = Endpoint(
        "GET", "projects/{pid}/repository/branches", options=ListBranchesOptions, result=list[Branch]
    )
    get_branch = Endpoint("GET", "projects/{pid}/repository/branches/{branch}", result=Branch)
    create_branch = Endpoint(
        "POST", "projects/{pid}/repository/branches", options=CreateBranchOptions, result=Branch
    )
    delete_branch = Endpoint("DELETE", "projects/{pid}/repository/branches/{branch}")
    delete_merged_branches = Endpoint(
        "DELETE",
        "projects/{pid}/repository/merged_branches",
        doc="Delete every branch merged into the default branch; protected branches are kept.",
    )
