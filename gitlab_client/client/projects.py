"""Projects service."""

import logging
from datetime import datetime
from typing import IO, Any

from pydantic import Field

from gitlab_client.client.service import Endpoint, Service
from gitlab_client.models import AccessLevel, BasicUser, GitLabModel, ListOptions, RequestOptions, Visibility
from gitlab_client.request_options import RequestOption
from gitlab_client.response import Response
from gitlab_client.utils.resolvers import parse_id, path_escape

logger = logging.getLogger(__name__)


class ProjectNamespace(GitLabModel):
    id: int = 0
    name: str = ""
    path: str = ""
    kind: str = ""
    full_path: str = ""
    parent_id: int = 0
    avatar_url: str = ""
    web_url: str = ""


class ProjectStatistics(GitLabModel):
    commit_count: int = 0
    storage_size: int = 0
    repository_size: int = 0
    wiki_size: int = 0
    lfs_objects_size: int = 0
    job_artifacts_size: int = 0
    pipeline_artifacts_size: int = 0
    packages_size: int = 0
    snippets_size: int = 0
    uploads_size: int = 0
    container_registry_size: int = 0


class Project(GitLabModel):
    id: int = 0
    description: str = ""
    name: str = ""
    name_with_namespace: str = ""
    path: str = ""
    path_with_namespace: str = ""
    default_branch: str = ""
    visibility: str = ""
    archived: bool = False
    empty_repo: bool = False
    ssh_url_to_repo: str = ""
    http_url_to_repo: str = ""
    web_url: str = ""
    readme_url: str = ""
    avatar_url: str = ""
    topics: list[str] = Field(default_factory=list)
    owner: BasicUser | None = None
    namespace: ProjectNamespace | None = None
    creator_id: int = 0
    forks_count: int = 0
    star_count: int = 0
    open_issues_count: int = 0
    issues_enabled: bool = False
    merge_requests_enabled: bool = False
    jobs_enabled: bool = False
    wiki_enabled: bool = False
    snippets_enabled: bool = False
    container_registry_enabled: bool = False
    shared_runners_enabled: bool = False
    public_jobs: bool = False
    only_allow_merge_if_pipeline_succeeds: bool = False
    only_allow_merge_if_all_discussions_are_resolved: bool = False
    remove_source_branch_after_merge: bool = False
    merge_method: str = ""
    squash_option: str = ""
    ci_config_path: str = ""
    created_at: datetime | None = None
    last_activity_at: datetime | None = None
    marked_for_deletion_on: str = ""
    forked_from_project: dict[str, Any] | None = None
    statistics: ProjectStatistics | None = None
    links: dict[str, str] = Field(default_factory=dict, alias="_links")


class ListProjectsOptions(ListOptions):
    active: bool | None = None
    archived: bool | None = None
    id_after: int | None = None
    id_before: int | None = None
    imported: bool | None = None
    include_hidden: bool | None = None
    include_pending_delete: bool | None = None
    last_activity_after: datetime | None = None
    last_activity_before: datetime | None = None
    membership: bool | None = None
    min_access_level: AccessLevel | None = None
    owned: bool | None = None
    repository_checksum_failed: bool | None = None
    repository_storage: str | None = None
    search: str | None = None
    search_namespaces: bool | None = None
    simple: bool | None = None
    starred: bool | None = None
    statistics: bool | None = None
    topic: str | None = None
    visibility: Visibility | None = None
    wiki_checksum_failed: bool | None = None
    with_custom_attributes: bool | None = None
    with_issues_enabled: bool | None = None
    with_merge_requests_enabled: bool | None = None
    with_programming_language: str | None = None


class GetProjectOptions(RequestOptions):
    license: bool | None = None
    statistics: bool | None = None
    with_custom_attributes: bool | None = None


class CreateProjectOptions(RequestOptions):
    name: str | None = None
    path: str | None = None
    namespace_id: int | None = None
    default_branch: str | None = None
    description: str | None = None
    visibility: Visibility | None = None
    initialize_with_readme: bool | None = None
    import_url: str | None = None
    topics: list[str] | None = None
    issues_enabled: bool | None = None
    merge_requests_enabled: bool | None = None
    jobs_enabled: bool | None = None
    wiki_enabled: bool | None = None
    snippets_enabled: bool | None = None
    container_registry_enabled: bool | None = None
    shared_runners_enabled: bool | None = None
    public_jobs: bool | None = None
    only_allow_merge_if_pipeline_succeeds: bool | None = None
    only_allow_merge_if_all_discussions_are_resolved: bool | None = None
    remove_source_branch_after_merge: bool | None = None
    merge_method: str | None = None
    squash_option: str | None = None
    ci_config_path: str | None = None


class EditProjectOptions(CreateProjectOptions):
    archived: bool | None = None


class ForkProjectOptions(RequestOptions):
    name: str | None = None
    namespace_id: int | None = None
    namespace_path: str | None = None
    path: str | None = None
    description: str | None = None
    visibility: Visibility | None = None
    branches: str | None = None
    mr_default_target_self: bool | None = None


class DeleteProjectOptions(RequestOptions):
    full_path: str | None = None
    permanently_remove: bool | None = None


class ShareWithGroupOptions(RequestOptions):
    group_id: int | None = None
    group_access: AccessLevel | None = None
    expires_at: str | None = None


class TransferProjectOptions(RequestOptions):
    namespace: Any = None


class ProjectsService(Service):
    """Projects and their avatars.

    Wraps https://docs.gitlab.com/api/projects/
    """

    list_projects = Endpoint("GET", "projects", options=ListProjectsOptions, result=list[Project])
    list_user_projects = Endpoint(
        "GET", "users/{uid}/projects", options=ListProjectsOptions, result=list[Project]
    )
    list_user_starred_projects = Endpoint(
        "GET", "users/{uid}/starred_projects", options=ListProjectsOptions, result=list[Project]
    )
    list_project_forks = Endpoint("GET", "projects/{pid}/forks", options=ListProjectsOptions, result=list[Project])
    get_project = Endpoint("GET", "projects/{pid}", options=GetProjectOptions, result=Project)
    get_project_languages = Endpoint(
        "GET",
        "projects/{pid}/languages",
        result=dict[str, float],
        doc="Languages used in the repository, as percentages.",
    )
    create_project = Endpoint("POST", "projects", options=CreateProjectOptions, result=Project)
    edit_project = Endpoint("PUT", "projects/{pid}", options=EditProjectOptions, result=Project)
    fork_project = Endpoint("POST", "projects/{pid}/fork", options=ForkProjectOptions, result=Project)
    star_project = Endpoint("POST", "projects/{pid}/star", result=Project)
    unstar_project = Endpoint("POST", "projects/{pid}/unstar", result=Project)
    archive_project = Endpoint("POST", "projects/{pid}/archive", result=Project)
    unarchive_project = Endpoint("POST", "projects/{pid}/unarchive", result=Project)
    restore_project = Endpoint("POST", "projects/{pid}/restore", result=Project)
    delete_project = Endpoint(
        "DELETE",
        "projects/{pid}",
        options=DeleteProjectOptions,
        doc="Delete a project; on instances with delayed deletion it is only marked for deletion.",
    )
    share_project_with_group = Endpoint("POST", "projects/{pid}/share", options=ShareWithGroupOptions)
    delete_shared_project_from_group = Endpoint("DELETE", "projects/{pid}/share/{group}")
    transfer_project = Endpoint("PUT", "projects/{pid}/transfer", options=TransferProjectOptions, result=Project)
    start_housekeeping_project = Endpoint("POST", "projects/{pid}/housekeeping")
    download_avatar = Endpoint("GET", "projects/{pid}/avatar", result=bytes)

    def upload_avatar(
        self,
        pid: Any,
        avatar: bytes | IO[bytes],
        filename: str,
        *options: RequestOption,
    ) -> tuple[Project, Response]:
        """Upload a project avatar.

        Sent as multipart/form-data with the image in the ``avatar`` field.

        Args:
            pid: Project ID or path
            avatar: Image contents or a binary file object
            filename: File name reported to GitLab
            options: Request options

        Returns:
            Tuple of (updated project, response metadata)
        """
        path = f"projects/{path_escape(parse_id(pid))}"
        logger.debug(f"Uploading avatar {filename} for project {pid}")
        request = self.client.upload_request("PUT", path, avatar, filename, field="avatar", options=options)
        return self.client.do(request, Project)
