"""GitLab API client composed from resource services."""

from typing import Any

from gitlab_client.auth import JobTokenAuthSource, OAuthTokenSource, PasswordCredentialsAuthSource
from gitlab_client.client.access_requests import AccessRequestsService
from gitlab_client.client.avatar import AvatarService
from gitlab_client.client.base import BaseClient
from gitlab_client.client.branches import BranchesService
from gitlab_client.client.dependency_list_export import DependencyListExportService
from gitlab_client.client.environments import EnvironmentsService
from gitlab_client.client.group_variables import GroupVariablesService
from gitlab_client.client.issues import IssuesService
from gitlab_client.client.jobs import JobsService
from gitlab_client.client.labels import LabelsService
from gitlab_client.client.merge_requests import MergeRequestsService
from gitlab_client.client.pipeline_schedules import PipelineSchedulesService
from gitlab_client.client.pipeline_triggers import PipelineTriggersService
from gitlab_client.client.pipelines import PipelinesService
from gitlab_client.client.projects import ProjectsService
from gitlab_client.client.release_links import ReleaseLinksService
from gitlab_client.client.releases import ReleasesService
from gitlab_client.client.runners import RunnersService
from gitlab_client.client.terraform_states import TerraformStatesService
from gitlab_client.client.users import UsersService
from gitlab_client.client.version import VersionService
from gitlab_client.client.work_items import WorkItemsService
from gitlab_client.graphql import GraphQL


class GitLabClient(BaseClient):
    """GitLab API client composed from resource services.

    Every service shares this client's transport, credentials and default
    request options:
    - Projects, branches, labels and environments
    - Merge requests, discussions and issues
    - Pipelines, jobs, schedules, triggers and runners
    - Releases and release links
    - Users, access requests and avatars
    - CI/CD group variables
    - Dependency list exports and Terraform states
    - Work items and raw GraphQL queries

    Example:
        with GitLabClient() as client:
            pipeline, resp = client.pipelines.get_pipeline("group/project", 42)
    """

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.access_requests = AccessRequestsService(self)
        self.avatar = AvatarService(self)
        self.branches = BranchesService(self)
        self.dependency_list_export = DependencyListExportService(self)
        self.environments = EnvironmentsService(self)
        self.group_variables = GroupVariablesService(self)
        self.issues = IssuesService(self)
        self.jobs = JobsService(self)
        self.labels = LabelsService(self)
        self.merge_requests = MergeRequestsService(self)
        self.pipeline_schedules = PipelineSchedulesService(self)
        self.pipeline_triggers = PipelineTriggersService(self)
        self.pipelines = PipelinesService(self)
        self.projects = ProjectsService(self)
        self.release_links = ReleaseLinksService(self)
        self.releases = ReleasesService(self)
        self.runners = RunnersService(self)
        self.terraform_states = TerraformStatesService(self)
        self.users = UsersService(self)
        self.version = VersionService(self)
        self.work_items = WorkItemsService(self)
        self.graphql = GraphQL(self)

    @classmethod
    def with_job_token(cls, token: str, base_url: str | None = None, **kwargs: Any) -> "GitLabClient":
        """Client authenticating with a CI job token (``CI_JOB_TOKEN``)."""
        return cls(base_url=base_url, auth_source=JobTokenAuthSource(token), **kwargs)

    @classmethod
    def with_oauth_token(cls, token: str, base_url: str | None = None, **kwargs: Any) -> "GitLabClient":
        """Client authenticating with an OAuth2 access token."""
        return cls(base_url=base_url, auth_source=OAuthTokenSource.static(token), **kwargs)

    @classmethod
    def with_basic_auth(
        cls, username: str, password: str, base_url: str | None = None, **kwargs: Any
    ) -> "GitLabClient":
        """Client that exchanges a username and password for an OAuth token on first use."""
        return cls(base_url=base_url, auth_source=PasswordCredentialsAuthSource(username, password), **kwargs)


__all__ = ["BaseClient", "GitLabClient"]
