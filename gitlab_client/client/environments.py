"""Environments service."""

from datetime import datetime
from typing import Any

from gitlab_client.client.projects import Project
from gitlab_client.client.service import Endpoint, Service
from gitlab_client.models import GitLabModel, ListOptions, RequestOptions


class Environment(GitLabModel):
    id: int = 0
    name: str = ""
    slug: str = ""
    description: str = ""
    state: str = ""
    tier: str = ""
    external_url: str = ""
    project: Project | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    last_deployment: dict[str, Any] | None = None
    cluster_agent: dict[str, Any] | None = None
    kubernetes_namespace: str = ""
    flux_resource_path: str = ""
    auto_stop_at: datetime | None = None
    auto_stop_setting: str = ""


class ListEnvironmentsOptions(ListOptions):
    name: str | None = None
    search: str | None = None
    states: str | None = None


class EnvironmentOptions(RequestOptions):
    name: str | None = None
    description: str | None = None
    external_url: str | None = None
    tier: str | None = None
    cluster_agent_id: int | None = None
    kubernetes_namespace: str | None = None
    flux_resource_path: str | None = None
    auto_stop_setting: str | None = None


class CreateEnvironmentOptions(EnvironmentOptions):
    pass


class EditEnvironmentOptions(EnvironmentOptions):
    pass


class StopEnvironmentOptions(RequestOptions):
    force: bool | None = None


class EnvironmentsService(Service):
    """Deployment environments of a project.

    Wraps https://docs.gitlab.com/api/environments/
    """

    list_environments = Endpoint(
        "GET", "projects/{pid}/environments", options=ListEnvironmentsOptions, result=list[Environment]
    )
    get_environment = Endpoint("GET", "projects/{pid}/environments/{environment}", result=Environment)
    create_environment = Endpoint(
        "POST", "projects/{pid}/environments", options=CreateEnvironmentOptions, result=Environment
    )
    edit_environment = Endpoint(
        "PUT", "projects/{pid}/environments/{environment}", options=EditEnvironmentOptions, result=Environment
    )
    delete_environment = Endpoint(
        "DELETE",
        "projects/{pid}/environments/{environment}",
        doc="Delete an environment; it must be stopped first.",
    )
    stop_environment = Endpoint(
        "POST",
        "projects/{pid}/environments/{environment}/stop",
        options=StopEnvironmentOptions,
        result=Environment,
    )
