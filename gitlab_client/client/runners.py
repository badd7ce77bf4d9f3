"""Runners service."""

from datetime import datetime

from pydantic import Field

from gitlab_client.client.jobs import Job
from gitlab_client.client.service import Endpoint, Service
from gitlab_client.models import GitLabModel, ListOptions, RequestOptions


class Runner(GitLabModel):
    id: int = 0
    description: str = ""
    active: bool = False
    paused: bool = False
    is_shared: bool = False
    ip_address: str = ""
    runner_type: str = ""
    name: str = ""
    online: bool = False
    status: str = ""
    token: str = ""
    token_expires_at: datetime | None = None


class RunnerDetailsProject(GitLabModel):
    id: int = 0
    name: str = ""
    name_with_namespace: str = ""
    path: str = ""
    path_with_namespace: str = ""


class RunnerDetailsGroup(GitLabModel):
    id: int = 0
    name: str = ""
    web_url: str = ""


class RunnerDetails(Runner):
    architecture: str = ""
    platform: str = ""
    revision: str = ""
    version: str = ""
    contacted_at: datetime | None = None
    maintenance_note: str = ""
    projects: list[RunnerDetailsProject] = Field(default_factory=list)
    groups: list[RunnerDetailsGroup] = Field(default_factory=list)
    tag_list: list[str] = Field(default_factory=list)
    run_untagged: bool = False
    locked: bool = False
    access_level: str = ""
    maximum_timeout: int = 0


class RunnerRegistrationToken(GitLabModel):
    token: str = ""
    token_expires_at: datetime | None = None


class RunnerAuthenticationToken(GitLabModel):
    token: str = ""
    token_expires_at: datetime | None = None


class ListRunnersOptions(ListOptions):
    scope: str | None = None
    type: str | None = None
    status: str | None = None
    paused: bool | None = None
    tag_list: list[str] | None = None


class ListRunnerJobsOptions(ListOptions):
    status: str | None = None


class UpdateRunnerDetailsOptions(RequestOptions):
    description: str | None = None
    paused: bool | None = None
    tag_list: list[str] | None = None
    run_untagged: bool | None = None
    locked: bool | None = None
    access_level: str | None = None
    maximum_timeout: int | None = None
    maintenance_note: str | None = None


class EnableProjectRunnerOptions(RequestOptions):
    runner_id: int | None = None


class RegisterNewRunnerInfoOptions(RequestOptions):
    name: str | None = None
    version: str | None = None
    revision: str | None = None
    platform: str | None = None
    architecture: str | None = None


class RegisterNewRunnerOptions(RequestOptions):
    token: str | None = None
    description: str | None = None
    info: RegisterNewRunnerInfoOptions | None = None
    active: bool | None = None
    paused: bool | None = None
    locked: bool | None = None
    run_untagged: bool | None = None
    tag_list: list[str] | None = None
    access_level: str | None = None
    maximum_timeout: int | None = None
    maintenance_note: str | None = None


class DeleteRegisteredRunnerOptions(RequestOptions):
    token: str | None = None


class VerifyRegisteredRunnerOptions(RequestOptions):
    token: str | None = None
    system_id: str | None = None


class RunnersService(Service):
    """CI runners and their registration tokens.

    Wraps https://docs.gitlab.com/api/runners/
    """

    list_runners = Endpoint(
        "GET",
        "runners",
        options=ListRunnersOptions,
        result=list[Runner],
        doc="List runners available to the authenticated user.",
    )
    list_all_runners = Endpoint("GET", "runners/all", options=ListRunnersOptions, result=list[Runner])
    list_project_runners = Endpoint(
        "GET", "projects/{pid}/runners", options=ListRunnersOptions, result=list[Runner]
    )
    list_group_runners = Endpoint("GET", "groups/{gid}/runners", options=ListRunnersOptions, result=list[Runner])
    get_runner_details = Endpoint("GET", "runners/{runner}", result=RunnerDetails)
    update_runner_details = Endpoint(
        "PUT", "runners/{runner}", options=UpdateRunnerDetailsOptions, result=RunnerDetails
    )
    remove_runner = Endpoint("DELETE", "runners/{runner}")
    list_runner_jobs = Endpoint("GET", "runners/{runner}/jobs", options=ListRunnerJobsOptions, result=list[Job])
    enable_project_runner = Endpoint(
        "POST", "projects/{pid}/runners", options=EnableProjectRunnerOptions, result=Runner
    )
    disable_project_runner = Endpoint("DELETE", "projects/{pid}/runners/{runner}")
    register_new_runner = Endpoint("POST", "runners", options=RegisterNewRunnerOptions, result=Runner)
    delete_registered_runner = Endpoint(
        "DELETE",
        "runners",
        options=DeleteRegisteredRunnerOptions,
        doc="Delete the runner identified by its authentication token.",
    )
    delete_registered_runner_by_id = Endpoint("DELETE", "runners/{runner}")
    verify_registered_runner = Endpoint("POST", "runners/verify", options=VerifyRegisteredRunnerOptions)
    reset_instance_runner_registration_token = Endpoint(
        "POST", "runners/reset_registration_token", result=RunnerRegistrationToken
    )
    reset_group_runner_registration_token = Endpoint(
        "POST", "groups/{gid}/runners/reset_registration_token", result=RunnerRegistrationToken
    )
    reset_project_runner_registration_token = Endpoint(
        "POST", "projects/{pid}/runners/reset_registration_token", result=RunnerRegistrationToken
    )
    reset_runner_authentication_token = Endpoint(
        "POST", "runners/{runner}/reset_authentication_token", result=RunnerAuthenticationToken
    )
