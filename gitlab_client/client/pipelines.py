"""Pipelines service."""

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import Field

from gitlab_client.client.service import Endpoint, Service
from gitlab_client.models import BasicUser, BuildState, GitLabModel, ListOptions, RequestOptions, VariableType


class PipelineSource(StrEnum):
    API = "api"
    CHAT = "chat"
    EXTERNAL = "external"
    EXTERNAL_PULL_REQUEST_EVENT = "external_pull_request_event"
    MERGE_REQUEST_EVENT = "merge_request_event"
    ONDEMAND_DAST_SCAN = "ondemand_dast_scan"
    ONDEMAND_DAST_VALIDATION = "ondemand_dast_validation"
    PARENT_PIPELINE = "parent_pipeline"
    PIPELINE = "pipeline"
    PUSH = "push"
    SCHEDULE = "schedule"
    SECURITY_ORCHESTRATION_POLICY = "security_orchestration_policy"
    TRIGGER = "trigger"
    WEB = "web"
    WEBIDE = "webide"


class PipelineVariable(GitLabModel):
    key: str = ""
    value: str = ""
    variable_type: str = ""


class DetailedStatus(GitLabModel):
    icon: str = ""
    text: str = ""
    label: str = ""
    group: str = ""
    tooltip: str = ""
    has_details: bool = False
    details_path: str = ""
    favicon: str = ""


class PipelineInfo(GitLabModel):
    """Pipeline as returned by the list endpoint."""

    id: int = 0
    iid: int = 0
    project_id: int = 0
    status: str = ""
    source: str = ""
    ref: str = ""
    sha: str = ""
    name: str = ""
    web_url: str = ""
    updated_at: datetime | None = None
    created_at: datetime | None = None


class Pipeline(GitLabModel):
    id: int = 0
    iid: int = 0
    project_id: int = 0
    status: str = ""
    source: str = ""
    ref: str = ""
    name: str = ""
    sha: str = ""
    before_sha: str = ""
    tag: bool = False
    yaml_errors: str = ""
    user: BasicUser | None = None
    updated_at: datetime | None = None
    created_at: datetime | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None
    committed_at: datetime | None = None
    duration: int = 0
    queued_duration: float = 0
    coverage: str = ""
    web_url: str = ""
    detailed_status: DetailedStatus | None = None


class PipelineTestCase(GitLabModel):
    status: str = ""
    name: str = ""
    classname: str = ""
    file: str = ""
    execution_time: float = 0.0
    system_output: Any = None
    stack_trace: str = ""
    attachment_url: str = ""


class PipelineTestSuite(GitLabModel):
    name: str = ""
    total_time: float = 0.0
    total_count: int = 0
    success_count: int = 0
    failed_count: int = 0
    skipped_count: int = 0
    error_count: int = 0
    test_cases: list[PipelineTestCase] = Field(default_factory=list)


class PipelineTestReport(GitLabModel):
    total_time: float = 0.0
    total_count: int = 0
    success_count: int = 0
    failed_count: int = 0
    skipped_count: int = 0
    error_count: int = 0
    test_suites: list[PipelineTestSuite] = Field(default_factory=list)


class ListProjectPipelinesOptions(ListOptions):
    scope: str | None = None
    status: BuildState | None = None
    source: PipelineSource | None = None
    ref: str | None = None
    sha: str | None = None
    yaml_errors: bool | None = None
    name: str | None = None
    username: str | None = None
    updated_after: datetime | None = None
    updated_before: datetime | None = None
    created_after: datetime | None = None
    created_before: datetime | None = None


class GetLatestPipelineOptions(RequestOptions):
    ref: str | None = None


class PipelineVariableOptions(RequestOptions):
    key: str | None = None
    value: str | None = None
    variable_type: VariableType | None = None


class CreatePipelineOptions(RequestOptions):
    ref: str | None = None
    variables: list[PipelineVariableOptions] | None = None
    inputs: dict[str, Any] | None = None


class UpdatePipelineMetadataOptions(RequestOptions):
    name: str | None = None


class PipelinesService(Service):
    """Project pipelines.

    Wraps https://docs.gitlab.com/api/pipelines/
    """

    list_project_pipelines = Endpoint(
        "GET",
        "projects/{pid}/pipelines",
        options=ListProjectPipelinesOptions,
        result=list[PipelineInfo],
        doc="List pipelines of a project, newest first.",
    )
    get_pipeline = Endpoint("GET", "projects/{pid}/pipelines/{pipeline}", result=Pipeline)
    get_pipeline_variables = Endpoint(
        "GET", "projects/{pid}/pipelines/{pipeline}/variables", result=list[PipelineVariable]
    )
    get_pipeline_test_report = Endpoint(
        "GET", "projects/{pid}/pipelines/{pipeline}/test_report", result=PipelineTestReport
    )
    get_latest_pipeline = Endpoint(
        "GET",
        "projects/{pid}/pipelines/latest",
        options=GetLatestPipelineOptions,
        result=Pipeline,
        doc="Get the latest pipeline for a ref (the default branch when ref is unset).",
    )
    create_pipeline = Endpoint("POST", "projects/{pid}/pipeline", options=CreatePipelineOptions, result=Pipeline)
    retry_pipeline_build = Endpoint(
        "POST",
        "projects/{pid}/pipelines/{pipeline}/retry",
        result=Pipeline,
        doc="Retry the failed or canceled jobs of a pipeline.",
    )
    cancel_pipeline_build = Endpoint("POST", "projects/{pid}/pipelines/{pipeline}/cancel", result=Pipeline)
    delete_pipeline = Endpoint("DELETE", "projects/{pid}/pipelines/{pipeline}")
    update_pipeline_metadata = Endpoint(
        "PUT",
        "projects/{pid}/pipelines/{pipeline}/metadata",
        options=UpdatePipelineMetadataOptions,
        result=Pipeline,
    )
