"""Pipeline schedules service."""

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import Field

from gitlab_client.client.pipelines import Pipeline, PipelineVariable
from gitlab_client.client.service import Endpoint, Service
from gitlab_client.models import BasicUser, GitLabModel, ListOptions, RequestOptions, VariableType


class PipelineScheduleScope(StrEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class LastPipeline(GitLabModel):
    id: int = 0
    sha: str = ""
    ref: str = ""
    status: str = ""
    web_url: str = ""


class PipelineInput(GitLabModel):
    name: str = Field(default="", alias="key")
    value: Any = None


class PipelineSchedule(GitLabModel):
    id: int = 0
    description: str = ""
    ref: str = ""
    cron: str = ""
    cron_timezone: str = ""
    next_run_at: datetime | None = None
    active: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
    owner: BasicUser | None = None
    last_pipeline: LastPipeline | None = None
    variables: list[PipelineVariable] = Field(default_factory=list)
    inputs: list[PipelineInput] = Field(default_factory=list)


class ListPipelineSchedulesOptions(ListOptions):
    scope: PipelineScheduleScope | None = None


class PipelineInputOptions(RequestOptions):
    name: str | None = Field(default=None, alias="key")
    value: Any = None


class PipelineScheduleOptions(RequestOptions):
    description: str | None = None
    ref: str | None = None
    cron: str | None = None
    cron_timezone: str | None = None
    active: bool | None = None
    inputs: list[PipelineInputOptions] | None = None


class CreatePipelineScheduleOptions(PipelineScheduleOptions):
    pass


class EditPipelineScheduleOptions(PipelineScheduleOptions):
    pass


class CreatePipelineScheduleVariableOptions(RequestOptions):
    key: str | None = None
    value: str | None = None
    variable_type: VariableType | None = None


class EditPipelineScheduleVariableOptions(RequestOptions):
    value: str | None = None
    variable_type: VariableType | None = None


class PipelineSchedulesService(Service):
    """Scheduled pipelines and their variables.

    Wraps https://docs.gitlab.com/api/pipeline_schedules/
    """

    list_pipeline_schedules = Endpoint(
        "GET",
        "projects/{pid}/pipeline_schedules",
        options=ListPipelineSchedulesOptions,
        result=list[PipelineSchedule],
    )
    get_pipeline_schedule = Endpoint("GET", "projects/{pid}/pipeline_schedules/{schedule}", result=PipelineSchedule)
    list_pipelines_triggered_by_schedule = Endpoint(
        "GET",
        "projects/{pid}/pipeline_schedules/{schedule}/pipelines",
        options=ListOptions,
        result=list[Pipeline],
    )
    create_pipeline_schedule = Endpoint(
        "POST", "projects/{pid}/pipeline_schedules", options=CreatePipelineScheduleOptions, result=PipelineSchedule
    )
    edit_pipeline_schedule = Endpoint(
        "PUT",
        "projects/{pid}/pipeline_schedules/{schedule}",
        options=EditPipelineScheduleOptions,
        result=PipelineSchedule,
    )
    take_ownership_of_pipeline_schedule = Endpoint(
        "POST", "projects/{pid}/pipeline_schedules/{schedule}/take_ownership", result=PipelineSchedule
    )
    delete_pipeline_schedule = Endpoint("DELETE", "projects/{pid}/pipeline_schedules/{schedule}")
    run_pipeline_schedule = Endpoint(
        "POST",
        "projects/{pid}/pipeline_schedules/{schedule}/play",
        doc="Queue the schedule to run now; the pipeline starts asynchronously.",
    )
    create_pipeline_schedule_variable = Endpoint(
        "POST",
        "projects/{pid}/pipeline_schedules/{schedule}/variables",
        options=CreatePipelineScheduleVariableOptions,
        result=PipelineVariable,
    )
    edit_pipeline_schedule_variable = Endpoint(
        "PUT",
        "projects/{pid}/pipeline_schedules/{schedule}/variables/{key}",
        options=EditPipelineScheduleVariableOptions,
        result=PipelineVariable,
    )
    delete_pipeline_schedule_variable = Endpoint(
        "DELETE", "projects/{pid}/pipeline_schedules/{schedule}/variables/{key}", result=PipelineVariable
    )
