"""Pipeline trigger tokens service."""

from datetime import datetime

from gitlab_client.client.pipelines import Pipeline
from gitlab_client.client.service import Endpoint, Service
from gitlab_client.models import BasicUser, GitLabModel, ListOptions, RequestOptions


class PipelineTrigger(GitLabModel):
    id: int = 0
    description: str = ""
    created_at: datetime | None = None
    deleted_at: datetime | None = None
    last_used: datetime | None = None
    token: str = ""
    updated_at: datetime | None = None
    owner: BasicUser | None = None


class AddPipelineTriggerOptions(RequestOptions):
    description: str | None = None


class EditPipelineTriggerOptions(RequestOptions):
    description: str | None = None


class RunPipelineTriggerOptions(RequestOptions):
    ref: str | None = None
    token: str | None = None
    variables: dict[str, str] | None = None


class PipelineTriggersService(Service):
    """Trigger tokens and triggering pipelines with them.

    Wraps https://docs.gitlab.com/api/pipeline_triggers/
    """

    list_pipeline_triggers = Endpoint(
        "GET", "projects/{pid}/triggers", options=ListOptions, result=list[PipelineTrigger]
    )
    get_pipeline_trigger = Endpoint("GET", "projects/{pid}/triggers/{trigger}", result=PipelineTrigger)
    add_pipeline_trigger = Endpoint(
        "POST", "projects/{pid}/triggers", options=AddPipelineTriggerOptions, result=PipelineTrigger
    )
    edit_pipeline_trigger = Endpoint(
        "PUT", "projects/{pid}/triggers/{trigger}", options=EditPipelineTriggerOptions, result=PipelineTrigger
    )
    delete_pipeline_trigger = Endpoint("DELETE", "projects/{pid}/triggers/{trigger}")
    run_pipeline_trigger = Endpoint(
        "POST",
        "projects/{pid}/trigger/pipeline",
        options=RunPipelineTriggerOptions,
        result=Pipeline,
        doc="Start a pipeline on a ref, authenticated by the trigger token in the options.",
    )
