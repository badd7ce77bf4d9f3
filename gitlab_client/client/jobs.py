"""Jobs service."""

import logging
from datetime import datetime
from typing import IO, Any
from urllib.parse import quote

from pydantic import Field

from gitlab_client.client.service import Endpoint, Service
from gitlab_client.models import BasicUser, BuildState, Commit, GitLabModel, ListOptions, RequestOptions
from gitlab_client.request_options import RequestOption
from gitlab_client.response import Response
from gitlab_client.utils.resolvers import parse_id, path_escape

logger = logging.getLogger(__name__)


class JobPipeline(GitLabModel):
    id: int = 0
    project_id: int = 0
    ref: str = ""
    sha: str = ""
    status: str = ""


class JobArtifact(GitLabModel):
    file_type: str = ""
    filename: str = ""
    size: int = 0
    file_format: str = ""


class JobRunner(GitLabModel):
    id: int = 0
    description: str = ""
    active: bool = False
    is_shared: bool = False
    name: str = ""


class Job(GitLabModel):
    id: int = 0
    name: str = ""
    stage: str = ""
    status: str = ""
    ref: str = ""
    tag: bool = False
    allow_failure: bool = False
    failure_reason: str = ""
    coverage: float = 0.0
    duration: float = 0.0
    queued_duration: float = 0.0
    created_at: datetime | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None
    erased_at: datetime | None = None
    artifacts_expire_at: datetime | None = None
    tag_list: list[str] = Field(default_factory=list)
    commit: Commit | None = None
    pipeline: JobPipeline | None = None
    artifacts: list[JobArtifact] = Field(default_factory=list)
    runner: JobRunner | None = None
    user: BasicUser | None = None
    web_url: str = ""


class ListJobsOptions(ListOptions):
    scope: list[BuildState] | None = None
    include_retried: bool | None = None


class DownloadArtifactsFileOptions(RequestOptions):
    job: str | None = None


class JobsService(Service):
    """CI jobs and their logs and artifacts.

    Wraps https://docs.gitlab.com/api/jobs/ and https://docs.gitlab.com/api/job_artifacts/
    """

    list_project_jobs = Endpoint("GET", "projects/{pid}/jobs", options=ListJobsOptions, result=list[Job])
    list_pipeline_jobs = Endpoint(
        "GET", "projects/{pid}/pipelines/{pipeline}/jobs", options=ListJobsOptions, result=list[Job]
    )
    list_pipeline_bridges = Endpoint(
        "GET",
        "projects/{pid}/pipelines/{pipeline}/bridges",
        options=ListJobsOptions,
        result=list[dict[str, Any]],
        doc="List the trigger jobs (bridges) of a pipeline.",
    )
    get_job = Endpoint("GET", "projects/{pid}/jobs/{job}", result=Job)
    get_trace_file = Endpoint(
        "GET",
        "projects/{pid}/jobs/{job}/trace",
        result=bytes,
        doc="Download the raw log of a job.",
    )
    get_job_artifacts = Endpoint(
        "GET",
        "projects/{pid}/jobs/{job}/artifacts",
        result=bytes,
        doc="Download the artifacts archive (zip) of a job.",
    )
    cancel_job = Endpoint("POST", "projects/{pid}/jobs/{job}/cancel", result=Job)
    retry_job = Endpoint("POST", "projects/{pid}/jobs/{job}/retry", result=Job, doc="Retry a job; returns the new job.")
    erase_job = Endpoint("POST", "projects/{pid}/jobs/{job}/erase", result=Job)
    keep_artifacts = Endpoint("POST", "projects/{pid}/jobs/{job}/artifacts/keep", result=Job)
    play_job = Endpoint("POST", "projects/{pid}/jobs/{job}/play", result=Job)
    delete_artifacts = Endpoint("DELETE", "projects/{pid}/jobs/{job}/artifacts")
    delete_project_artifacts = Endpoint("DELETE", "projects/{pid}/artifacts")

    def download_single_artifacts_file(
        self,
        pid: Any,
        job: int,
        artifact_path: str,
        *options: RequestOption,
        dest: IO[bytes] | None = None,
    ) -> tuple[bytes | None, Response]:
        """Download one file from a job's artifacts archive.

        Args:
            pid: Project ID or path
            job: Job ID
            artifact_path: Path of the file inside the archive, slashes kept
            options: Request options
            dest: Optional binary stream to write the file into

        Returns:
            Tuple of (file bytes, or None when written to dest; response metadata)
        """
        path = (
            f"projects/{path_escape(parse_id(pid))}/jobs/{path_escape(parse_id(job))}"
            f"/artifacts/{quote(artifact_path, safe='/')}"
        )
        logger.debug(f"Downloading artifact {artifact_path} of job {job} in project {pid}")
        return self._dispatch("GET", path, options=options, result=bytes, dest=dest)

    def download_single_artifacts_file_by_tag_or_branch(
        self,
        pid: Any,
        ref_name: str,
        artifact_path: str,
        opt: DownloadArtifactsFileOptions | None = None,
        *options: RequestOption,
        dest: IO[bytes] | None = None,
    ) -> tuple[bytes | None, Response]:
        """Download one artifact file from the latest successful pipeline of a ref.

        Args:
            pid: Project ID or path
            ref_name: Branch or tag name
            artifact_path: Path of the file inside the archive, slashes kept
            opt: Name of the job that produced the artifacts
            options: Request options
            dest: Optional binary stream to write the file into
        """
        path = (
            f"projects/{path_escape(parse_id(pid))}/jobs/artifacts/{quote(ref_name, safe='')}"
            f"/raw/{quote(artifact_path, safe='/')}"
        )
        logger.debug(f"Downloading artifact {artifact_path} from the latest pipeline of {ref_name} in project {pid}")
        return self._dispatch("GET", path, opt=opt, options=options, result=bytes, dest=dest)
