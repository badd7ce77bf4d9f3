"""Dependency list (SBOM) exports service."""

from pydantic import Field

from gitlab_client.client.service import Endpoint, Service
from gitlab_client.models import GitLabModel, RequestOptions


class DependencyListExport(GitLabModel):
    id: int = 0
    has_finished: bool = False
    self_url: str = Field(default="", alias="self")
    download: str = ""


class CreateDependencyListExportOptions(RequestOptions):
    export_type: str | None = None


class DependencyListExportService(Service):
    """Exports of a pipeline's dependency list.

    An export is generated asynchronously: poll ``get_dependency_list_export``
    until ``has_finished`` is true, then download it. Pass ``dest=`` to stream
    a large export into a file instead of loading it into memory.

    Wraps https://docs.gitlab.com/api/dependency_list_export/
    """

    create_dependency_list_export = Endpoint(
        "POST",
        "pipelines/{pipeline}/dependency_list_exports",
        options=CreateDependencyListExportOptions,
        result=DependencyListExport,
    )
    get_dependency_list_export = Endpoint("GET", "dependency_list_exports/{export}", result=DependencyListExport)
    download_dependency_list_export = Endpoint("GET", "dependency_list_exports/{export}/download", result=bytes)
