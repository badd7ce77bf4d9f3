"""Terraform (OpenTofu) state service.

Listing and inspecting states goes through GraphQL; downloading, deleting and
locking a state use the REST state backend. Downloads return the raw state
file, or stream it into ``dest``.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import Field

from gitlab_client.client.service import Endpoint, Service
from gitlab_client.graphql import GraphQL, GraphQLModel, GraphQLQuery, not_found_error
from gitlab_client.request_options import RequestOption
from gitlab_client.response import Response

if TYPE_CHECKING:
    from gitlab_client.client.base import BaseClient

STATE_FIELDS = """
        name
        createdAt
        deletedAt
        latestVersion {
          createdAt
          updatedAt
          downloadPath
          serial
        }
        updatedAt
        lockedAt
"""


class TerraformStateVersion(GraphQLModel):
    created_at: datetime | None = None
    updated_at: datetime | None = None
    download_path: str = ""
    serial: int = 0


class TerraformState(GraphQLModel):
    name: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
    locked_at: datetime | None = None
    latest_version: TerraformStateVersion | None = None


class TerraformStateConnection(GraphQLModel):
    nodes: list[TerraformState] = Field(default_factory=list)


class ProjectTerraformStates(GraphQLModel):
    terraform_states: TerraformStateConnection | None = None
    terraform_state: TerraformState | None = None


class ProjectData(GraphQLModel):
    project: ProjectTerraformStates | None = None


class ProjectEnvelope(GraphQLModel):
    data: ProjectData | None = None


class TerraformStatesService(Service):
    """Terraform states managed by GitLab.

    Wraps https://docs.gitlab.com/user/infrastructure/iac/terraform_state/
    """

    download_latest = Endpoint(
        "GET",
        "projects/{pid}/terraform/state/{name}",
        result=bytes,
        doc="Download the latest version of a state file.",
    )
    download = Endpoint(
        "GET",
        "projects/{pid}/terraform/state/{name}/versions/{serial}",
        result=bytes,
        doc="Download a specific version of a state file.",
    )
    delete = Endpoint("DELETE", "projects/{pid}/terraform/state/{name}")
    delete_version = Endpoint("DELETE", "projects/{pid}/terraform/state/{name}/versions/{serial}")
    lock = Endpoint("POST", "projects/{pid}/terraform/state/{name}/lock")
    unlock = Endpoint("DELETE", "projects/{pid}/terraform/state/{name}/lock")

    def __init__(self, client: "BaseClient"):
        super().__init__(client)
        self.graphql = GraphQL(client)

    def list_states(self, project_full_path: str, *options: RequestOption) -> tuple[list[TerraformState], Response]:
        """List the states of a project, identified by its full path."""
        query = GraphQLQuery(
            query=(
                "query ($projectFullPath: ID!) {\n"
                "  project(fullPath: $projectFullPath) {\n"
                "    terraformStates {\n"
                f"      nodes {{{STATE_FIELDS}      }}\n"
                "    }\n"
                "  }\n"
                "}\n"
            ),
            variables={"projectFullPath": project_full_path},
        )
        envelope, meta = self.graphql.do(query, ProjectEnvelope, *options)
        project = envelope.data.project if envelope.data else None
        if project is None or project.terraform_states is None:
            return [], meta
        return project.terraform_states.nodes, meta

    def get_state(self, project_full_path: str, name: str, *options: RequestOption) -> tuple[TerraformState, Response]:
        """Get one state of a project by name.

        Raises:
            NotFoundError: If the project has no state with this name
        """
        query = GraphQLQuery(
            query=(
                "query ($projectFullPath: ID!, $name: String!) {\n"
                "  project(fullPath: $projectFullPath) {\n"
                f"    terraformState(name: $name) {{{STATE_FIELDS}    }}\n"
                "  }\n"
                "}\n"
            ),
            variables={"projectFullPath": project_full_path, "name": name},
        )
        envelope, meta = self.graphql.do(query, ProjectEnvelope, *options)
        project = envelope.data.project if envelope.data else None
        if project is None or project.terraform_state is None:
            raise not_found_error(meta, f"terraform state {name!r}")
        return project.terraform_state, meta
