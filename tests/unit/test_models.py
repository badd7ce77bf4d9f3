"""Unit tests for result models serialized back to GitLab's wire format."""

from datetime import UTC, date, datetime

import pytest
from pydantic import BaseModel

from gitlab_client.client.dependency_list_export import DependencyListExport
from gitlab_client.client.issues import Issue, IssueLinks, LabelDetails, Milestone
from gitlab_client.client.terraform_states import TerraformState, TerraformStateVersion
from gitlab_client.client.work_items import (
    AssigneesWidget,
    StatusValue,
    StatusWidget,
    UserCoreConnection,
    UserCoreNode,
    WorkItemFeatures,
    WorkItemNode,
    WorkItemType,
)
from gitlab_client.models import BasicUser

CREATED = datetime(2024, 1, 15, 10, 0, tzinfo=UTC)

ISSUE = Issue(
    id=999,
    iid=42,
    title="Bug in login",
    author=BasicUser(id=1, username="testuser", name="Test User"),
    milestone=Milestone(id=3, title="v1.0", due_date=date(2024, 2, 1)),
    labels=["bug", "ui"],
    label_details=[LabelDetails(id=1, name="bug", color="#d9534f")],
    due_date=date(2024, 1, 31),
    created_at=CREATED,
    weight=0,
    links=IssueLinks(
        self_url="https://gitlab.example.com/api/v4/projects/1/issues/42",
        notes="https://gitlab.example.com/api/v4/projects/1/issues/42/notes",
    ),
)

WORK_ITEM = WorkItemNode(
    id=7,
    iid=3,
    work_item_type=WorkItemType(name="Task"),
    state="OPEN",
    title="Write docs",
    created_at=CREATED,
    author=UserCoreNode(id=1, username="alice", state="active"),
    features=WorkItemFeatures(
        assignees=AssigneesWidget(assignees=UserCoreConnection(nodes=[UserCoreNode(id=2, username="bob")])),
        status=StatusWidget(status=StatusValue(name="In progress")),
    ),
    web_url="https://gitlab.example.com/group/project/-/work_items/3",
)

TERRAFORM_STATE = TerraformState(
    name="production",
    created_at=CREATED,
    locked_at=CREATED,
    latest_version=TerraformStateVersion(download_path="/api/v4/projects/1/terraform/state/production/versions/4", serial=4),
)


class TestRoundTrip:
    """Tests for decoding what a model serializes."""

    @pytest.mark.parametrize(
        "model",
        [
            ISSUE,
            WORK_ITEM,
            TERRAFORM_STATE,
            DependencyListExport(id=5, has_finished=True, self_url="https://gitlab.example.com/api/v4/dependency_list_exports/5"),
        ],
        ids=["issue", "work-item", "terraform-state", "dependency-export"],
    )
    def test_wire_json_decodes_to_equal_model(self, model: BaseModel) -> None:
        """Test that a result dumped with its wire names decodes back unchanged."""
        wire = model.model_dump_json(by_alias=True)

        assert type(model).model_validate_json(wire) == model


class TestWireNames:
    """Tests for the aliases GitLab uses on the wire."""

    def test_issue_links_use_underscore_and_self(self) -> None:
        """Test that _links and self are the serialized keys."""
        wire = ISSUE.model_dump(by_alias=True)

        assert "_links" in wire
        assert wire["_links"]["self"] == "https://gitlab.example.com/api/v4/projects/1/issues/42"

    def test_graphql_nodes_use_camel_case(self) -> None:
        """Test that GraphQL nodes serialize with camelCase keys."""
        wire = WORK_ITEM.model_dump(by_alias=True)

        assert wire["workItemType"] == {"name": "Task"}
        assert "webUrl" in wire
        assert "createdAt" in wire
