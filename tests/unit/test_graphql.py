"""Unit tests for the GraphQL client and the GraphQL-backed services."""

import json
from datetime import UTC, datetime
from typing import Annotated

import pytest

from gitlab_client import (
    GQL,
    APIError,
    GraphQLQuery,
    GraphQLResponseError,
    InvalidIDTypeError,
    NotFoundError,
    RequestConstructionError,
    RequestOptions,
    gql_variables,
)
from gitlab_client.client.work_items import ListWorkItemsOptions
from gitlab_client.graphql import GlobalIDModel, global_id, parse_global_id

WORK_ITEM_NODE = {
    "id": "gid://gitlab/WorkItem/179785913",
    "iid": "5",
    "workItemType": {"name": "Task"},
    "state": "OPEN",
    "title": "Fix the flaky test",
    "description": "It fails on Tuesdays",
    "author": {
        "id": "gid://gitlab/User/1",
        "username": "alice",
        "name": "Alice",
        "state": "active",
        "createdAt": "2020-01-01T00:00:00Z",
        "avatarUrl": "https://gitlab.example.com/uploads/alice.png",
        "webUrl": "https://gitlab.example.com/alice",
    },
    "createdAt": "2024-01-15T10:00:00Z",
    "updatedAt": "2024-01-16T10:00:00Z",
    "closedAt": None,
    "webUrl": "https://gitlab.example.com/group/project/-/work_items/5",
    "features": {
        "assignees": {
            "assignees": {
                "nodes": [
                    {"id": "gid://gitlab/User/2", "username": "bob", "name": "Bob", "state": "blocked"},
                ]
            }
        },
        "status": {"status": {"name": "In progress"}},
    },
}


def sent_body(request) -> dict:
    return json.loads(request.content)


class TestGraphQLDo:
    """Tests for GraphQL.do."""

    def test_posts_to_graphql_endpoint(self, make_client, responder, recorded) -> None:
        """Test the URL, method and body of a query."""
        client = make_client(responder(json={"data": {"currentUser": {"username": "alice"}}}))

        envelope, resp = client.graphql.do(GraphQLQuery(query="query { currentUser { username } }"))

        assert envelope == {"data": {"currentUser": {"username": "alice"}}}
        assert resp.status_code == 200
        assert recorded[0].method == "POST"
        assert str(recorded[0].url) == "https://gitlab.example.com/api/graphql"
        assert recorded[0].headers["PRIVATE-TOKEN"] == "test-token-12345"
        assert sent_body(recorded[0]) == {"query": "query { currentUser { username } }"}

    def test_variables_are_sent(self, make_client, responder, recorded) -> None:
        """Test that non-empty variables are included in the body."""
        client = make_client(responder(json={"data": {}}))

        client.graphql.do(GraphQLQuery(query="query ($id: ID!) { x(id: $id) }", variables={"id": "1"}))

        assert sent_body(recorded[0])["variables"] == {"id": "1"}

    def test_error_status_with_messages(self, make_client, responder) -> None:
        """Test that an error envelope on a failed status lists its messages."""
        client = make_client(responder(status_code=400, json={"errors": [{"message": "bad request"}]}))

        with pytest.raises(GraphQLResponseError) as exc_info:
            client.graphql.do(GraphQLQuery(query="query { x }"))

        assert "GraphQL errors: bad request" in str(exc_info.value)
        assert exc_info.value.messages == ["bad request"]
        assert exc_info.value.status_code == 400
        assert isinstance(exc_info.value.__cause__, APIError)

    def test_error_status_without_messages(self, make_client, responder) -> None:
        """Test an error body that is not a GraphQL errors envelope."""
        client = make_client(responder(status_code=400, json={"key": "whuat"}))

        with pytest.raises(GraphQLResponseError) as exc_info:
            client.graphql.do(GraphQLQuery(query="query { x }"))

        assert "{key: whuat} (no additional error messages)" in str(exc_info.value)

    def test_error_status_with_non_object_body(self, make_client, responder) -> None:
        """Test that non-object error bodies keep the plain APIError."""
        client = make_client(responder(status_code=502, content=b"Bad Gateway"))

        with pytest.raises(APIError) as exc_info:
            client.graphql.do(GraphQLQuery(query="query { x }"))
        assert not isinstance(exc_info.value, GraphQLResponseError)

    def test_success_status_with_errors_and_no_data(self, make_client, responder) -> None:
        """Test that errors without data fail even on a 200."""
        body = {"data": None, "errors": [{"message": "Field 'x' doesn't exist"}, {"message": "second"}]}
        client = make_client(responder(json=body))

        with pytest.raises(GraphQLResponseError) as exc_info:
            client.graphql.do(GraphQLQuery(query="query { x }"))

        assert exc_info.value.status_code == 200
        assert "GraphQL errors: Field 'x' doesn't exist, second" in str(exc_info.value)

    def test_success_status_with_errors_without_messages(self, make_client, responder) -> None:
        """Test that error entries lacking a message still fail the call."""
        body = {"data": None, "errors": [{"extensions": {"code": "bad"}}]}
        client = make_client(responder(json=body))

        with pytest.raises(GraphQLResponseError) as exc_info:
            client.graphql.do(GraphQLQuery(query="query { x }"))

        assert exc_info.value.messages == []
        assert str(exc_info.value).endswith("(no additional error messages)")

    def test_missing_data_with_errors(self, make_client, responder) -> None:
        """Test that an envelope without a data key is treated like null data."""
        client = make_client(responder(json={"errors": [{"message": "boom"}]}))

        with pytest.raises(GraphQLResponseError, match="GraphQL errors: boom"):
            client.graphql.do(GraphQLQuery(query="query { x }"))

    def test_partial_data_is_returned(self, make_client, responder) -> None:
        """Test that data with errors is returned as a partial result."""
        body = {"data": {"project": {"id": "gid://gitlab/Project/1"}}, "errors": [{"message": "denied"}]}
        client = make_client(responder(json=body))

        envelope, _ = client.graphql.do(GraphQLQuery(query="query { project { id } }"))

        assert envelope["data"]["project"]["id"] == "gid://gitlab/Project/1"
        assert envelope["errors"] == [{"message": "denied"}]

    def test_typed_result(self, make_client, responder) -> None:
        """Test that the envelope validates into a result type."""

        class ProjectNode(GlobalIDModel):
            full_path: str = ""

        class Data(GlobalIDModel):
            project: ProjectNode | None = None

        class Envelope(GlobalIDModel):
            data: Data | None = None

        body = {"data": {"project": {"id": "gid://gitlab/Project/7", "fullPath": "group/project"}}}
        client = make_client(responder(json=body))

        envelope, _ = client.graphql.do(GraphQLQuery(query="query { project { id fullPath } }"), Envelope)

        assert envelope.data.project.id == 7
        assert envelope.data.project.full_path == "group/project"


class TestGlobalIDs:
    """Tests for global ID helpers."""

    def test_parse(self) -> None:
        """Test splitting a global ID."""
        assert parse_global_id("gid://gitlab/WorkItem/42") == ("WorkItem", 42)

    def test_parse_rejects_other_strings(self) -> None:
        """Test that malformed global IDs raise ValueError."""
        with pytest.raises(ValueError, match="invalid global ID"):
            parse_global_id("42")

    def test_build(self) -> None:
        """Test building a global ID."""
        assert global_id("User", 3) == "gid://gitlab/User/3"


class TestGQLVariables:
    """Tests for deriving variables from options."""

    def test_unset_fields_are_skipped(self) -> None:
        """Test that only set fields become variables, in field order."""
        opt = ListWorkItemsOptions(state="opened", types=["TASK"], first=20)
        variables = gql_variables(opt)

        assert [v.name for v in variables] == ["state", "types", "first"]
        assert variables.definitions() == "$state: IssuableState, $types: [IssueType!], $first: Int"
        assert variables.arguments() == "state: $state, types: $types, first: $first"
        assert variables.as_dict({"fullPath": "g"}) == {"fullPath": "g", "state": "opened", "types": ["TASK"], "first": 20}

    def test_datetimes_are_iso(self) -> None:
        """Test that datetime values use ISO 8601."""
        variables = gql_variables(ListWorkItemsOptions(created_after=datetime(2024, 1, 1, tzinfo=UTC)))
        assert variables[0].value == "2024-01-01T00:00:00Z"

    def test_no_options(self) -> None:
        """Test that None yields no variables."""
        assert gql_variables(None) == []

    def test_missing_marker(self) -> None:
        """Test that a field without a GQL marker is rejected."""

        class BrokenOptions(RequestOptions):
            state: Annotated[str | None, GQL("state", "String")] = None
            search: str | None = None

        with pytest.raises(RequestConstructionError, match="BrokenOptions.search"):
            gql_variables(BrokenOptions(state="opened"))


class TestWorkItems:
    """Tests for the work items service."""

    def test_get_work_item_by_numeric_id(self, make_client, responder, recorded) -> None:
        """Test that a numeric ID is sent as a global ID and the node is flattened."""
        client = make_client(responder(json={"data": {"workItem": WORK_ITEM_NODE}}))

        item, _ = client.work_items.get_work_item_by_id(179785913)

        assert sent_body(recorded[0])["variables"] == {"id": "gid://gitlab/WorkItem/179785913"}
        assert item.id == 179785913
        assert item.gid == "gid://gitlab/WorkItem/179785913"
        assert item.iid == 5
        assert item.type == "Task"
        assert item.status == "In progress"
        assert item.closed_at is None
        assert item.author is not None
        assert item.author.username == "alice"
        assert item.author.id == 1
        assert item.author.locked is False
        assert [(u.username, u.locked) for u in item.assignees] == [("bob", True)]

    def test_get_work_item_by_global_id_string(self, make_client, responder, recorded) -> None:
        """Test that a global ID string is sent unchanged."""
        client = make_client(responder(json={"data": {"workItem": WORK_ITEM_NODE}}))

        client.work_items.get_work_item_by_id("gid://gitlab/WorkItem/179785913")

        assert sent_body(recorded[0])["variables"]["id"] == "gid://gitlab/WorkItem/179785913"

    def test_get_work_item_by_id_rejects_other_types(self, make_client, responder, recorded) -> None:
        """Test that an ID of the wrong type fails before sending."""
        client = make_client(responder(json={}))

        with pytest.raises(InvalidIDTypeError):
            client.work_items.get_work_item_by_id(1.5)
        assert recorded == []

    def test_get_work_item_by_id_not_found(self, make_client, responder) -> None:
        """Test that a null node raises NotFoundError."""
        client = make_client(responder(json={"data": {"workItem": None}}))

        with pytest.raises(NotFoundError) as exc_info:
            client.work_items.get_work_item_by_id(1)
        assert exc_info.value.status_code == 404

    def test_get_work_item_by_iid(self, make_client, responder, recorded) -> None:
        """Test looking up a work item by namespace path and IID."""
        body = {"data": {"namespace": {"workItems": {"nodes": [WORK_ITEM_NODE]}}}}
        client = make_client(responder(json=body))

        item, _ = client.work_items.get_work_item("group/project", 5)

        assert sent_body(recorded[0])["variables"] == {"fullPath": "group/project", "iid": "5"}
        assert item.title == "Fix the flaky test"

    def test_get_work_item_by_iid_not_found(self, make_client, responder) -> None:
        """Test that an empty node list raises NotFoundError."""
        client = make_client(responder(json={"data": {"namespace": {"workItems": {"nodes": []}}}}))

        with pytest.raises(NotFoundError, match="group/project#9"):
            client.work_items.get_work_item("group/project", 9)

    def test_list_work_items(self, make_client, responder, recorded) -> None:
        """Test that filters become query variables and arguments."""
        nodes = [
            {"id": "gid://gitlab/WorkItem/1", "iid": "1", "title": "First"},
            {"id": "gid://gitlab/WorkItem/2", "iid": "2", "title": "Second"},
        ]
        client = make_client(responder(json={"data": {"namespace": {"workItems": {"nodes": nodes}}}}))

        items, _ = client.work_items.list_work_items("group", ListWorkItemsOptions(state="opened", first=2))

        body = sent_body(recorded[0])
        assert body["variables"] == {"fullPath": "group", "state": "opened", "first": 2}
        assert "query ListWorkItems($fullPath: ID!, $state: IssuableState, $first: Int)" in body["query"]
        assert "workItems(state: $state, first: $first)" in body["query"]
        assert [(i.id, i.iid, i.title) for i in items] == [(1, 1, "First"), (2, 2, "Second")]

    def test_list_work_items_without_filters(self, make_client, responder, recorded) -> None:
        """Test the query shape when no filters are given."""
        client = make_client(responder(json={"data": {"namespace": None}}))

        items, _ = client.work_items.list_work_items("group")

        body = sent_body(recorded[0])
        assert items == []
        assert body["variables"] == {"fullPath": "group"}
        assert "workItems {" in body["query"]


class TestTerraformStates:
    """Tests for the Terraform states service."""

    STATE = {
        "name": "production",
        "createdAt": "2024-01-01T00:00:00Z",
        "updatedAt": "2024-02-01T00:00:00Z",
        "deletedAt": None,
        "lockedAt": None,
        "latestVersion": {
            "createdAt": "2024-02-01T00:00:00Z",
            "updatedAt": "2024-02-01T00:00:00Z",
            "downloadPath": "/api/v4/projects/1/terraform/state/production/versions/3",
            "serial": 3,
        },
    }

    def test_list_states(self, make_client, responder, recorded) -> None:
        """Test listing the states of a project."""
        body = {"data": {"project": {"terraformStates": {"nodes": [self.STATE]}}}}
        client = make_client(responder(json=body))

        states, _ = client.terraform_states.list_states("group/project")

        assert sent_body(recorded[0])["variables"] == {"projectFullPath": "group/project"}
        assert len(states) == 1
        assert states[0].name == "production"
        assert states[0].latest_version is not None
        assert states[0].latest_version.serial == 3
        assert states[0].locked_at is None

    def test_get_state_not_found(self, make_client, responder) -> None:
        """Test that a missing state raises NotFoundError."""
        client = make_client(responder(json={"data": {"project": {"terraformState": None}}}))

        with pytest.raises(NotFoundError, match="production"):
            client.terraform_states.get_state("group/project", "production")

    def test_download_latest(self, make_client, responder, recorded) -> None:
        """Test that the state file is returned raw from the REST backend."""
        client = make_client(responder(content=b'{"version": 4}'))

        state, _ = client.terraform_states.download_latest("group/project", "production")

        assert state == b'{"version": 4}'
        assert recorded[0].url.raw_path == b"/api/v4/projects/group%2Fproject/terraform/state/production"

    def test_lock_and_unlock(self, make_client, responder, recorded) -> None:
        """Test the lock endpoints."""
        client = make_client(responder(status_code=204))

        client.terraform_states.lock(1, "production")
        client.terraform_states.unlock(1, "production")

        assert [(r.method, r.url.path) for r in recorded] == [
            ("POST", "/api/v4/projects/1/terraform/state/production/lock"),
            ("DELETE", "/api/v4/projects/1/terraform/state/production/lock"),
        ]
