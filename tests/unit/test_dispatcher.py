"""Unit tests for sending requests and decoding responses."""

import io
import json

import httpx
import pytest

from gitlab_client import (
    APIError,
    DecodeError,
    NotFoundError,
    RequestCancelledError,
    RequestContext,
    RequestTimeoutError,
    TransportError,
    with_context,
)
from gitlab_client.client.merge_requests import UpdateMergeRequestOptions
from gitlab_client.client.pipelines import PipelineInfo


class TestDecoding:
    """Tests for decoding successful responses."""

    def test_list_preserves_order(self, make_client, responder, recorded, sample_pipeline: dict) -> None:
        """Test that a JSON array decodes into models in server order."""
        second = {**sample_pipeline, "id": 790, "status": "failed"}
        client = make_client(responder(json=[sample_pipeline, second]))

        pipelines, resp = client.pipelines.list_project_pipelines(1)

        assert [p.id for p in pipelines] == [789, 790]
        assert all(isinstance(p, PipelineInfo) for p in pipelines)
        assert pipelines[1].status == "failed"
        assert resp.status_code == 200
        assert recorded[0].method == "GET"
        assert recorded[0].url.path == "/api/v4/projects/1/pipelines"

    def test_missing_and_null_fields_use_defaults(self, make_client, responder) -> None:
        """Test that absent or null fields decode to their zero values."""
        client = make_client(responder(json={"id": 5, "name": None}))

        pipeline, _ = client.pipelines.get_pipeline(1, 5)

        assert pipeline.id == 5
        assert pipeline.name == ""
        assert pipeline.user is None

    def test_explicit_false_is_sent(self, make_client, responder, recorded, sample_merge_request: dict) -> None:
        """Test that an explicit false option reaches the request body."""
        client = make_client(responder(json=sample_merge_request))

        client.merge_requests.update_merge_request(1, 1, UpdateMergeRequestOptions(remove_source_branch=False))

        assert json.loads(recorded[0].content) == {"remove_source_branch": False}

    def test_raw_body(self, make_client, responder) -> None:
        """Test that bytes endpoints return the body unparsed."""
        client = make_client(responder(content=b"Running with gitlab-runner\n"))

        trace, resp = client.jobs.get_trace_file("group/project", 1001)

        assert trace == b"Running with gitlab-runner\n"
        assert resp.status_code == 200

    def test_stream_into_dest(self, make_client, responder) -> None:
        """Test that dest receives the body and no value is returned."""
        client = make_client(responder(content=b"PK\x03\x04archive"))
        dest = io.BytesIO()

        result, _ = client.jobs.get_job_artifacts(1, 1001, dest=dest)

        assert result is None
        assert dest.getvalue() == b"PK\x03\x04archive"

    def test_no_content(self, make_client, responder) -> None:
        """Test that 204 responses decode to None."""
        client = make_client(responder(status_code=204))

        result, resp = client.pipelines.delete_pipeline(1, 789)

        assert result is None
        assert resp.status_code == 204

    def test_not_modified_with_result_type(self, make_client, responder) -> None:
        """Test that an empty success body yields None even when a result type is declared."""
        client = make_client(responder(status_code=304))

        issue, resp = client.issues.subscribe_to_issue(1, 42)

        assert issue is None
        assert resp.status_code == 304

    def test_decode_error_carries_response(self, make_client, responder) -> None:
        """Test that a body of the wrong shape raises DecodeError with metadata."""
        client = make_client(responder(json={"id": "not-a-list"}))

        with pytest.raises(DecodeError, match="PipelineInfo") as exc_info:
            client.pipelines.list_project_pipelines(1)
        assert exc_info.value.response is not None
        assert exc_info.value.response.status_code == 200

    def test_invalid_json(self, make_client, responder) -> None:
        """Test that a malformed JSON body raises DecodeError."""
        client = make_client(responder(content=b"<html>oops</html>", headers={"Content-Type": "text/html"}))

        with pytest.raises(DecodeError):
            client.pipelines.get_pipeline(1, 5)


class TestErrorResponses:
    """Tests for non-success responses."""

    def test_not_found(self, make_client, responder) -> None:
        """Test that a 404 raises a classified error with metadata."""
        client = make_client(responder(status_code=404, json={"message": "404 Project Not Found"}))

        with pytest.raises(NotFoundError) as exc_info:
            client.pipelines.list_project_pipelines(3)

        err = exc_info.value
        assert err.status_code == 404
        assert err.response is not None
        assert err.response.status_code == 404
        assert err.method == "GET"
        assert err.url == "https://gitlab.example.com/api/v4/projects/3/pipelines"
        assert "404 Project Not Found" in str(err)

    def test_validation_errors_are_flattened(self, make_client, responder) -> None:
        """Test that GitLab's field error objects become one readable message."""
        body = {"message": {"name": ["has already been taken"], "color": ["is invalid"]}}
        client = make_client(responder(status_code=400, json=body))

        with pytest.raises(APIError) as exc_info:
            client.labels.create_label(1, {"name": "bug"})

        assert exc_info.value.message == "{message: {color: [is invalid]}, {name: [has already been taken]}}"
        assert type(exc_info.value) is APIError

    def test_unparseable_error_body(self, make_client, responder) -> None:
        """Test that a non-JSON error body is kept in the message."""
        client = make_client(responder(status_code=502, content=b"Bad Gateway"))

        with pytest.raises(APIError, match="failed to parse unknown error format: Bad Gateway") as exc_info:
            client.version.get_version()
        assert exc_info.value.body == b"Bad Gateway"

    def test_escaped_path_in_error(self, make_client, responder) -> None:
        """Test that the error URL keeps the escaped project path."""
        client = make_client(responder(status_code=404, json={"message": "404 Not found"}))

        with pytest.raises(NotFoundError) as exc_info:
            client.projects.get_project("group/project")
        assert exc_info.value.url.endswith("/projects/group%2Fproject")


class TestResponseMetadata:
    """Tests for the Response wrapper."""

    def test_pagination_headers(self, make_client, responder) -> None:
        """Test that offset pagination headers are parsed as integers."""
        headers = {
            "X-Total": "42",
            "X-Total-Pages": "3",
            "X-Per-Page": "20",
            "X-Page": "1",
            "X-Next-Page": "2",
            "X-Prev-Page": "",
        }
        client = make_client(responder(json=[], headers=headers))

        _, resp = client.pipelines.list_project_pipelines(1)

        assert resp.total_items == 42
        assert resp.total_pages == 3
        assert resp.items_per_page == 20
        assert resp.current_page == 1
        assert resp.next_page == 2
        assert resp.previous_page == 0

    def test_link_header(self, make_client, responder) -> None:
        """Test that keyset pagination links are exposed."""
        link = (
            '<https://gitlab.example.com/api/v4/projects?cursor=abc&pagination=keyset>; rel="next", '
            '<https://gitlab.example.com/api/v4/projects?pagination=keyset>; rel="first"'
        )
        client = make_client(responder(json=[], headers={"Link": link}))

        _, resp = client.projects.list_projects()

        assert resp.next_link == "https://gitlab.example.com/api/v4/projects?cursor=abc&pagination=keyset"
        assert resp.first_link == "https://gitlab.example.com/api/v4/projects?pagination=keyset"
        assert resp.previous_link == ""
        assert resp.last_link == ""

    def test_no_link_header(self, make_client, responder) -> None:
        """Test that links are empty without a Link header."""
        client = make_client(responder(json=[]))

        _, resp = client.projects.list_projects()

        assert resp.next_link == ""
        assert resp.next_page == 0


class TestTransportFailures:
    """Tests for network failures, timeouts and cancellation."""

    def test_connection_error(self, make_client) -> None:
        """Test that connection failures raise TransportError chained to httpx."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)

        with pytest.raises(TransportError) as exc_info:
            client.version.get_version()
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_timeout(self, make_client) -> None:
        """Test that transport timeouts raise RequestTimeoutError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client = make_client(handler)

        with pytest.raises(RequestTimeoutError):
            client.version.get_version()

    def test_cancelled_context(self, make_client, responder, recorded) -> None:
        """Test that a cancelled context stops the call before sending."""
        client = make_client(responder(json={"version": "17.0.0"}))
        ctx = RequestContext()
        ctx.cancel()

        with pytest.raises(RequestCancelledError):
            client.version.get_version(with_context(ctx))
        assert recorded == []

    def test_cancelled_while_in_flight(self, make_client) -> None:
        """Test that cancelling after the request was sent fails without a result."""
        ctx = RequestContext()
        sent = []

        def handler(request: httpx.Request) -> httpx.Response:
            sent.append(request)
            ctx.cancel()
            return httpx.Response(200, json={"version": "17.0.0"})

        client = make_client(handler)

        with pytest.raises(RequestCancelledError):
            client.version.get_version(with_context(ctx))
        assert len(sent) == 1

    def test_cancelled_between_body_chunks(self, make_client) -> None:
        """Test that a streamed download stops at the chunk after cancellation."""
        ctx = RequestContext()

        def chunks():
            yield b"first"
            ctx.cancel()
            yield b"second"

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=chunks())

        client = make_client(handler)
        buf = io.BytesIO()

        with pytest.raises(RequestCancelledError):
            client.jobs.download_single_artifacts_file(1, 1001, "out.txt", with_context(ctx), dest=buf)
        assert buf.getvalue() == b"first"

    def test_expired_context(self, make_client, responder, recorded) -> None:
        """Test that an expired deadline fails with RequestTimeoutError."""
        client = make_client(responder(json={"version": "17.0.0"}))

        with pytest.raises(RequestTimeoutError):
            client.version.get_version(with_context(RequestContext(timeout=0)))
        assert recorded == []

    def test_context_deadline_bounds_timeout(self, make_client, responder, recorded) -> None:
        """Test that the remaining deadline becomes the transport timeout."""
        client = make_client(responder(json={"version": "17.0.0"}))

        version, _ = client.version.get_version(with_context(RequestContext(timeout=60)))

        assert version.version == "17.0.0"
        assert 0 < recorded[0].extensions["timeout"]["read"] <= 60

    def test_cancelled_errors_are_transport_errors(self) -> None:
        """Test the error hierarchy for cancellation and deadlines."""
        assert issubclass(RequestCancelledError, TransportError)
        assert issubclass(RequestTimeoutError, TransportError)
