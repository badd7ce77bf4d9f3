"""Unit tests for request construction and request options."""

import json

import httpx
import pytest

from gitlab_client import (
    AuthType,
    GitLabClient,
    InvalidIDTypeError,
    RequestConstructionError,
    with_header,
    with_headers,
    with_keyset_pagination_parameters,
    with_offset_pagination_parameters,
    with_sudo,
    with_timeout,
    with_token,
)


@pytest.fixture
def client(mock_env_vars: dict) -> GitLabClient:
    """Client that never sends anything."""
    with GitLabClient(validate=False) as client:
        yield client


class TestNewRequest:
    """Tests for BaseClient.new_request."""

    def test_url_is_relative_to_api_root(self, client: GitLabClient) -> None:
        """Test that paths are joined below /api/v4."""
        request = client.new_request("GET", "projects/1")
        assert str(request.url) == "https://gitlab.example.com/api/v4/projects/1"

    def test_escaped_segments_are_preserved(self, client: GitLabClient) -> None:
        """Test that an escaped project path stays one segment on the wire."""
        request = client.new_request("GET", "projects/group%2Fproject")
        assert request.url.raw_path == b"/api/v4/projects/group%2Fproject"

    def test_default_headers(self, client: GitLabClient) -> None:
        """Test the headers every request carries."""
        request = client.new_request("GET", "projects")
        assert request.headers["Accept"] == "application/json"
        assert request.headers["User-Agent"] == "gitlab-client"
        assert "Content-Type" not in request.headers

    def test_body_request(self, client: GitLabClient) -> None:
        """Test that POST options become a JSON body."""
        request = client.new_request("POST", "projects", {"name": "demo", "description": None})
        assert request.headers["Content-Type"] == "application/json"
        assert json.loads(request.content) == {"name": "demo"}
        assert request.url.query == b""

    def test_query_request(self, client: GitLabClient) -> None:
        """Test that GET options become query parameters."""
        request = client.new_request("get", "projects", {"search": "demo", "archived": False})
        assert request.method == "GET"
        assert request.url.params["search"] == "demo"
        assert request.url.params["archived"] == "false"
        assert request.content == b""

    def test_host_mismatch_is_rejected(self, client: GitLabClient) -> None:
        """Test that absolute URLs must point at the configured host."""
        with pytest.raises(RequestConstructionError, match="matching the configured base URL"):
            client.new_request_to_url("GET", "https://other.example.com/api/v4/projects")

    def test_absolute_url_on_same_host(self, client: GitLabClient) -> None:
        """Test that absolute URLs on the configured host are accepted."""
        request = client.new_request_to_url("GET", "https://gitlab.example.com/api/graphql")
        assert request.url.path == "/api/graphql"

    def test_unencodable_options(self, client: GitLabClient) -> None:
        """Test that options that cannot be encoded fail request construction."""
        with pytest.raises(RequestConstructionError, match="failed to encode options"):
            client.new_request("POST", "projects", {"name": object()})


class TestRequestOptions:
    """Tests for per-request options."""

    def test_options_apply_in_order(self, client: GitLabClient) -> None:
        """Test that a later option overrides an earlier one."""
        request = client.new_request("GET", "projects", None, [with_header("X-Test", "1"), with_header("X-Test", "2")])
        assert request.headers["X-Test"] == "2"

    def test_none_options_are_skipped(self, client: GitLabClient) -> None:
        """Test that None entries in the option list are ignored."""
        request = client.new_request("GET", "projects", None, [None, with_headers({"A": "1", "B": "2"})])
        assert request.headers["A"] == "1"
        assert request.headers["B"] == "2"

    def test_failing_option(self, client: GitLabClient) -> None:
        """Test that an option raising an arbitrary error fails request construction."""

        def broken(request: httpx.Request) -> None:
            raise KeyError("missing")

        with pytest.raises(RequestConstructionError) as exc_info:
            client.new_request("GET", "projects", None, [broken])
        assert isinstance(exc_info.value.__cause__, KeyError)

    def test_library_errors_pass_through(self, client: GitLabClient) -> None:
        """Test that an option raising a GitLabError keeps its kind."""

        def bad_id(request: httpx.Request) -> None:
            raise InvalidIDTypeError(1.5)

        with pytest.raises(InvalidIDTypeError):
            client.new_request("GET", "projects", None, [bad_id])

    def test_default_options_run_first(self, mock_env_vars: dict) -> None:
        """Test that client defaults apply before per-call options."""
        with GitLabClient(validate=False, default_options=[with_header("X-Env", "default")]) as client:
            plain = client.new_request("GET", "projects")
            overridden = client.new_request("GET", "projects", None, [with_header("X-Env", "call")])
        assert plain.headers["X-Env"] == "default"
        assert overridden.headers["X-Env"] == "call"

    def test_sudo(self, client: GitLabClient) -> None:
        """Test that with_sudo sets the Sudo header from a username or ID."""
        assert client.new_request("GET", "user", None, [with_sudo("alice")]).headers["Sudo"] == "alice"
        assert client.new_request("GET", "user", None, [with_sudo(5)]).headers["Sudo"] == "5"

    def test_sudo_rejects_invalid_id(self) -> None:
        """Test that with_sudo validates its identifier."""
        with pytest.raises(InvalidIDTypeError):
            with_sudo(2.5)  # type: ignore[arg-type]

    def test_token_override_wins(self, make_client, responder, recorded) -> None:
        """Test that with_token replaces the client credentials for one call."""
        client = make_client(responder(json={"version": "17.0.0"}))
        client.version.get_version(with_token(AuthType.PRIVATE_TOKEN, "other-token"))
        client.version.get_version()

        assert recorded[0].headers["PRIVATE-TOKEN"] == "other-token"
        assert recorded[1].headers["PRIVATE-TOKEN"] == "test-token-12345"

    def test_oauth_token_override(self, client: GitLabClient) -> None:
        """Test the header written for an OAuth token override."""
        request = client.new_request("GET", "user", None, [with_token(AuthType.OAUTH_TOKEN, "abc")])
        assert request.headers["Authorization"] == "Bearer abc"

    def test_timeout(self, client: GitLabClient) -> None:
        """Test that with_timeout sets the httpx timeout extension."""
        request = client.new_request("GET", "projects", None, [with_timeout(2.5)])
        assert request.extensions["timeout"]["read"] == 2.5

    def test_keyset_pagination(self, client: GitLabClient) -> None:
        """Test that the next link's cursor is merged into the query."""
        next_link = "https://gitlab.example.com/api/v4/projects?cursor=abc&pagination=keyset&per_page=2"
        request = client.new_request(
            "GET", "projects", {"pagination": "keyset", "per_page": 2}, [with_keyset_pagination_parameters(next_link)]
        )
        assert request.url.params["cursor"] == "abc"
        assert request.url.params.get_list("pagination") == ["keyset"]

    def test_offset_pagination(self, client: GitLabClient) -> None:
        """Test that the page parameter replaces any page already set."""
        request = client.new_request("GET", "projects", {"page": 1}, [with_offset_pagination_parameters(3)])
        assert request.url.params.get_list("page") == ["3"]


class TestUploadRequest:
    """Tests for multipart uploads."""

    def test_multipart_body(self, client: GitLabClient) -> None:
        """Test that the file and text fields are sent as multipart/form-data."""
        request = client.upload_request(
            "POST", "projects/1/uploads", b"file-bytes", "notes.txt", opt={"description": "hello"}
        )
        content = request.read()

        assert request.headers["Content-Type"].startswith("multipart/form-data; boundary=")
        assert b'name="file"; filename="notes.txt"' in content
        assert b"file-bytes" in content
        assert b'name="description"' in content
        assert b"hello" in content

    def test_custom_field_name(self, client: GitLabClient) -> None:
        """Test that the file part can use another field name."""
        request = client.upload_request("PUT", "user/avatar", b"\x89PNG", "me.png", field="avatar")
        assert b'name="avatar"; filename="me.png"' in request.read()
