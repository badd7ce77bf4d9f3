"""Base GitLab client with the request/response primitives."""

import logging
import os
import threading
from collections.abc import Iterable
from typing import IO, Any

import httpx
from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError

from gitlab_client.auth import AccessTokenAuthSource, AuthSource
from gitlab_client.context import RequestContext
from gitlab_client.exceptions import (
    AuthenticationError,
    ConfigurationError,
    DecodeError,
    GitLabError,
    RequestCancelledError,
    RequestConstructionError,
    RequestTimeoutError,
    TransportError,
)
from gitlab_client.request_options import CONTEXT_EXTENSION, RequestOption
from gitlab_client.response import Response
from gitlab_client.utils.decorators import translate_transport_errors
from gitlab_client.utils.decoding import result_name, type_adapter
from gitlab_client.utils.encoding import BODY_METHODS, encode_form, encode_options
from gitlab_client.utils.errors import SUCCESS_STATUS_CODES, ErrorTable, check_response

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://gitlab.com"
API_VERSION_PATH = "/api/v4"
USER_AGENT = "gitlab-client"

Options = BaseModel | dict[str, Any] | None


class BaseClient:
    """HTTP primitives shared by every resource service.

    Builds requests relative to ``<base_url>/api/v4``, sends them through one
    ``httpx.Client`` and decodes the responses into typed results. The client
    holds no per-call state; it is safe to share between threads.
    """

    token: str | None
    base_url: str
    auth_source: AuthSource
    api_url: str
    http: httpx.Client

    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        *,
        auth_source: AuthSource | None = None,
        user_agent: str = USER_AGENT,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
        default_options: Iterable[RequestOption] = (),
        validate: bool = False,
    ):
        """Initialize GitLab API client.

        Args:
            token: GitLab personal access token (ignored when auth_source is given)
            base_url: GitLab instance URL
            auth_source: How to authenticate requests (defaults to the access token)
            user_agent: User-Agent header sent with every request
            timeout: Transport timeout in seconds
            transport: Custom httpx transport (e.g. httpx.MockTransport in tests)
            default_options: Request options applied to every request, before per-call ones
            validate: Whether to test connectivity on init
        """
        self.token = token or os.getenv("GITLAB_TOKEN")
        self.base_url = (
            base_url or os.getenv("GITLAB_BASE_URL") or os.getenv("GITLAB_URL") or DEFAULT_BASE_URL
        ).rstrip("/")
        self.base_url = self.base_url.removesuffix(API_VERSION_PATH)
        self._validate_configuration(auth_source)

        # self.token is guaranteed to be str after validation when no source was given
        self.auth_source = auth_source or AccessTokenAuthSource(str(self.token))

        self.api_url = f"{self.base_url}{API_VERSION_PATH}"
        self.user_agent = user_agent
        self.default_options = list(default_options)
        self.http = httpx.Client(
            headers={"User-Agent": user_agent},
            timeout=timeout,
            transport=transport,
        )
        self._auth_lock = threading.Lock()
        self._auth_initialized = False

        if validate:
            self._test_connectivity()
        else:
            logger.info(f"GitLab client initialized for {self.base_url} (validation skipped)")

    def _validate_configuration(self, auth_source: AuthSource | None) -> None:
        """Validate token and URL configuration."""
        if not self.token and auth_source is None:
            logger.debug("GITLAB_TOKEN not set in environment variables")
            raise ConfigurationError(
                "GITLAB_TOKEN environment variable is required. Set it in your .env file or environment."
            )

        if not self.base_url.startswith(("http://", "https://")):
            logger.debug(f"Invalid GITLAB_URL: {self.base_url}")
            raise ConfigurationError(f"GITLAB_URL must start with http:// or https://, got: {self.base_url}")

    def _test_connectivity(self) -> None:
        """Test connectivity to GitLab instance."""
        try:
            version_info, _ = self.do(self.new_request("GET", "version"), dict[str, Any])
            logger.info(f"Connected to GitLab {version_info.get('version', 'unknown')} at {self.base_url}")
        except AuthenticationError as e:
            raise ConfigurationError("Invalid GITLAB_TOKEN - authentication failed") from e
        except TransportError as e:
            raise ConfigurationError(f"Cannot connect to GitLab at {self.base_url}. Check your GITLAB_URL.") from e

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "BaseClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # Request building

    def new_request(
        self,
        method: str,
        path: str,
        opt: Options = None,
        options: Iterable[RequestOption | None] = (),
    ) -> httpx.Request:
        """Build a request for a path relative to the API root.

        Args:
            method: HTTP method
            path: Path below /api/v4, already escaped (see resolve_path)
            opt: Options encoded as JSON body (POST/PUT/PATCH) or query string
            options: Per-request customizations, applied after the client defaults

        Raises:
            RequestConstructionError: If encoding or a request option fails
        """
        return self.new_request_to_url(method, f"{self.api_url}/{path.lstrip('/')}", opt, options)

    def new_request_to_url(
        self,
        method: str,
        url: str | httpx.URL,
        opt: Options = None,
        options: Iterable[RequestOption | None] = (),
    ) -> httpx.Request:
        """Build a request for an absolute URL on the configured GitLab host."""
        target = httpx.URL(url)
        base = httpx.URL(self.api_url)
        if target.scheme != base.scheme or target.host != base.host or target.port != base.port:
            raise RequestConstructionError(
                f"client only allows requests to URLs matching the configured base URL. "
                f"Got {str(target)!r}, base URL is {self.api_url!r}"
            )

        method = method.upper()
        headers = {"Accept": "application/json"}
        if method in BODY_METHODS:
            headers["Content-Type"] = "application/json"

        try:
            body, query = encode_options(method, opt)
            request = self.http.build_request(method, target, params=query or None, json=body, headers=headers)
        except (ValueError, TypeError) as e:
            raise RequestConstructionError(f"failed to encode options for {method} {target}: {e}") from e

        self._apply_options(request, options)
        return request

    def upload_request(
        self,
        method: str,
        path: str,
        content: bytes | IO[bytes],
        filename: str,
        field: str = "file",
        opt: Options = None,
        options: Iterable[RequestOption | None] = (),
    ) -> httpx.Request:
        """Build a multipart/form-data request carrying one file.

        Args:
            method: HTTP method
            path: Path below /api/v4, already escaped
            content: File contents or a binary file object
            filename: File name reported to GitLab
            field: Form field name of the file part (e.g. "file", "avatar")
            opt: Options sent as additional text fields
            options: Per-request customizations
        """
        fields: dict[str, list[str]] = {}
        try:
            for name, value in encode_form(opt):
                fields.setdefault(name, []).append(value)
        except (ValueError, TypeError) as e:
            raise RequestConstructionError(f"failed to encode form fields: {e}") from e

        request = self.http.build_request(
            method.upper(),
            f"{self.api_url}/{path.lstrip('/')}",
            data=fields,
            files={field: (filename, content)},
            headers={"Accept": "application/json"},
        )
        self._apply_options(request, options)
        return request

    def _apply_options(self, request: httpx.Request, options: Iterable[RequestOption | None]) -> None:
        for option in [*self.default_options, *options]:
            if option is None:
                continue
            try:
                option(request)
            except GitLabError:
                raise
            except Exception as e:
                raise RequestConstructionError(f"request option failed: {e}") from e

    # Dispatch

    def do(
        self,
        request: httpx.Request,
        result: Any = None,
        dest: IO[bytes] | None = None,
        errors: ErrorTable | None = None,
    ) -> tuple[Any, Response]:
        """Send a request and decode its response.

        Args:
            request: Request from new_request / upload_request
            result: Type to decode the JSON body into (a model, list[Model], dict...),
                ``bytes`` for the raw body, or None to skip decoding
            dest: Binary stream the body is copied into instead of decoding
            errors: Status table of the endpoint family for classifying failures

        Returns:
            Tuple of (decoded value or None, response metadata)

        Raises:
            APIError: Non-success status (metadata available as ``err.response``)
            DecodeError: Body does not match ``result``
            TransportError: Network failure; RequestTimeoutError / RequestCancelledError
                for expired or cancelled contexts
        """
        ctx: RequestContext | None = request.extensions.get(CONTEXT_EXTENSION)
        if ctx is not None:
            self._check_context(ctx)
            remaining = ctx.remaining()
            if remaining is not None:
                request.extensions["timeout"] = httpx.Timeout(remaining).as_dict()

        self._authenticate(request)

        logger.debug(f"{request.method} {request.url}")
        raw = self._send(request)
        try:
            if ctx is not None:
                self._check_context(ctx)
            meta = Response(raw)
            if raw.status_code not in SUCCESS_STATUS_CODES:
                self._read(raw)
            check_response(raw, meta, errors)
            return self._decode(raw, meta, result, dest, ctx), meta
        finally:
            raw.close()

    def _authenticate(self, request: httpx.Request) -> None:
        with self._auth_lock:
            if not self._auth_initialized:
                self.auth_source.init(self)
                self._auth_initialized = True

        name, value = self.auth_source.header()
        # A header set by a request option wins over the client's credentials
        if name not in request.headers:
            request.headers[name] = value

    @staticmethod
    def _check_context(ctx: RequestContext) -> None:
        if ctx.cancelled:
            raise RequestCancelledError("request context cancelled")
        if ctx.expired:
            raise RequestTimeoutError("request context deadline exceeded")

    @translate_transport_errors("send request")
    def _send(self, request: httpx.Request) -> httpx.Response:
        return self.http.send(request, stream=True)

    @translate_transport_errors("read response body")
    def _read(self, raw: httpx.Response) -> bytes:
        return raw.read()

    @translate_transport_errors("stream response body")
    def _stream_to(self, raw: httpx.Response, dest: IO[bytes], ctx: RequestContext | None) -> None:
        for chunk in raw.iter_bytes():
            if ctx is not None:
                self._check_context(ctx)
            dest.write(chunk)

    def _decode(
        self,
        raw: httpx.Response,
        meta: Response,
        result: Any,
        dest: IO[bytes] | None,
        ctx: RequestContext | None,
    ) -> Any:
        if dest is not None:
            self._stream_to(raw, dest, ctx)
            return None

        if result is None:
            return None

        content = self._read(raw)
        if result is bytes:
            return content
        if raw.status_code == 204 or not content.strip():
            return None

        try:
            return type_adapter(result).validate_json(content)
        except ValidationError as e:
            raise DecodeError(f"failed to decode response into {result_name(result)}: {e}", response=meta) from e
