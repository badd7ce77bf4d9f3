"""Declarative endpoint definitions.

A resource service lists its endpoints as class attributes::

    class PipelinesService(Service):
        get_pipeline = Endpoint("GET", "projects/{pid}/pipelines/{pipeline}", result=Pipeline)

Calling ``client.pipelines.get_pipeline(1, 42)`` resolves the identifiers into
the path, encodes the options, sends the request and decodes the result. Every
call returns a ``(result, Response)`` tuple.
"""

import logging
import re
from collections.abc import Iterable, Mapping
from typing import IO, TYPE_CHECKING, Any

from gitlab_client.exceptions import RequestConstructionError
from gitlab_client.response import Response
from gitlab_client.utils.errors import ErrorTable
from gitlab_client.utils.resolvers import resolve_path

if TYPE_CHECKING:
    from gitlab_client.client.base import BaseClient

logger = logging.getLogger(__name__)


class Endpoint:
    """One API endpoint: HTTP method, path template, options type and result type.

    Bound calls take the path identifiers positionally (one per ``{placeholder}``),
    then the options value if the endpoint declares an options type, then any
    number of request options. ``opt`` may also be passed by keyword, and raw
    endpoints (``result=bytes``) accept ``dest`` to stream the body into a file.

    Args:
        method: HTTP method
        path: Path template relative to /api/v4
        options: RequestOptions subclass accepted by the endpoint, if any
        result: Type the response body decodes into; None for no body
        errors: Status table of the endpoint family (see utils.errors.error_class_for)
        doc: Description shown as the bound method's docstring
    """

    def __init__(
        self,
        method: str,
        path: str,
        options: type | None = None,
        result: Any = None,
        errors: ErrorTable | None = None,
        doc: str | None = None,
    ):
        self.method = method.upper()
        self.path = path
        self.options = options
        self.result = result
        self.errors = errors
        self.arity = len(re.findall(r"\{\w+\}", path))
        self.name = ""
        self.__doc__ = doc

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = f"{owner.__name__}.{name}"

    def __get__(self, service: "Service | None", owner: type | None = None) -> Any:
        if service is None:
            return self
        return BoundEndpoint(self, service)

    def __repr__(self) -> str:
        return f"<Endpoint {self.method} {self.path}>"

    def call(
        self,
        service: "Service",
        *args: Any,
        opt: Any = None,
        dest: IO[bytes] | None = None,
    ) -> tuple[Any, Response]:
        if len(args) < self.arity:
            raise RequestConstructionError(
                f"{self.name} expects {self.arity} path argument(s) for {self.path!r}, got {len(args)}"
            )

        path_args, rest = args[: self.arity], list(args[self.arity :])
        if self.options is not None and rest and not callable(rest[0]):
            if opt is not None:
                raise RequestConstructionError(f"{self.name} got options both positionally and by keyword")
            opt = rest.pop(0)

        self._check_options(opt)
        for option in rest:
            if option is not None and not callable(option):
                raise RequestConstructionError(
                    f"{self.name}: request options must be callables, got {type(option).__name__}"
                )
        if dest is not None and self.result is not bytes:
            raise RequestConstructionError(f"{self.name} does not return a raw body; dest is not supported")

        path = resolve_path(self.path, *path_args)
        logger.debug(f"Calling {self.name}")
        client = service.client
        request = client.new_request(self.method, path, opt, rest)
        return client.do(request, self.result, dest=dest, errors=self.errors)

    def _check_options(self, opt: Any) -> None:
        if opt is None:
            return
        if self.options is None:
            raise RequestConstructionError(f"{self.name} takes no options, got {type(opt).__name__}")
        if not isinstance(opt, (self.options, Mapping)):
            raise RequestConstructionError(
                f"{self.name} expects {self.options.__name__}, got {type(opt).__name__}"
            )


class BoundEndpoint:
    """An Endpoint bound to a service instance."""

    def __init__(self, endpoint: Endpoint, service: "Service"):
        self.endpoint = endpoint
        self.service = service
        self.__doc__ = endpoint.__doc__

    def __call__(self, *args: Any, opt: Any = None, dest: IO[bytes] | None = None) -> tuple[Any, Response]:
        return self.endpoint.call(self.service, *args, opt=opt, dest=dest)

    def __repr__(self) -> str:
        return f"<bound {self.endpoint.name} {self.endpoint.method} {self.endpoint.path}>"


class Service:
    """Base class for resource services."""

    def __init__(self, client: "BaseClient"):
        self.client = client

    def _dispatch(
        self,
        method: str,
        path: str,
        opt: Any = None,
        options: Iterable[Any] = (),
        result: Any = None,
        dest: IO[bytes] | None = None,
        errors: ErrorTable | None = None,
    ) -> tuple[Any, Response]:
        """Build and send a request for a path that is already escaped.

        For endpoints whose path cannot be expressed as a template of single
        segments (e.g. artifact paths that keep their slashes).
        """
        request = self.client.new_request(method, path, opt, options)
        return self.client.do(request, result, dest=dest, errors=errors)

    @classmethod
    def endpoints(cls) -> dict[str, Endpoint]:
        """All endpoints declared on the service, by attribute name."""
        found: dict[str, Endpoint] = {}
        for klass in reversed(cls.__mro__):
            for name, value in vars(klass).items():
                if isinstance(value, Endpoint):
                    found[name] = value
        return found
