"""Classification of non-success responses for gitlab-client."""

import json
import logging
from collections.abc import Mapping
from typing import Any

import httpx

from gitlab_client.exceptions import APIError, AuthenticationError, NotFoundError, UnexpectedResultCodeError
from gitlab_client.response import Response

logger = logging.getLogger(__name__)

SUCCESS_STATUS_CODES = frozenset({200, 201, 202, 204, 304})

STATUS_ERRORS: dict[int, type[APIError]] = {
    401: AuthenticationError,
    404: NotFoundError,
}

ErrorTable = Mapping[int, type[APIError]]


def parse_error_message(raw: Any) -> str:
    """Flatten a decoded GitLab error body into one line.

    Strings are kept, lists render as ``[a, b]`` and objects as sorted
    ``{key: value}`` items joined with ``, ``.
    """
    if isinstance(raw, str):
        return raw
    if isinstance(raw, list):
        return "[" + ", ".join(parse_error_message(item) for item in raw) + "]"
    if isinstance(raw, dict):
        parts = sorted(f"{{{key}: {parse_error_message(value)}}}" for key, value in raw.items())
        return ", ".join(parts)
    return f"failed to parse unexpected error type: {type(raw).__name__}"


def display_url(url: httpx.URL) -> str:
    """Scheme, host and path of a URL with the path's percent escapes preserved."""
    path = url.raw_path.decode("ascii").split("?", 1)[0]
    return f"{url.scheme}://{url.netloc.decode('ascii')}{path}"


def error_class_for(status_code: int, errors: ErrorTable | None = None) -> type[APIError]:
    """Pick the error kind for a status code.

    Args:
        status_code: HTTP status of the failed response
        errors: Status table of an endpoint family; codes missing from it
            are reported as UnexpectedResultCodeError

    Returns:
        APIError subclass to raise
    """
    if errors is not None:
        return errors.get(status_code, UnexpectedResultCodeError)
    return STATUS_ERRORS.get(status_code, APIError)


def check_response(raw: httpx.Response, meta: Response, errors: ErrorTable | None = None) -> None:
    """Raise the classified APIError for a non-success response.

    Raises:
        APIError: Or the subclass picked by ``error_class_for``
    """
    if raw.status_code in SUCCESS_STATUS_CODES:
        return

    body = raw.read()
    message = ""
    if body.strip():
        try:
            message = parse_error_message(json.loads(body))
        except ValueError:
            message = f"failed to parse unknown error format: {body.decode('utf-8', errors='replace')}"

    error_class = error_class_for(raw.status_code, errors)
    error = error_class(
        raw.status_code,
        message=message,
        body=body,
        response=meta,
        method=raw.request.method,
        url=display_url(raw.request.url),
    )
    logger.debug(f"Classified {raw.status_code} response as {error_class.__name__}: {error}")
    raise error
