"""Option encoding for gitlab-client.

Options travel as a JSON body for POST, PUT and PATCH and as a query string
for every other method. Both encoders start from the same JSON-mode dump of
the options model, so a field serializes the same way in either target.
"""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

logger = logging.getLogger(__name__)

BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


def _dump(options: BaseModel | Mapping[str, Any]) -> dict[str, Any]:
    if isinstance(options, Mapping):
        return {key: value for key, value in options.items() if value is not None}

    data = options.model_dump(mode="json", by_alias=True, exclude_unset=True, exclude_none=True)
    reset_fields = getattr(options, "reset_fields", None)
    if reset_fields is not None:
        for name in reset_fields():
            data[name] = None
    return data


def encode_body(options: BaseModel | Mapping[str, Any] | None) -> dict[str, Any] | None:
    """Encode options as a JSON request body.

    Returns:
        Dict of the fields to send, or None when there are no options
    """
    if options is None:
        return None
    return _dump(options)


def _format_scalar(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _flatten(key: str, value: Any, pairs: list[tuple[str, str]]) -> None:
    if isinstance(value, Mapping):
        for sub_key, sub_value in value.items():
            _flatten(f"{key}[{sub_key}]", sub_value, pairs)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _flatten(f"{key}[]", item, pairs)
    else:
        pairs.append((key, _format_scalar(value)))


def encode_query(options: BaseModel | Mapping[str, Any] | None) -> list[tuple[str, str]]:
    """Encode options as query string pairs.

    Lists repeat the key with a ``[]`` suffix, mappings nest as ``key[sub]``
    and lists of mappings as ``key[][sub]``, matching what the GitLab API
    parses.

    Returns:
        Ordered list of (name, value) pairs
    """
    if options is None:
        return []

    pairs: list[tuple[str, str]] = []
    for key, value in _dump(options).items():
        _flatten(key, value, pairs)
    return pairs


def encode_form(options: BaseModel | Mapping[str, Any] | None) -> list[tuple[str, str]]:
    """Encode options as multipart text fields (same flattening as the query)."""
    return encode_query(options)


def encode_options(method: str, options: BaseModel | Mapping[str, Any] | None) -> tuple[dict[str, Any] | None, list[tuple[str, str]]]:
    """Encode options for the given HTTP method.

    Returns:
        Tuple of (json_body, query_pairs); exactly one of them carries the options
    """
    if method.upper() in BODY_METHODS:
        body = encode_body(options)
        logger.debug(f"Encoded {method} body fields: {sorted(body) if body else []}")
        return body, []
    query = encode_query(options)
    logger.debug(f"Encoded {method} query with {len(query)} parameter(s)")
    return None, query
