"""Typed decoding of response bodies."""

import functools
from typing import Any, get_origin

from pydantic import TypeAdapter


@functools.lru_cache(maxsize=256)
def type_adapter(result: Any) -> TypeAdapter[Any]:
    """Cached TypeAdapter for a result type (a model, ``list[Model]``, ``dict[str, Any]``...)."""
    return TypeAdapter(result)


def result_name(result: Any) -> str:
    # Generic aliases report their origin's __name__ ("list")
    if get_origin(result) is not None:
        return str(result)
    return getattr(result, "__name__", None) or str(result)
