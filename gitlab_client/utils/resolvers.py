"""Identifier resolution helpers for gitlab-client.

GitLab accepts either a numeric ID or a full path (``group/project``) wherever
a URL embeds a project, group or namespace reference. These helpers turn such
a value into a path-safe segment.
"""

import logging
import re
from dataclasses import dataclass
from urllib.parse import quote

from gitlab_client.exceptions import InvalidIDTypeError, RequestConstructionError

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


@dataclass(frozen=True)
class NumericID:
    """A numeric database ID."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise InvalidIDTypeError(self.value)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class PathString:
    """A full path such as ``group/subgroup/project``."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise InvalidIDTypeError(self.value)

    def __str__(self) -> str:
        return self.value


Identifier = int | str | NumericID | PathString


def parse_id(value: object) -> str:
    """Normalize an identifier to its string form.

    Args:
        value: Numeric ID, path string, NumericID or PathString

    Returns:
        The identifier as a string (not yet escaped)

    Raises:
        InvalidIDTypeError: If value is of any other type (bool and float included)
    """
    if isinstance(value, (NumericID, PathString)):
        return str(value)
    if isinstance(value, bool):
        raise InvalidIDTypeError(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return value
    raise InvalidIDTypeError(value)


def path_escape(segment: str) -> str:
    """Escape a string for use as a single URL path segment.

    Slashes are encoded so ``group/project`` stays one segment, and dots are
    encoded because GitLab would otherwise treat a trailing ``.json`` or
    ``.atom`` as a format suffix.
    """
    return quote(segment, safe="").replace(".", "%2E")


def resolve_path(template: str, *args: object) -> str:
    """Fill the ``{placeholders}`` of a path template with escaped identifiers.

    Args:
        template: Path relative to the API root, e.g. ``projects/{pid}/pipelines/{pipeline}``
        *args: One identifier per placeholder, in order

    Returns:
        The populated path

    Raises:
        InvalidIDTypeError: If an argument is not an int or a string
        RequestConstructionError: If the number of arguments does not match the template
    """
    names = _PLACEHOLDER.findall(template)
    if len(names) != len(args):
        raise RequestConstructionError(
            f"path {template!r} expects {len(names)} argument(s) ({', '.join(names)}), got {len(args)}"
        )

    segments = iter([path_escape(parse_id(arg)) for arg in args])
    path = _PLACEHOLDER.sub(lambda _: next(segments), template)
    logger.debug(f"Resolved {template} -> {path}")
    return path
