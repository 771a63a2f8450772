"""Route template compilation and request path normalization.

A template such as ``/api/users/{name}`` is split into ``/``-delimited
segments once, at registration time. Matching a request is then a
segment-by-segment comparison with no regular expressions involved.
"""

import re
from dataclasses import dataclass
from urllib.parse import unquote

from velix.errors import MalformedRoute

# Characters trimmed from both ends of templates and request paths
BOUNDARY_CHARS = " \t\n\r/"

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


@dataclass(frozen=True, slots=True)
class Segment:
    """One ``/``-delimited piece of a compiled template.

    Literal:      ``users``   (is_param=False)
    Placeholder:  ``{name}``  (is_param=True, value="name")
    """

    value: str
    is_param: bool = False

    def matches(self, part: str) -> bool:
        """Whether a request path segment satisfies this template segment."""
        if self.is_param:
            return part != ""
        return part == self.value


@dataclass(frozen=True, slots=True)
class CompiledRoute:
    """An immutable, pre-split route template.

    ``param_names`` lists placeholder identifiers in order of first
    appearance, left to right.
    """

    source: str
    segments: tuple[Segment, ...]
    param_names: tuple[str, ...]

    def match(self, parts: list[str]) -> dict[str, str] | None:
        """Return captured placeholder values, or ``None`` on mismatch.

        *parts* are the segments of an already normalized request path.
        """
        if len(parts) != len(self.segments):
            return None
        params: dict[str, str] = {}
        for segment, part in zip(self.segments, parts, strict=True):
            if not segment.matches(part):
                return None
            if segment.is_param:
                params[segment.value] = part
        return params


def split_path(path: str) -> list[str]:
    """Split a trimmed path into segments. The empty path has none."""
    if not path:
        return []
    return path.split("/")


def compile_template(template: str) -> CompiledRoute:
    """Compile a route template into a ``CompiledRoute``.

    Examples::

        "/users"          -> [Segment("users")]
        "/users/{name}"   -> [Segment("users"), Segment("name", is_param=True)]
        "/"               -> []

    Raises ``MalformedRoute`` when a placeholder identifier is empty,
    not identifier-shaped, or used twice in the same template.
    """
    source = template.strip(BOUNDARY_CHARS)
    segments: list[Segment] = []
    names: list[str] = []

    for part in split_path(source):
        if part.startswith("{") and part.endswith("}"):
            name = part[1:-1]
            if not name:
                raise MalformedRoute(template, "empty placeholder '{}'")
            if not _IDENTIFIER.fullmatch(name):
                raise MalformedRoute(template, f"{name!r} is not a valid identifier")
            if name in names:
                raise MalformedRoute(template, f"duplicate placeholder {name!r}")
            names.append(name)
            segments.append(Segment(name, is_param=True))
        else:
            segments.append(Segment(part))

    return CompiledRoute(source=source, segments=tuple(segments), param_names=tuple(names))


def normalize_path(raw: str) -> str:
    """Normalize a request target for matching.

    Drops any query string or fragment, decodes percent-escapes as UTF-8
    (``%E0%B8%81`` becomes ``ก``), then trims whitespace and slashes from
    both ends. This is path decoding, not form decoding: ``+`` stays a
    literal plus rather than becoming a space.

    Normalizing twice gives the same result as once, except for paths
    whose decoded form still holds an escape or a delimiter: ``%2541``
    decodes to ``%41`` and ``a%3Fb`` to ``a?b``, and a second pass would
    decode or cut those again.
    """
    path = raw.split("?", 1)[0].split("#", 1)[0]
    return unquote(path, encoding="utf-8", errors="replace").strip(BOUNDARY_CHARS)
