"""Static fallback content for requests no route matched.

Serves a single index file (conventionally ``public/index.html``) so a
single-page frontend can own every path the API does not.

Security: resolves symlinks and verifies the final path is within the
configured directory.
"""

import mimetypes
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class StaticContent:
    body: bytes
    content_type: str


class StaticFallback:
    """File-existence-checked fallback page.

    Usage::

        fallback = StaticFallback("./public")
        content = fallback.load()  # None when public/index.html is missing
    """

    __slots__ = ("_directory", "_index")

    def __init__(self, directory: str | Path, index: str = "index.html") -> None:
        self._directory = Path(directory).resolve()
        self._index = index

    @property
    def path(self) -> Path:
        return self._directory / self._index

    def load(self) -> StaticContent | None:
        """Read the fallback file, or return ``None`` if it does not exist."""
        file_path = self.path.resolve()
        if not file_path.is_relative_to(self._directory) or not file_path.is_file():
            return None

        content_type, _ = mimetypes.guess_type(str(file_path))
        if content_type is None:
            content_type = "application/octet-stream"
        elif content_type.startswith("text/"):
            content_type = f"{content_type}; charset=utf-8"

        return StaticContent(body=file_path.read_bytes(), content_type=content_type)
