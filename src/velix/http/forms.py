"""Form body parsing: URL-encoded and multipart.

URL-encoded bodies go through ``urllib.parse``; ``multipart/form-data``
is fed to ``python-multipart``'s streaming parser in one write. Bodies of
any other content type carry no form fields.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import parse_qsl

from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import MultipartParser, parse_options_header

from velix._internal.multimap import MultiDict
from velix.errors import MalformedRequestBody

FORM_URLENCODED = "application/x-www-form-urlencoded"
FORM_MULTIPART = "multipart/form-data"


@dataclass(frozen=True, slots=True)
class UploadFile:
    """A file part of a multipart submission, held in memory."""

    filename: str
    content_type: str
    size: int
    _content: bytes

    def read(self) -> bytes:
        return self._content

    def save(self, path: str | Path) -> None:
        """Write the content to *path*. Parent directories must exist."""
        Path(path).write_bytes(self._content)

    def __repr__(self) -> str:
        return f"UploadFile({self.filename!r}, {self.content_type!r}, {self.size} bytes)"


class FormData(MultiDict):
    """Immutable form fields, plus uploaded files by field name.

    Text fields behave like ``QueryParams`` (first value on lookup,
    ``get_list`` for checkboxes and multi-selects). Files live apart in
    ``files`` and never show up as text fields.
    """

    __slots__ = ("_files",)

    def __init__(
        self,
        data: Mapping[str, list[str]] | None = None,
        files: Mapping[str, UploadFile] | None = None,
    ) -> None:
        super().__init__((key, value) for key, values in (data or {}).items() for value in values)
        self._files = dict(files or {})

    @classmethod
    def from_pairs(
        cls,
        pairs: list[tuple[str, str]],
        files: Mapping[str, UploadFile] | None = None,
    ) -> "FormData":
        grouped: dict[str, list[str]] = {}
        for key, value in pairs:
            grouped.setdefault(key, []).append(value)
        return cls(grouped, files)

    @property
    def files(self) -> Mapping[str, UploadFile]:
        return self._files


def parse_form_data(body: bytes, content_type: str | None) -> FormData:
    """Parse a request body into ``FormData`` according to *content_type*.

    Raises:
        MalformedRequestBody: If a form-encoded body cannot be parsed.
    """
    if not body or not content_type:
        return FormData()

    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type == FORM_URLENCODED:
        return _parse_urlencoded(body)
    if media_type == FORM_MULTIPART:
        return _parse_multipart(body, content_type)
    return FormData()


def _parse_urlencoded(body: bytes) -> FormData:
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as exc:
        msg = "URL-encoded body is not valid UTF-8"
        raise MalformedRequestBody(msg) from exc
    return FormData.from_pairs(parse_qsl(text, keep_blank_values=True))


class _PartCollector:
    """Turns ``MultipartParser`` callbacks into text fields and files."""

    __slots__ = ("_data", "_header_name", "_header_value", "_headers", "fields", "files")

    def __init__(self) -> None:
        self.fields: list[tuple[str, str]] = []
        self.files: dict[str, UploadFile] = {}
        self._headers: dict[str, str] = {}
        self._header_name = bytearray()
        self._header_value = bytearray()
        self._data = bytearray()

    def callbacks(self) -> dict[str, Any]:
        return {
            "on_part_begin": self.on_part_begin,
            "on_header_begin": self.on_header_begin,
            "on_header_field": self.on_header_field,
            "on_header_value": self.on_header_value,
            "on_header_end": self.on_header_end,
            "on_part_data": self.on_part_data,
            "on_part_end": self.on_part_end,
        }

    def on_part_begin(self) -> None:
        self._headers = {}
        self._data = bytearray()

    def on_header_begin(self) -> None:
        self._header_name = bytearray()
        self._header_value = bytearray()

    def on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_name.extend(data[start:end])

    def on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value.extend(data[start:end])

    def on_header_end(self) -> None:
        name = self._header_name.decode("latin-1").lower()
        self._headers[name] = self._header_value.decode("latin-1")

    def on_part_data(self, data: bytes, start: int, end: int) -> None:
        self._data.extend(data[start:end])

    def on_part_end(self) -> None:
        disposition = self._headers.get("content-disposition")
        if disposition is None:
            return
        _, params = parse_options_header(disposition)
        raw_name = params.get(b"name")
        if raw_name is None:
            return

        name = raw_name.decode("utf-8", errors="replace")
        content = bytes(self._data)
        filename = params.get(b"filename")
        if filename is None:
            self.fields.append((name, content.decode("utf-8", errors="replace")))
            return

        self.files[name] = UploadFile(
            filename=filename.decode("utf-8", errors="replace"),
            content_type=self._headers.get("content-type", "application/octet-stream"),
            size=len(content),
            _content=content,
        )


def _parse_multipart(body: bytes, content_type: str) -> FormData:
    _, options = parse_options_header(content_type)
    boundary = options.get(b"boundary")
    if not boundary:
        msg = "multipart/form-data body has no boundary parameter"
        raise MalformedRequestBody(msg)

    collector = _PartCollector()
    try:
        parser = MultipartParser(boundary, collector.callbacks())
        parser.write(body)
        parser.finalize()
    except MultipartParseError as exc:
        msg = f"Invalid multipart body: {exc}"
        raise MalformedRequestBody(msg) from exc

    return FormData.from_pairs(collector.fields, collector.files)
