"""Query string parameters."""

from urllib.parse import parse_qsl

from velix._internal.multimap import MultiDict


class QueryParams(MultiDict):
    """Immutable query string parameters.

    ``?tag=a&tag=b`` keeps both values (``get_list("tag")``); plain lookups
    return the first. Blank values are kept, ``+`` decodes to a space, and
    percent-escapes decode as UTF-8.
    """

    __slots__ = ("_raw",)

    def __init__(self, query_string: bytes | str = b"") -> None:
        if isinstance(query_string, str):
            query_string = query_string.encode("utf-8")
        self._raw = query_string
        super().__init__(
            parse_qsl(
                query_string.decode("utf-8", errors="replace"),
                keep_blank_values=True,
                encoding="utf-8",
                errors="replace",
            )
        )

    def get_int(self, key: str, default: int | None = None) -> int | None:
        """Return the value as an int, or *default* if missing or not numeric."""
        value = self.get(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            return default

    @property
    def raw(self) -> bytes:
        return self._raw
