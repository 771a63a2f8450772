"""Request headers as delivered by the ASGI server."""

from collections.abc import Mapping

from velix._internal.multimap import MultiDict


class Headers(MultiDict):
    """Immutable, case-insensitive request headers.

    Keys are lowercased on the way in, so ``headers["Content-Type"]`` and
    ``headers["content-type"]`` are the same lookup. Values are decoded as
    latin-1, the wire encoding of header bytes. The original byte pairs
    stay available through ``raw``.
    """

    __slots__ = ("_raw",)

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        self._raw = tuple(raw)
        super().__init__(
            (name.decode("latin-1"), value.decode("latin-1")) for name, value in self._raw
        )

    @staticmethod
    def _fold(key: str) -> str:
        return key.lower()

    @classmethod
    def from_mapping(cls, headers: Mapping[str, str] | None) -> "Headers":
        """Build headers from a plain ``{name: value}`` mapping."""
        return cls(
            tuple(
                (name.lower().encode("latin-1"), value.encode("latin-1"))
                for name, value in (headers or {}).items()
            )
        )

    @property
    def raw(self) -> tuple[tuple[bytes, bytes], ...]:
        return self._raw
