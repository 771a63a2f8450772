"""Cookie parsing and ``Set-Cookie`` serialization.

Consolidates the read side (``parse_cookies``, used by Request) and the
write side (``CookieSpec``, used by Response) in one module.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from email.utils import formatdate
from enum import StrEnum
from typing import Any
from urllib.parse import quote, unquote

CookieOptions = Mapping[str, Any] | int | str | None

# RFC 6265 cookie-octets that need no escaping (``%`` is always escaped)
_COOKIE_SAFE = "!#$&'()*+-./:<=>?@[]^_`{|}~"


class SameSite(StrEnum):
    LAX = "Lax"
    STRICT = "Strict"
    NONE = "None"


def parse_cookies(header: str) -> dict[str, str]:
    """Parse a ``Cookie`` header value into a name-value dict.

    Returns an empty dict for empty or missing headers.
    """
    if not header:
        return {}
    cookies: dict[str, str] = {}
    for pair in header.split(";"):
        pair = pair.strip()
        if "=" in pair:
            key, _, value = pair.partition("=")
            cookies[key.strip()] = unquote(value.strip())
    return cookies


@dataclass(frozen=True, slots=True)
class CookieSpec:
    """A ``Set-Cookie`` directive attached to a Response.

    ``expires`` is a Unix timestamp; ``0`` makes a session cookie. A
    string is passed through verbatim as the ``Expires`` attribute.
    """

    name: str
    value: str
    expires: int | str = 0
    path: str = "/"
    domain: str | None = None
    secure: bool = False
    httponly: bool = False
    samesite: SameSite | None = None

    def to_header_value(self) -> str:
        """Serialize to a ``Set-Cookie`` header value string."""
        parts = [f"{self.name}={quote(self.value, safe=_COOKIE_SAFE)}"]
        if isinstance(self.expires, str):
            if self.expires:
                parts.append(f"Expires={self.expires}")
        elif self.expires:
            parts.append(f"Expires={formatdate(self.expires, usegmt=True)}")
        if self.path:
            parts.append(f"Path={self.path}")
        if self.domain:
            parts.append(f"Domain={self.domain}")
        if self.secure:
            parts.append("Secure")
        if self.httponly:
            parts.append("HttpOnly")
        if self.samesite:
            parts.append(f"SameSite={self.samesite.value}")
        return "; ".join(parts)


def _coerce_samesite(value: Any) -> SameSite | None:
    if value is None or value == "":
        return None
    if isinstance(value, SameSite):
        return value
    for member in SameSite:
        if member.value.lower() == str(value).lower():
            return member
    msg = f"Invalid SameSite value {value!r}. Expected Lax, Strict, or None."
    raise ValueError(msg)


def build_cookie(name: str, value: Any, options: CookieOptions = None) -> CookieSpec:
    """Normalize the accepted option forms into a ``CookieSpec``.

    *options* is either a bare expiry (int timestamp or preformatted
    string), or a mapping with any of ``expires``, ``path``, ``domain``,
    ``secure``, ``httponly``, ``samesite``. ``httpOnly``/``sameSite``
    spellings and ``expire`` are accepted as aliases.
    """
    if options is None:
        options = {}
    elif isinstance(options, (int, str)) and not isinstance(options, bool):
        options = {"expires": options}
    elif not isinstance(options, Mapping):
        msg = f"Cookie options must be a mapping, int, or str, got {type(options).__name__}"
        raise TypeError(msg)

    def pick(*keys: str, default: Any = None) -> Any:
        for key in keys:
            if key in options:
                return options[key]
        return default

    expires = pick("expires", "expire", default=0)
    if isinstance(expires, str) and expires.isdigit():
        expires = int(expires)

    return CookieSpec(
        name=name,
        value=str(value),
        expires=expires,
        path=pick("path", default="/"),
        domain=pick("domain"),
        secure=bool(pick("secure", default=False)),
        httponly=bool(pick("httponly", "httpOnly", "http_only", default=False)),
        samesite=_coerce_samesite(pick("samesite", "sameSite", "same_site")),
    )
