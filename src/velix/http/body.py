"""JSON boundary: lenient request decoding, Unicode-preserving encoding."""

import json as json_module
from typing import Any

from velix.errors import MalformedRequestBody

JSON_CONTENT_TYPE = "application/json; charset=utf-8"


def parse_json_object(raw: bytes) -> dict[str, Any]:
    """Decode *raw* as a JSON object.

    An empty payload decodes to ``{}``.

    Raises:
        MalformedRequestBody: If *raw* is not JSON, nests deeper than the
            decoder can follow, or is JSON but not an object (a list or a
            scalar has no keys to look up).
    """
    if not raw.strip():
        return {}
    try:
        value = json_module.loads(raw)
    except (ValueError, RecursionError) as exc:
        msg = f"Request body is not valid JSON: {exc}"
        raise MalformedRequestBody(msg) from exc
    if not isinstance(value, dict):
        msg = f"Expected a JSON object, got {type(value).__name__}"
        raise MalformedRequestBody(msg)
    return value


def encode_json(data: Any) -> str:
    """Serialize *data* with non-ASCII characters left unescaped."""
    return json_module.dumps(data, ensure_ascii=False)
