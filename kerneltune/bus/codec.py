"""
Bus Message Codec

Requests arrive as JSON objects. Replies are serialised with json_escape for
every string, so raw kernel text (decoded byte for byte) is rendered with
\\u00xx escapes rather than re-encoded as UTF-8.
"""

import json
import math
from typing import Any

from ..common.escape import json_quote
from ..common.exceptions import InvalidRequestError


def decode_request(body: bytes | str) -> dict[str, Any]:
    """
    Parse a request payload.

    An empty body is an empty request. Anything other than a JSON object is
    rejected.
    """
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidRequestError("Request payload is not valid UTF-8") from e

    if not body.strip():
        return {}

    try:
        payload = json.loads(body)
    except json.JSONDecodeError as e:
        raise InvalidRequestError(f"Invalid JSON payload: {e.msg}") from e

    if not isinstance(payload, dict):
        raise InvalidRequestError("Request payload must be a JSON object")
    return payload


def encode_reply(obj: Any) -> str:
    """Serialise a reply object to JSON text"""
    if isinstance(obj, dict):
        members = (f"{json_quote(str(k))}: {encode_reply(v)}" for k, v in obj.items())
        return "{" + ", ".join(members) + "}"
    if isinstance(obj, (list, tuple)):
        return "[" + ", ".join(encode_reply(v) for v in obj) + "]"
    if isinstance(obj, (str, bytes)):
        return json_quote(obj)
    if isinstance(obj, float) and not math.isfinite(obj):
        return "null"
    if obj is None or isinstance(obj, (bool, int, float)):
        return json.dumps(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")
