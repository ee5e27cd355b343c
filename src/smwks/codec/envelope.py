"""The V2 on-disk envelope: ``<version array>'<mutated body array>``.

Writing renders the version triple alone, then the body with every double
quote spelled ``%22`` and the closing bracket spelled ``%5D``. Reading splits on
the first apostrophe and undoes the two substitutions before JSON parsing.
The substitutions cannot collide with text fields: those are escaped twice,
so any ``%`` that belongs to a field is always followed by ``25``.
"""

from __future__ import annotations

import json
import math
from typing import Any, List, Sequence, Tuple

from ..errors import MalformedPayloadError

DELIMITER = "'"
QUOTE_TOKEN = "%22"
CLOSE_TOKEN = "%5D"


def js_round(value: Any) -> int:
    """Round half up, like JavaScript's Math.round."""
    return int(math.floor(float(value) + 0.5))


def js_number(value: Any) -> Any:
    """Render integral floats as ints so output matches JSON.stringify."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def dumps_compact(data: Any) -> str:
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def _reject_constant(name: str) -> Any:
    raise MalformedPayloadError(f"Non-finite number {name} is not valid JSON")


def _finite_float(text: str) -> float:
    # Literals like 1e400 overflow to inf
    value = float(text)
    if not math.isfinite(value):
        raise MalformedPayloadError(f"Number {text} is out of range")
    return value


def loads_array(text: str, what: str = "artifact body") -> List[Any]:
    """Parse `text` as a JSON array, raising MalformedPayloadError otherwise.

    NaN and Infinity are rejected the way JSON.parse rejects them.
    """
    try:
        data = json.loads(text, parse_constant=_reject_constant, parse_float=_finite_float)
    except json.JSONDecodeError as e:
        raise MalformedPayloadError(f"Could not parse {what} as JSON: {e}") from e
    if not isinstance(data, list):
        raise MalformedPayloadError(f"Expected {what} to be an array, got {type(data).__name__}")
    return data


def mutate_body(body: str) -> str:
    """Apply the historical quote/closing-bracket spelling to a rendered body."""
    body = body.replace('"', QUOTE_TOKEN)
    return body[:-1] + CLOSE_TOKEN


def restore_body(body: str) -> str:
    """Undo `mutate_body`. Plain JSON passes through unchanged."""
    body = body.strip()
    if body.endswith(CLOSE_TOKEN):
        body = body[: -len(CLOSE_TOKEN)] + "]"
    # A mutated body has no literal quotes left
    if '"' in body:
        return body
    return body.replace(QUOTE_TOKEN, '"')


def render_envelope(version: Sequence[int], body: Sequence[Any]) -> str:
    """Produce the artifact text for a version triple and the body collections."""
    version_str = dumps_compact([int(v) for v in version])
    # Never true for a list of ints, but the delimiter must stay unique
    if DELIMITER in version_str:
        raise ValueError(f"Version string may not contain {DELIMITER!r}: {version_str}")
    return version_str + DELIMITER + mutate_body(dumps_compact(list(body)))


def parse_envelope(text: str) -> Tuple[Tuple[int, int, int], List[Any]]:
    """Split an envelope into its version triple and parsed body array."""
    if DELIMITER not in text:
        raise MalformedPayloadError("Envelope has no version delimiter")
    version_str, body = text.split(DELIMITER, 1)
    if not version_str.strip() or not body.strip():
        raise MalformedPayloadError("Envelope has an empty version or body")

    version = loads_array(version_str, "envelope version")
    if len(version) != 3 or not all(isinstance(v, int) and not isinstance(v, bool) for v in version):
        raise MalformedPayloadError(f"Envelope version must be three integers, got {version_str!r}")

    return (version[0], version[1], version[2]), loads_array(restore_body(body), "envelope body")
