from __future__ import annotations

from typing import Any, Dict, List

from jsonschema import Draft7Validator

from ..errors import MalformedPayloadError

_ARRAY = {"type": "array"}
_NUMBER = {"type": "number"}

# Shape only: collections must be arrays, the UID a number. Tuples are not inspected.
NATIVE_BODY_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "smwks native body",
    "type": "array",
    "minItems": 5,
    "items": [_ARRAY, _ARRAY, _ARRAY, _NUMBER, _ARRAY],
}

LOOPY_BODY_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Loopy body",
    "type": "array",
    "minItems": 4,
    "items": [_ARRAY, _ARRAY, _ARRAY, _NUMBER],
}


def validate_shape(instance: List[Any], schema: Dict[str, Any]) -> None:
    """Validate a parsed top-level array against a shape schema.

    Raises MalformedPayloadError naming the first failing path.
    """
    validator = Draft7Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: list(e.path))
    if errors:
        first = errors[0]
        raise MalformedPayloadError(
            f"{schema.get('title', 'artifact')} shape error at {list(first.path)}: {first.message}"
        )
