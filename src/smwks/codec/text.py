"""Percent-escaping for free-text fields (labels, colors, annotation text).

The escape matches JavaScript's `encodeURIComponent`: everything except
letters, digits and ``-_.!~*'()`` is UTF-8 percent-encoded. Writers apply it
twice, readers reverse it once. Artifacts in the wild depend on that
asymmetry, so ``decode_text(encode_text_twice(s))`` is only equal to ``s`` when
``s`` contains nothing the escape rewrites.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote, unquote

from ..errors import MalformedPayloadError

# Characters encodeURIComponent leaves alone on top of letters, digits and "_.-~"
_SAFE = "!*'()"


def encode_text(value: Any) -> str:
    """Escape one text field once."""
    return quote(str(value), safe=_SAFE)


def encode_text_twice(value: Any) -> str:
    """Escape a text field the way every writer has always stored it."""
    return encode_text(encode_text(value))


def decode_text(value: Any) -> str:
    """Reverse the escape once."""
    try:
        return unquote(str(value), errors="strict")
    except UnicodeDecodeError as e:
        raise MalformedPayloadError(f"Invalid percent-escaped text {value!r}: {e}") from e
