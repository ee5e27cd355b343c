"""Wire-level codecs: percent-text fields, positional tuple schemas and the V2 envelope."""

from .envelope import parse_envelope, render_envelope
from .schemas import CURRENT_GENERATION, GENERATIONS, Generation, TupleSchema
from .text import decode_text, encode_text, encode_text_twice

__all__ = [
    "CURRENT_GENERATION",
    "GENERATIONS",
    "Generation",
    "TupleSchema",
    "decode_text",
    "encode_text",
    "encode_text_twice",
    "parse_envelope",
    "render_envelope",
]
