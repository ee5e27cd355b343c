"""One-way importers for artifacts written by other tools."""

from .loopy import decode_loopy
from .vensim import decode_vensim

__all__ = ["decode_loopy", "decode_vensim"]
