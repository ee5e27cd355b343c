"""smwks package root.

Persistence and interchange for SystemicWorks causal-loop diagrams: the native
`.smwks` formats (both generations), plus one-way importers for Loopy files and
Vensim `.mdl` sketches.
"""

from .detect import ArtifactFormat, detect_format
from .errors import MalformedPayloadError, ShapeMismatchError, SmwksError
from .loader import LoadResult, deserialize_any, serialize, summarize
from .model import DiagramModel

__all__ = [
    "ArtifactFormat",
    "DiagramModel",
    "LoadResult",
    "MalformedPayloadError",
    "ShapeMismatchError",
    "SmwksError",
    "deserialize_any",
    "detect_format",
    "serialize",
    "summarize",
]
