"""Work out which decoder an artifact needs from its filename and text.

This is the only place that sniffs raw text; everything downstream works from
the returned `ArtifactFormat`.
"""

from __future__ import annotations

from enum import Enum

from .codec.envelope import DELIMITER


class ArtifactFormat(str, Enum):
    SMWKS_V1 = "smwks-v1"
    SMWKS_V2 = "smwks-v2"
    LOOPY = "loopy"
    VENSIM = "vensim-mdl"
    UNKNOWN = "unknown"


NATIVE_EXTENSION = "smwks"
LOOPY_EXTENSION = "loopy"
VENSIM_EXTENSION = "mdl"


def file_extension(filename: str) -> str:
    """Text after the last dot, lowercased. A name without a dot is its own extension."""
    return filename.rsplit(".", 1)[-1].lower()


def detect_format(raw: str, filename: str) -> ArtifactFormat:
    ext = file_extension(filename)
    if ext == NATIVE_EXTENSION:
        # V1 bodies only hold double-quoted strings; V2 always has the envelope apostrophe
        return ArtifactFormat.SMWKS_V2 if DELIMITER in raw else ArtifactFormat.SMWKS_V1
    if ext == LOOPY_EXTENSION:
        return ArtifactFormat.LOOPY
    if ext == VENSIM_EXTENSION:
        return ArtifactFormat.VENSIM
    return ArtifactFormat.UNKNOWN
