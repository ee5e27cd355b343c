"""Single entry point for loading any supported artifact and saving native ones.

Loads are all-or-nothing: the artifact is decoded and staged into a scratch
`DiagramModel` first, so a parse or validation failure leaves the caller's
model untouched. Advisories are delivered before the first mutation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import ValidationError

from .codec.schemas import CURRENT_GENERATION
from .detect import ArtifactFormat, detect_format
from .errors import MalformedPayloadError
from .graph.builder import build_signed_digraph
from .graph.loops import find_feedback_loops
from .importers import decode_loopy, decode_vensim
from .model import DecodedDiagram, DiagramModel, DiagramModelProtocol
from .native import CODECS

logger = logging.getLogger(__name__)

Notify = Callable[[str], None]

DECODERS: Dict[ArtifactFormat, Callable[[str], DecodedDiagram]] = {
    ArtifactFormat.SMWKS_V1: CODECS[1][0],
    ArtifactFormat.SMWKS_V2: CODECS[2][0],
    ArtifactFormat.LOOPY: decode_loopy,
    ArtifactFormat.VENSIM: decode_vensim,
}


@dataclass
class LoadResult:
    """What happened during one `deserialize_any` call."""

    format: ArtifactFormat
    warnings: List[str] = field(default_factory=list)
    version: Optional[Tuple[int, int, int]] = None

    @property
    def loaded(self) -> bool:
        return self.format is not ArtifactFormat.UNKNOWN


def stage(decoded: DecodedDiagram) -> DiagramModel:
    """Replay decoded configs into a fresh model, surfacing bad field values."""
    staging = DiagramModel()
    try:
        decoded.replay(staging)
    except ValidationError as e:
        raise MalformedPayloadError(f"Artifact contains invalid values: {e}") from e
    return staging


def deserialize_any(
    model: DiagramModelProtocol,
    raw_data: str,
    filename: str,
    notify: Optional[Notify] = None,
) -> LoadResult:
    """Load `raw_data` into `model`, picking the decoder from `filename` and content.

    Unrecognised files are a no-op. On error nothing in `model` has changed.
    """
    artifact_format = detect_format(raw_data, filename)
    decoder = DECODERS.get(artifact_format)
    if decoder is None:
        logger.debug(f"Ignoring unrecognised artifact {filename!r}")
        return LoadResult(format=artifact_format)

    logger.info(f"Loading {filename!r} as {artifact_format.value}")
    decoded = decoder(raw_data)
    stage(decoded)

    for message in decoded.warnings:
        logger.warning(message)
        if notify is not None:
            notify(message)

    decoded.replay(model)
    if decoded.version is not None and hasattr(model, "version"):
        model.version = decoded.version  # type: ignore[attr-defined]

    return LoadResult(
        format=artifact_format,
        warnings=list(decoded.warnings),
        version=decoded.version,
    )


def serialize(model: Any) -> str:
    """Serialize `model` in the current native format."""
    encoder = CODECS[CURRENT_GENERATION][1]
    return encoder(model)


def summarize(model: Any) -> Dict[str, Any]:
    """Counts, metadata and feedback loops of a loaded diagram."""
    graph = build_signed_digraph(model)
    return {
        "nodes": len(model.nodes),
        "edges": len(model.edges),
        "labels": len(model.labels),
        "loop_marks": len(model.loop_marks),
        "node_uid": model.node_uid,
        "version": list(getattr(model, "version", ()) or ()),
        "loops": find_feedback_loops(graph),
    }
