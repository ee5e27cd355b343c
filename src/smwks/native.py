"""Native SystemicWorks artifacts.

Generation 1 is a bare JSON array ``[nodes, edges, labels, uid, loop_marks]``
whose nodes carry one radius. Generation 2 wraps the same collections, with
width/height nodes, in the version envelope. Writing always targets
`CURRENT_GENERATION`.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from .codec.envelope import js_number, js_round, loads_array, parse_envelope, render_envelope
from .codec.schemas import CURRENT_GENERATION, GENERATIONS, Generation, unpack_all
from .codec.text import decode_text, encode_text_twice
from .errors import MalformedPayloadError
from .model import DEFAULT_VERSION, DecodedDiagram
from .validation.schema import NATIVE_BODY_SCHEMA, validate_shape

logger = logging.getLogger(__name__)

UPGRADE_ADVISORY = (
    "You are importing an old SystemicWorks file, so it will be converted to the new format"
)


def _decode_body(body: List[Any], generation: Generation) -> DecodedDiagram:
    validate_shape(body, NATIVE_BODY_SCHEMA)
    nodes, edges, labels, uid, loop_marks = body[:5]
    decoded = DecodedDiagram(node_uid=uid)

    for fields in unpack_all(generation.node, nodes):
        try:
            w, h = generation.node_size(fields)
        except TypeError as e:
            raise MalformedPayloadError(f"Bad node size in {fields!r}: {e}") from e
        decoded.nodes.append(
            {
                "id": fields["id"],
                "x": fields["x"],
                "y": fields["y"],
                "init": fields["init"],
                "label": decode_text(fields["label"]),
                "color": decode_text(fields["color"]),
                "w": w,
                "h": h,
            }
        )

    for fields in unpack_all(generation.edge, edges):
        decoded.edges.append(
            {
                "from": fields["from"],
                "to": fields["to"],
                "arc": fields["arc"],
                "strength": fields["strength"],
                # Stored but never read back
                "rotation": 0,
                "thickness": fields["thickness"],
                "color": decode_text(fields["color"]),
                "delay": fields["delay"],
            }
        )

    for fields in unpack_all(generation.label, labels):
        decoded.labels.append(
            {
                "x": fields["x"],
                "y": fields["y"],
                "text": decode_text(fields["text"]),
                "color": decode_text(fields["color"]),
            }
        )

    for fields in unpack_all(generation.loop_mark, loop_marks):
        decoded.loop_marks.append(
            {
                "x": fields["x"],
                "y": fields["y"],
                "clockwise": fields["clockwise"],
                "reinforcement": fields["reinforcement"],
                "color": decode_text(fields["color"]),
            }
        )

    logger.info(
        f"Decoded generation {generation.number}: {len(decoded.nodes)} nodes, "
        f"{len(decoded.edges)} edges, {len(decoded.labels)} labels, "
        f"{len(decoded.loop_marks)} loop marks"
    )
    return decoded


def decode_v1(raw: str) -> DecodedDiagram:
    """Decode a legacy bare-array artifact."""
    decoded = _decode_body(loads_array(raw), GENERATIONS[1])
    decoded.warnings.insert(0, UPGRADE_ADVISORY)
    return decoded


def decode_v2(raw: str) -> DecodedDiagram:
    """Decode an envelope artifact."""
    version, body = parse_envelope(raw)
    decoded = _decode_body(body, GENERATIONS[2])
    decoded.version = version
    return decoded


def _encode_collections(model: Any, generation: Generation) -> List[Any]:
    nodes: List[List[Any]] = []
    for node in model.nodes:
        nodes.append(
            generation.node.pack(
                {
                    "id": node.id,
                    "x": js_round(node.x),
                    "y": js_round(node.y),
                    "init": js_number(node.init),
                    "label": encode_text_twice(node.label),
                    "color": encode_text_twice(node.color),
                    "w": js_round(node.w),
                    "h": js_round(node.h),
                }
            )
        )

    edges: List[List[Any]] = []
    for edge in model.edges:
        edges.append(
            generation.edge.pack(
                {
                    "from": edge.from_id,
                    "to": edge.to_id,
                    "arc": js_round(edge.arc),
                    "strength": js_number(edge.strength),
                    "rotation": js_round(edge.rotation),
                    "thickness": js_number(edge.thickness),
                    "color": encode_text_twice(edge.color),
                    "delay": js_number(edge.delay),
                }
            )
        )

    labels: List[List[Any]] = []
    for label in model.labels:
        labels.append(
            generation.label.pack(
                {
                    "x": js_round(label.x),
                    "y": js_round(label.y),
                    "text": encode_text_twice(label.text),
                    "color": encode_text_twice(label.color),
                }
            )
        )

    loop_marks: List[List[Any]] = []
    for loop_mark in model.loop_marks:
        loop_marks.append(
            generation.loop_mark.pack(
                {
                    "x": js_round(loop_mark.x),
                    "y": js_round(loop_mark.y),
                    "clockwise": js_number(loop_mark.clockwise),
                    "reinforcement": js_number(loop_mark.reinforcement),
                    "color": encode_text_twice(loop_mark.color),
                }
            )
        )

    return [nodes, edges, labels, model.node_uid, loop_marks]


def encode(model: Any, version: Optional[Tuple[int, int, int]] = None) -> str:
    """Serialize `model` as a current-generation envelope artifact.

    The version triple defaults to the model's own `version` attribute.
    """
    generation = GENERATIONS[CURRENT_GENERATION]
    if version is None:
        version = tuple(getattr(model, "version", None) or DEFAULT_VERSION)  # type: ignore[assignment]
    body = _encode_collections(model, generation)
    logger.debug(f"Encoding {len(body[0])} nodes with version {list(version)}")
    return render_envelope(version, body)


# generation -> (decode, encode); only the current generation is writable
CODECS: Dict[int, Tuple[Callable[[str], DecodedDiagram], Optional[Callable[..., str]]]] = {
    1: (decode_v1, None),
    2: (decode_v2, encode),
}
