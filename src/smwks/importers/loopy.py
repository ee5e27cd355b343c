"""Import Loopy (ncase.me/loopy) files.

Loopy stores ``[nodes, edges, labels, uid]``. Node color is an index into
Loopy's hue palette, node size is implicit and edges carry no styling, so the
conversion fills those in and always warns first.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from ..codec.envelope import loads_array, restore_body
from ..codec.schemas import LOOPY_EDGE, LOOPY_LABEL, LOOPY_NODE, unpack_all
from ..codec.text import decode_text
from ..errors import MalformedPayloadError
from ..model import DecodedDiagram
from ..validation.schema import LOOPY_BODY_SCHEMA, validate_shape

logger = logging.getLogger(__name__)

ADVISORY = "You are importing a Loopy file, so it will be converted to the .smwks format"

HUE_COLORS = (
    "#EA3E3E",  # red
    "#EA9D51",  # orange
    "#FEEE43",  # yellow
    "#BFEE3F",  # green
    "#7FD4FF",  # blue
    "#A97FFF",  # purple
)

NODE_SIZE = 40

EDGE_DEFAULTS: Dict[str, Any] = {
    "rotation": 0,
    "thickness": 3,
    "color": "#666",
    "delay": 0,
}

LABEL_COLOR = "#000"


def _hue_color(hue: Any) -> str:
    if isinstance(hue, bool) or not isinstance(hue, int) or not 0 <= hue < len(HUE_COLORS):
        raise MalformedPayloadError(f"Loopy hue index out of range: {hue!r}")
    return HUE_COLORS[hue]


def decode_loopy(raw: str) -> DecodedDiagram:
    """Decode a Loopy artifact into canonical configs."""
    body = loads_array(restore_body(raw), "Loopy body")
    validate_shape(body, LOOPY_BODY_SCHEMA)
    nodes, edges, labels, uid = body[:4]
    decoded = DecodedDiagram(node_uid=uid, warnings=[ADVISORY])

    for fields in unpack_all(LOOPY_NODE, nodes):
        decoded.nodes.append(
            {
                "id": fields["id"],
                "x": fields["x"],
                "y": fields["y"],
                "init": fields["init"],
                "label": decode_text(fields["label"]),
                "color": _hue_color(fields["hue"]),
                "w": NODE_SIZE,
                "h": NODE_SIZE,
            }
        )

    # Loopy's fifth edge field (rotation) is not carried over
    for fields in unpack_all(LOOPY_EDGE, edges):
        edge = {
            "from": fields["from"],
            "to": fields["to"],
            "arc": fields["arc"],
            "strength": fields["strength"],
        }
        edge.update(EDGE_DEFAULTS)
        decoded.edges.append(edge)

    for fields in unpack_all(LOOPY_LABEL, labels):
        decoded.labels.append(
            {
                "x": fields["x"],
                "y": fields["y"],
                "text": decode_text(fields["text"]),
                "color": LABEL_COLOR,
            }
        )

    logger.info(
        f"Imported Loopy file: {len(decoded.nodes)} nodes, {len(decoded.edges)} edges, "
        f"{len(decoded.labels)} labels"
    )
    return decoded
