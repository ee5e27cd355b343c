"""Positional tuple schemas for every array-based artifact.

A tuple's arity and field order are frozen once a generation ships. Adding a
field means adding a new generation with its own schemas and registering it in
`GENERATIONS`; existing schemas are never widened in place.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from ..errors import ShapeMismatchError


@dataclass(frozen=True)
class TupleSchema:
    """Field names of one positional tuple, in wire order."""

    name: str
    fields: Tuple[str, ...]

    def unpack(self, row: Any) -> Dict[str, Any]:
        """Map a wire tuple onto field names. Trailing extra fields are ignored."""
        if not isinstance(row, (list, tuple)):
            raise ShapeMismatchError(f"{self.name}: expected an array, got {type(row).__name__}")
        if len(row) < len(self.fields):
            raise ShapeMismatchError(
                f"{self.name}: expected {len(self.fields)} fields, got {len(row)}: {row!r}"
            )
        return {field: row[i] for i, field in enumerate(self.fields)}

    def pack(self, values: Mapping[str, Any]) -> List[Any]:
        return [values[field] for field in self.fields]


# Native generation 1
NODE_V1 = TupleSchema("node.v1", ("id", "x", "y", "init", "label", "color", "radius"))
EDGE_V1 = TupleSchema(
    "edge.v1", ("from", "to", "arc", "strength", "rotation", "thickness", "color", "delay")
)
LABEL_V1 = TupleSchema("label.v1", ("x", "y", "text", "color"))
LOOP_MARK_V1 = TupleSchema("loop_mark.v1", ("x", "y", "clockwise", "reinforcement", "color"))

# Native generation 2 only changes the node tuple
NODE_V2 = TupleSchema("node.v2", ("id", "x", "y", "init", "label", "color", "w", "h"))
VERSION_V2 = TupleSchema("version.v2", ("major", "minor", "patch"))

# Loopy
LOOPY_NODE = TupleSchema("loopy.node", ("id", "x", "y", "init", "label", "hue"))
LOOPY_EDGE = TupleSchema("loopy.edge", ("from", "to", "arc", "strength"))
LOOPY_LABEL = TupleSchema("loopy.label", ("x", "y", "text"))

# V1 stored a radius; it becomes a uniform width/height on read
V1_RADIUS_SCALE = 0.6


def _node_size_v1(fields: Dict[str, Any]) -> Tuple[Any, Any]:
    size = fields["radius"] * V1_RADIUS_SCALE
    return size, size


def _node_size_v2(fields: Dict[str, Any]) -> Tuple[Any, Any]:
    return fields["w"], fields["h"]


@dataclass(frozen=True)
class Generation:
    """One native format generation: its tuple schemas and node size mapping."""

    number: int
    node: TupleSchema
    edge: TupleSchema
    label: TupleSchema
    loop_mark: TupleSchema
    node_size: Callable[[Dict[str, Any]], Tuple[Any, Any]]
    version: Optional[TupleSchema] = None

    @property
    def has_envelope(self) -> bool:
        return self.version is not None


GENERATIONS: Dict[int, Generation] = {
    1: Generation(1, NODE_V1, EDGE_V1, LABEL_V1, LOOP_MARK_V1, _node_size_v1),
    2: Generation(2, NODE_V2, EDGE_V1, LABEL_V1, LOOP_MARK_V1, _node_size_v2, version=VERSION_V2),
}

# Writers only ever produce the newest generation
CURRENT_GENERATION = 2


def unpack_all(schema: TupleSchema, rows: Sequence[Any]) -> List[Dict[str, Any]]:
    return [schema.unpack(row) for row in rows]
