"""The canonical diagram model contract and an in-memory implementation.

Decoders only talk to a model through `DiagramModelProtocol`: `clear()`, the
four `add_*` calls taking a keyed config, and a writable `node_uid`. The
encoder additionally reads `nodes`, `edges`, `labels`, `loop_marks` and
`version`; records must expose the attribute names of the pydantic records
below (edges use `from_id`/`to_id` for the `"from"`/`"to"` config keys).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from .config import DEFAULT_FORMAT_VERSION, parse_version

DEFAULT_VERSION: Tuple[int, int, int] = parse_version(DEFAULT_FORMAT_VERSION)


class NodeRecord(BaseModel):
    """A variable in the diagram."""

    model_config = ConfigDict(allow_inf_nan=False)

    id: int = Field(..., description="Artifact-local identity")
    x: float = Field(..., description="Center X")
    y: float = Field(..., description="Center Y")
    init: float = Field(..., description="Initial value")
    label: str = Field(..., description="Display label")
    color: str = Field(..., description="CSS color")
    w: float = Field(..., description="Width")
    h: float = Field(..., description="Height")


class EdgeRecord(BaseModel):
    """A causal link between two nodes."""

    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)

    from_id: int = Field(..., alias="from", description="Source node id")
    to_id: int = Field(..., alias="to", description="Target node id")
    arc: float = Field(..., description="Curvature")
    strength: float = Field(..., description="Signed strength; negative means opposite direction")
    rotation: float = Field(default=0, description="Self-loop rotation")
    thickness: float = Field(..., description="Stroke width")
    color: str = Field(..., description="CSS color")
    delay: float = Field(..., description="Delay marker")


class LabelRecord(BaseModel):
    """Free text placed on the canvas."""

    model_config = ConfigDict(allow_inf_nan=False)

    x: float
    y: float
    text: str
    color: str


class LoopMarkRecord(BaseModel):
    """An R/B annotation marking a feedback loop."""

    model_config = ConfigDict(allow_inf_nan=False)

    x: float
    y: float
    clockwise: int = Field(..., description="1 = clockwise")
    reinforcement: int = Field(..., description="1 = reinforcing, otherwise balancing")
    color: str


@runtime_checkable
class DiagramModelProtocol(Protocol):
    node_uid: int

    def clear(self) -> None: ...

    def add_node(self, config: Mapping[str, Any]) -> Any: ...

    def add_edge(self, config: Mapping[str, Any]) -> Any: ...

    def add_label(self, config: Mapping[str, Any]) -> Any: ...

    def add_loop_mark(self, config: Mapping[str, Any]) -> Any: ...


class DiagramModel:
    """Plain in-memory diagram used by the CLI, the server and as the staging area for loads."""

    def __init__(self, version: Sequence[int] = DEFAULT_VERSION):
        self.nodes: List[NodeRecord] = []
        self.edges: List[EdgeRecord] = []
        self.labels: List[LabelRecord] = []
        self.loop_marks: List[LoopMarkRecord] = []
        self.node_uid: int = 0
        self.version: Tuple[int, int, int] = tuple(version)  # type: ignore[assignment]

    def clear(self) -> None:
        self.nodes = []
        self.edges = []
        self.labels = []
        self.loop_marks = []
        self.node_uid = 0

    def add_node(self, config: Mapping[str, Any]) -> NodeRecord:
        node = NodeRecord.model_validate(dict(config))
        self.nodes.append(node)
        return node

    def add_edge(self, config: Mapping[str, Any]) -> EdgeRecord:
        edge = EdgeRecord.model_validate(dict(config))
        self.edges.append(edge)
        return edge

    def add_label(self, config: Mapping[str, Any]) -> LabelRecord:
        label = LabelRecord.model_validate(dict(config))
        self.labels.append(label)
        return label

    def add_loop_mark(self, config: Mapping[str, Any]) -> LoopMarkRecord:
        loop_mark = LoopMarkRecord.model_validate(dict(config))
        self.loop_marks.append(loop_mark)
        return loop_mark

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [n.model_dump() for n in self.nodes],
            "edges": [e.model_dump(by_alias=True) for e in self.edges],
            "labels": [lbl.model_dump() for lbl in self.labels],
            "loop_marks": [m.model_dump() for m in self.loop_marks],
            "node_uid": self.node_uid,
            "version": list(self.version),
        }


@dataclass
class DecodedDiagram:
    """Everything a decoder read from one artifact, in artifact order, before any model is touched."""

    nodes: List[Dict[str, Any]] = field(default_factory=list)
    edges: List[Dict[str, Any]] = field(default_factory=list)
    labels: List[Dict[str, Any]] = field(default_factory=list)
    loop_marks: List[Dict[str, Any]] = field(default_factory=list)
    node_uid: int = 0
    version: Optional[Tuple[int, int, int]] = None
    warnings: List[str] = field(default_factory=list)

    def replay(self, model: DiagramModelProtocol) -> None:
        """Clear `model` and issue one add call per decoded entity."""
        model.clear()
        for node in self.nodes:
            model.add_node(node)
        for edge in self.edges:
            model.add_edge(edge)
        for label in self.labels:
            model.add_label(label)
        for loop_mark in self.loop_marks:
            model.add_loop_mark(loop_mark)
        model.node_uid = self.node_uid
