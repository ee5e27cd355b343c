#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Vensim MDL importer - Pull sketch elements out of Vensim .mdl text.

Reads:
- View headers (``*View name``), which switch the reader into sketch mode
- Type 10 lines as nodes: 10,id,label,x,y,width,height,...
- Type 1 lines as edges: 1,id,from,to,...

Everything else (equations, ``$`` style lines, valves, clouds, comments) is
skipped. All views are merged into one diagram; ids are not deduplicated.
"""

from __future__ import annotations

import csv
import io
import logging
import math
from typing import Any, Dict, List

from ..errors import MalformedPayloadError, ShapeMismatchError
from ..model import DecodedDiagram

logger = logging.getLogger(__name__)

ADVISORY = (
    "Auto importing a Vensim model, some features are incompatible and it is not "
    "officially supported. All views from the file will be collapsed."
)

NODE_KIND = "10"
EDGE_KIND = "1"

NODE_DEFAULTS: Dict[str, Any] = {
    "init": 0.5,
    "color": "#3284d1",
}

EDGE_DEFAULTS: Dict[str, Any] = {
    "arc": 30,
    "strength": 1,
    "rotation": 0,
    "thickness": 3,
    "color": "#666",
    "delay": 0,
}


def _number(value: str, line: str) -> Any:
    try:
        number = float(value)
    except ValueError as e:
        raise MalformedPayloadError(f"Non-numeric field {value!r} in sketch line: {line}") from e
    if not math.isfinite(number):
        raise MalformedPayloadError(f"Non-finite field {value!r} in sketch line: {line}")
    return int(number) if number.is_integer() else number


def _split_record(line: str) -> List[str]:
    # csv keeps quoted names with commas in one field
    return next(csv.reader(io.StringIO(line)), [])


def _is_view_header(line: str) -> bool:
    return line[:1] == "*" and line[1:2] != "*"


class SketchReader:
    """Sequential reader over .mdl lines with one state: inside a view or not."""

    def __init__(self, text: str):
        self.lines = [line.rstrip("\r") for line in text.split("\n")]
        self.in_view = False
        self.decoded = DecodedDiagram(warnings=[ADVISORY])

    def read(self) -> DecodedDiagram:
        for line in self.lines:
            if self.in_view and not line.startswith("$"):
                self._read_record(line)

            if _is_view_header(line):
                view = line.split("*")[1]
                self.decoded.warnings.append(f"Loading {view}")
                logger.debug(f"Entering view {view!r}")
                self.in_view = True

        logger.info(
            f"Imported Vensim sketch: {len(self.decoded.nodes)} nodes, "
            f"{len(self.decoded.edges)} edges"
        )
        return self.decoded

    def _read_record(self, line: str) -> None:
        parts = _split_record(line)
        if not parts:
            return
        kind = parts[0]

        if kind == NODE_KIND:
            if len(parts) < 7:
                raise ShapeMismatchError(f"Variable line has {len(parts)} fields: {line}")
            node = {
                "id": _number(parts[1], line),
                "x": _number(parts[3], line),
                "y": _number(parts[4], line),
                "label": parts[2],
                "w": _number(parts[5], line),
                "h": _number(parts[6], line),
            }
            node.update(NODE_DEFAULTS)
            self.decoded.nodes.append(node)
        elif kind == EDGE_KIND:
            if len(parts) < 4:
                raise ShapeMismatchError(f"Connection line has {len(parts)} fields: {line}")
            edge = {
                "from": _number(parts[2], line),
                "to": _number(parts[3], line),
            }
            edge.update(EDGE_DEFAULTS)
            self.decoded.edges.append(edge)
        else:
            logger.debug(f"Skipping sketch line of kind {kind!r}")


def decode_vensim(raw: str) -> DecodedDiagram:
    """Decode Vensim .mdl text into canonical configs."""
    return SketchReader(raw).read()
