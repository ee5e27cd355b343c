from __future__ import annotations

from typing import Any, Dict, List, Sequence, Set, Tuple

import networkx as nx


def _canonical_cycle(nodes: Sequence[Any]) -> Tuple[Any, ...]:
    """Rotate a cycle so comparisons are consistent across enumerations."""
    if not nodes:
        return tuple()
    min_index = min(range(len(nodes)), key=lambda idx: str(nodes[idx]))
    return tuple(nodes[(min_index + i) % len(nodes)] for i in range(len(nodes)))


def _describe_cycle(graph: nx.DiGraph, nodes: Sequence[Any]) -> str:
    if not nodes:
        return ""
    names = [str(graph.nodes[n].get("label") or n) for n in nodes]
    return " → ".join(names + [names[0]])


def find_feedback_loops(
    graph: nx.DiGraph,
    *,
    max_loops: int = 25,
    max_length: int = 8,
) -> Dict[str, List]:
    """Detect balancing and reinforcing feedback loops from a signed digraph."""
    loops: Dict[str, List] = {
        "balancing": [],
        "reinforcing": [],
        "notes": list(graph.graph.get("notes", [])),
    }

    if graph.number_of_edges() == 0:
        loops["notes"].append("Diagram contains no edges; loop detection skipped.")
        return loops

    seen: Set[Tuple[Any, ...]] = set()
    loop_counter = 0

    for cycle in nx.simple_cycles(graph):
        if len(cycle) > max_length:
            loops["notes"].append(
                f"Skipped loop {_describe_cycle(graph, cycle)} (>{max_length} nodes)."
            )
            continue

        canonical = _canonical_cycle(cycle)
        if canonical in seen:
            continue
        seen.add(canonical)

        negative_edges = 0
        for idx, src in enumerate(canonical):
            dst = canonical[(idx + 1) % len(canonical)]
            if graph[src][dst].get("relationship") == "negative":
                negative_edges += 1

        bucket = "reinforcing" if negative_edges % 2 == 0 else "balancing"

        loop_counter += 1
        loops[bucket].append(
            {
                "id": f"L{loop_counter:02d}",
                "nodes": list(canonical),
                "length": len(canonical),
                "negative_edges": negative_edges,
                "polarity": bucket,
                "description": _describe_cycle(graph, canonical),
            }
        )

        if loop_counter >= max_loops:
            loops["notes"].append(f"Truncated loop detection after {max_loops} loops.")
            break

    return loops
