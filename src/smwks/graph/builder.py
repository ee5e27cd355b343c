from __future__ import annotations

from typing import Any

import networkx as nx


def build_signed_digraph(model: Any) -> nx.DiGraph:
    """Build a digraph keyed by node id; a negative strength makes the link negative.

    Parallel links collapse into one edge that keeps the last link's sign. Each
    collapse is recorded in ``G.graph["notes"]``.
    """
    G = nx.DiGraph()
    G.graph["notes"] = []
    for node in model.nodes:
        G.add_node(node.id, label=node.label)
    for edge in model.edges:
        relationship = "negative" if edge.strength < 0 else "positive"
        if G.has_edge(edge.from_id, edge.to_id):
            previous = G[edge.from_id][edge.to_id]["relationship"]
            if previous != relationship:
                G.graph["notes"].append(
                    f"Parallel links {edge.from_id} → {edge.to_id} disagree in sign; "
                    f"using the last one ({relationship})."
                )
            else:
                G.graph["notes"].append(
                    f"Merged duplicate {relationship} link {edge.from_id} → {edge.to_id}."
                )
        G.add_edge(edge.from_id, edge.to_id, relationship=relationship)
    return G
