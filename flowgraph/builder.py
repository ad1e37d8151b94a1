from __future__ import annotations

import logging
from typing import Any, Dict

import networkx as nx

from .schema import GraphDef

logger = logging.getLogger(__name__)


def build_nx_graph(graph_def: GraphDef) -> nx.DiGraph:
    """Directed view of the flow; only edges between known nodes are kept."""
    g: nx.DiGraph = nx.DiGraph()

    # add nodes
    for node in graph_def.nodes:
        attrs: Dict[str, Any] = {
            "type": node.type.value,
            "label": node.display_name,
            "properties": dict(node.properties),
        }
        g.add_node(node.id, **attrs)

    # add edges; a dangling target has no adjacency of its own, so it cannot close a cycle
    for edge in graph_def.edges:
        if edge.source not in g or edge.target not in g:
            logger.debug(f"Skipping dangling edge {edge.source!r} -> {edge.target!r}")
            continue
        g.add_edge(edge.source, edge.target, label=edge.branch_label() or "")

    return g
