from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional

from .schema import EdgeDef, GraphDef, NodeDef, NodeType


class FlowPayloadError(ValueError):
    """The flow export does not have the expected nodes/edges shape."""


def load_json(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def normalize_raw_to_graphdef(raw: Mapping[str, Any]) -> GraphDef:
    if not isinstance(raw, Mapping):
        raise FlowPayloadError("Flow payload must be an object with 'nodes' and 'edges'.")

    raw_nodes = raw.get("nodes")
    raw_edges = raw.get("edges")
    if raw_nodes is None:
        raw_nodes = []
    if raw_edges is None:
        raw_edges = []
    if not isinstance(raw_nodes, list) or not isinstance(raw_edges, list):
        raise FlowPayloadError("'nodes' and 'edges' must be lists.")

    nodes: List[NodeDef] = []
    seen: set = set()
    for index, node_cfg in enumerate(raw_nodes):
        node = normalize_node(node_cfg, index)
        if node.id in seen:
            raise FlowPayloadError(f"Duplicate node id: {node.id!r}")
        seen.add(node.id)
        nodes.append(node)

    edges = [normalize_edge(edge_cfg, index) for index, edge_cfg in enumerate(raw_edges)]
    return GraphDef(nodes=tuple(nodes), edges=tuple(edges))


def normalize_node(node_cfg: Any, index: int = 0) -> NodeDef:
    if not isinstance(node_cfg, Mapping):
        raise FlowPayloadError(f"Node #{index} is not an object.")

    node_id = node_cfg.get("id")
    if node_id is None or str(node_id) == "":
        raise FlowPayloadError(f"Node #{index} has no id.")

    data = node_cfg.get("data") or {}
    if not isinstance(data, Mapping):
        raise FlowPayloadError(f"Node {node_id!r} data must be an object.")
    node_type = _resolve_type(node_cfg.get("type"), data.get("type"))
    if node_type is None:
        raise FlowPayloadError(
            f"Node {node_id!r} has unknown type: {node_cfg.get('type')!r}"
        )

    properties = data.get("properties")
    if properties is None:
        properties = node_cfg.get("properties") or {}
    if not isinstance(properties, Mapping):
        raise FlowPayloadError(f"Node {node_id!r} properties must be an object.")

    label = data.get("label") or node_cfg.get("label") or ""
    return NodeDef(
        id=str(node_id),
        type=node_type,
        label=str(label),
        properties=dict(properties),
    )


def normalize_edge(edge_cfg: Any, index: int = 0) -> EdgeDef:
    if not isinstance(edge_cfg, Mapping):
        raise FlowPayloadError(f"Edge #{index} is not an object.")

    source = edge_cfg.get("source")
    target = edge_cfg.get("target")
    if source is None or target is None:
        raise FlowPayloadError(f"Edge #{index} needs both 'source' and 'target'.")

    label = edge_cfg.get("label")
    data = edge_cfg.get("data") or {}
    return EdgeDef(
        source=str(source),
        target=str(target),
        label=label if isinstance(label, str) else None,
        data=dict(data) if isinstance(data, Mapping) else {},
    )


def _resolve_type(*candidates: Any) -> Optional[NodeType]:
    # the canvas may carry a renderer key at top level and the flow type in data.type
    for candidate in candidates:
        if candidate is None:
            continue
        try:
            return NodeType.parse(candidate)
        except ValueError:
            continue
    return None
