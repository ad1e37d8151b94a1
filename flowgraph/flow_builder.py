from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Mapping, Optional

import networkx as nx

from .builder import build_nx_graph
from .cycles import kahn_toposort
from .preprocess import FlowPayloadError, load_json, normalize_raw_to_graphdef
from .schema import GraphDef, ValidationReport
from .validator import validate_graph

logger = logging.getLogger(__name__)


class FlowBuilder:
    def __init__(self) -> None:
        self.graph: nx.DiGraph = nx.DiGraph()
        self.graph_def: Optional[GraphDef] = None
        self.report: Optional[ValidationReport] = None

    def load_from_json(self, json_path: str) -> bool:
        try:
            raw_flow = load_json(json_path)
        except FileNotFoundError:
            logger.error(f"Flow file not found: {json_path}")
            return False
        except json.JSONDecodeError as e:
            logger.error(f"Flow file is not valid JSON: {e}")
            return False
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read flow file {json_path}: {e}")
            return False

        if not self.load_from_dict(raw_flow):
            return False
        logger.info(f"Loaded flow {json_path}: {len(self.graph_def.nodes)} nodes")
        return True

    def load_from_dict(self, raw_flow: Mapping[str, Any]) -> bool:
        try:
            graph_def = normalize_raw_to_graphdef(raw_flow)
        except FlowPayloadError as e:
            logger.error(f"Malformed flow payload: {e}")
            return False

        self.graph_def = graph_def
        self.graph = build_nx_graph(graph_def)
        self.report = None
        return True

    def validate(self) -> ValidationReport:
        if self.graph_def is None:
            raise RuntimeError("No flow loaded; call load_from_json() or load_from_dict() first")

        self.report = validate_graph(self.graph_def)
        if self.report.is_valid:
            logger.info("Flow is valid")
        else:
            for e in self.report.errors:
                logger.info(e)
        return self.report

    def detect_cycles(self) -> Dict[str, Any]:
        result = kahn_toposort(self.graph)
        if result.success:
            logger.info("No cycles: " + " -> ".join(result.order))
        else:
            logger.info(f"Nodes on or behind a cycle: {sorted(result.cyclic_nodes)}")
        return {
            "success": result.success,
            "order": result.order,
            "cyclic_nodes": result.cyclic_nodes,
        }

    def get_node_info(self, node_id: str) -> Dict[str, Any]:
        if node_id not in self.graph:
            logger.warning(f"Node not found: {node_id}")
            return {}
        return {"id": node_id, **self.graph.nodes[node_id]}

    def export_graph_info(self) -> Dict[str, Any]:
        nodes_payload = []
        for node in self.graph.nodes():
            nodes_payload.append({"id": node, **self.graph.nodes[node]})

        edges_payload = []
        for u, v, attrs in self.graph.edges(data=True):
            edges_payload.append({"source": u, "target": v, **attrs})

        cycle_result = kahn_toposort(self.graph)
        graph_stats = {
            "nodes": self.graph.number_of_nodes(),
            "edges": self.graph.number_of_edges(),
            "is_dag": cycle_result.success,
        }

        type_groups: Dict[str, List[str]] = {}
        for node_id, attrs in self.graph.nodes(data=True):
            type_groups.setdefault(attrs.get("type", "unknown"), []).append(node_id)

        return {
            "nodes": nodes_payload,
            "edges": edges_payload,
            "graph_stats": graph_stats,
            "order": cycle_result.order,
            "type_groups": type_groups,
        }

    def get_predecessors(self, node_id: str) -> List[str]:
        if node_id not in self.graph:
            return []
        return list(self.graph.predecessors(node_id))

    def get_successors(self, node_id: str) -> List[str]:
        if node_id not in self.graph:
            return []
        return list(self.graph.successors(node_id))
