"""
Flow validation.

Runs every rule over an immutable (nodes, edges) snapshot and accumulates the
violations instead of stopping at the first one. Error order follows the
phases: edge checks, per-node checks in node order, graph-level cardinality,
and the cycle check last.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Sequence

from .builder import build_nx_graph
from .cycles import has_cycle
from .preprocess import normalize_raw_to_graphdef
from .rules import check_connections, check_required_fields, check_type_rules
from .schema import DegreeCount, EdgeDef, GraphDef, NodeDef, NodeType, ValidationReport

logger = logging.getLogger(__name__)

MULTIPLE_START_ERROR = "Error: Multiple start nodes detected. Only one is allowed."
MULTIPLE_END_ERROR = "Error: Multiple end nodes detected. Only one is allowed."
CYCLE_ERROR = "Error: The flow contains a circular loop (cycle). Please remove cycles."


def validate_flow(nodes: Sequence[NodeDef], edges: Sequence[EdgeDef]) -> ValidationReport:
    return validate_graph(GraphDef(nodes=tuple(nodes), edges=tuple(edges)))


def validate_payload(raw: Mapping[str, Any]) -> ValidationReport:
    """Normalize an authoring-surface export and validate it.

    Raises FlowPayloadError when the payload itself is malformed.
    """
    return validate_graph(normalize_raw_to_graphdef(raw))


def validate_graph(graph_def: GraphDef) -> ValidationReport:
    if not graph_def.nodes:
        return ValidationReport(is_valid=True, errors=[])

    degrees = build_degree_index(graph_def)

    errors: List[str] = []
    errors += _check_edges(graph_def)
    errors += _check_nodes(graph_def, degrees)
    errors += _check_cardinality(graph_def)
    errors += _check_cycles(graph_def)

    logger.debug(
        f"Validated flow: {len(graph_def.nodes)} nodes, {len(graph_def.edges)} edges, "
        f"{len(errors)} errors"
    )
    return ValidationReport(is_valid=not errors, errors=errors)


def build_degree_index(graph_def: GraphDef) -> Dict[str, DegreeCount]:
    degrees: Dict[str, DegreeCount] = {node.id: DegreeCount() for node in graph_def.nodes}
    for edge in graph_def.edges:
        if edge.source in degrees:
            degrees[edge.source].outgoing += 1
        else:
            logger.warning(f"Edge source {edge.source!r} does not match any node")
        if edge.target in degrees:
            degrees[edge.target].incoming += 1
        else:
            logger.warning(f"Edge target {edge.target!r} does not match any node")
    return degrees


def _check_edges(graph_def: GraphDef) -> List[str]:
    names = {node.id: node.display_name for node in graph_def.nodes}
    return [
        f'Error: Node "{names.get(edge.source, edge.source)}" connects to itself.'
        for edge in graph_def.edges
        if edge.is_self_loop
    ]


def _check_nodes(graph_def: GraphDef, degrees: Dict[str, DegreeCount]) -> List[str]:
    outgoing: Dict[str, List[EdgeDef]] = {node.id: [] for node in graph_def.nodes}
    for edge in graph_def.edges:
        if edge.source in outgoing:
            outgoing[edge.source].append(edge)

    errors: List[str] = []
    for node in graph_def.nodes:
        degree = degrees[node.id]
        errors += check_connections(node, degree)
        errors += check_required_fields(node)
        errors += check_type_rules(node, degree, outgoing[node.id])
    return errors


def _check_cardinality(graph_def: GraphDef) -> List[str]:
    errors: List[str] = []
    if sum(1 for n in graph_def.nodes if n.type is NodeType.START) > 1:
        errors.append(MULTIPLE_START_ERROR)
    if sum(1 for n in graph_def.nodes if n.type is NodeType.END) > 1:
        errors.append(MULTIPLE_END_ERROR)
    return errors


def _check_cycles(graph_def: GraphDef) -> List[str]:
    if has_cycle(build_nx_graph(graph_def)):
        return [CYCLE_ERROR]
    return []
