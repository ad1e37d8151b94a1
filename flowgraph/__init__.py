"""
Flowgraph package: chatbot conversation-flow model and validation
"""

from .flow_builder import FlowBuilder
from .schema import (
    NodeType, NodeDef, EdgeDef, GraphDef, DegreeCount,
    CycleDetectionResult, ValidationReport, REQUIRED_FIELDS,
)
from .validator import validate_flow, validate_graph, validate_payload
from .cycles import has_cycle, kahn_toposort
from .preprocess import FlowPayloadError, load_json, normalize_raw_to_graphdef
from .builder import build_nx_graph

__all__ = [
    'FlowBuilder',
    'NodeType', 'NodeDef', 'EdgeDef', 'GraphDef', 'DegreeCount',
    'CycleDetectionResult', 'ValidationReport', 'REQUIRED_FIELDS',
    'validate_flow', 'validate_graph', 'validate_payload',
    'has_cycle', 'kahn_toposort',
    'FlowPayloadError', 'load_json', 'normalize_raw_to_graphdef',
    'build_nx_graph',
]
