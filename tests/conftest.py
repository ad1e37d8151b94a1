"""Shared fixtures for flow validation tests"""

import copy
import json
from pathlib import Path

import pytest

from flowgraph.schema import EdgeDef, NodeDef, NodeType

SAMPLE_FLOW = Path(__file__).resolve().parent.parent / "config" / "sample_flow.json"


def node(node_id, node_type, label=None, **properties):
    return NodeDef(
        id=node_id,
        type=NodeType.parse(node_type),
        label=label if label is not None else node_id,
        properties=properties,
    )


def edge(source, target, label=None, **data):
    return EdgeDef(source=source, target=target, label=label, data=data)


@pytest.fixture
def make_node():
    return node


@pytest.fixture
def make_edge():
    return edge


@pytest.fixture
def linear_flow():
    """start -> message("hi") -> end"""
    nodes = [
        node("start", "start"),
        node("greet", "message", message="hi"),
        node("end", "end"),
    ]
    edges = [edge("start", "greet"), edge("greet", "end")]
    return nodes, edges


@pytest.fixture
def sample_payload():
    with open(SAMPLE_FLOW, "r", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def sample_flow_path():
    return str(SAMPLE_FLOW)


@pytest.fixture
def write_flow(tmp_path):
    def _write(payload, name="flow.json"):
        path = tmp_path / name
        path.write_text(json.dumps(copy.deepcopy(payload)), encoding="utf-8")
        return str(path)

    return _write
