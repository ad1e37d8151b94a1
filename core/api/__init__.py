from __future__ import annotations

from .models import (
    FlowNodeData, FlowNode, FlowEdge, FlowPayload, ValidationResponse, ActivationResponse,
)

__all__ = [
    'FlowNodeData', 'FlowNode', 'FlowEdge', 'FlowPayload', 'ValidationResponse', 'ActivationResponse',
]
