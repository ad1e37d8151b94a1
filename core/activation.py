from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Sequence

from flowgraph.schema import EdgeDef, NodeDef, ValidationReport
from flowgraph.validator import validate_flow, validate_payload

logger = logging.getLogger(__name__)

ERROR_DELIMITER = ", "
ERROR_PREFIX = "Error: "


class FlowActivationError(Exception):
    """Raised when a flow that failed validation is asked to go live"""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__(join_errors(self.errors))


@dataclass
class ActivationResult:
    activated: bool
    errors: List[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        return join_errors(self.errors)

    def to_dict(self) -> Dict[str, Any]:
        return {"activated": self.activated, "errors": list(self.errors), "message": self.message}


def join_errors(errors: Sequence[str]) -> str:
    return ERROR_DELIMITER.join(errors)


def split_error_message(message: str) -> List[str]:
    """Split a combined activation message back into one notification per error."""
    if not message or not message.strip():
        return []
    parts = message.split(ERROR_DELIMITER + ERROR_PREFIX)
    notifications = [parts[0]]
    notifications += [ERROR_PREFIX + part for part in parts[1:]]
    return [n for n in notifications if n.strip()]


def _result_from_report(report: ValidationReport) -> ActivationResult:
    if report.is_valid:
        logger.info("Flow passed validation, activation allowed")
        return ActivationResult(activated=True)

    logger.warning(f"Flow activation blocked by {len(report.errors)} validation error(s)")
    return ActivationResult(activated=False, errors=report.errors)


def activate_flow(nodes: Sequence[NodeDef], edges: Sequence[EdgeDef]) -> ActivationResult:
    return _result_from_report(validate_flow(nodes, edges))


def activate_payload(raw_flow: Mapping[str, Any]) -> ActivationResult:
    return _result_from_report(validate_payload(raw_flow))


def ensure_activatable(nodes: Sequence[NodeDef], edges: Sequence[EdgeDef]) -> None:
    result = activate_flow(nodes, edges)
    if not result.activated:
        raise FlowActivationError(result.errors)
