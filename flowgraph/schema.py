from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class NodeType(str, Enum):
    START = "start"
    MESSAGE = "message"
    BUTTONS = "buttons"
    KEYWORD_MATCH = "keywordMatch"
    API_CALL = "apiCall"
    ASK_QUESTION = "askaQuestion"
    CONDITION = "condition"
    END = "end"

    @classmethod
    def parse(cls, value: Any) -> "NodeType":
        """Resolve a wire value, enum name or palette component name."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"Unknown node type: {value!r}")

        key = value.strip()
        if key in _PALETTE_COMPONENTS:
            return _PALETTE_COMPONENTS[key]

        folded = key.replace("_", "").replace("-", "").lower()
        for member in cls:
            if folded in (member.value.lower(), member.name.replace("_", "").lower()):
                return member
        raise ValueError(f"Unknown node type: {value!r}")


# Component names used by the node palette of the authoring surface
_PALETTE_COMPONENTS: Dict[str, NodeType] = {
    "TriggerUserMessage": NodeType.START,
    "ActionSendText": NodeType.MESSAGE,
    "ActionAskaQuestion": NodeType.ASK_QUESTION,
    "ActionButtons": NodeType.BUTTONS,
    "ActionApiCall": NodeType.API_CALL,
    "ConditionKeyword": NodeType.KEYWORD_MATCH,
    "ControlEndFlow": NodeType.END,
}


# Condition is intentionally absent: its branches live on the edge labels.
REQUIRED_FIELDS: Dict[NodeType, Tuple[str, ...]] = {
    NodeType.START: (),
    NodeType.MESSAGE: ("message",),
    NodeType.BUTTONS: ("message", "buttons"),
    NodeType.KEYWORD_MATCH: ("keywords",),
    NodeType.API_CALL: ("requestName", "url"),
    NodeType.ASK_QUESTION: ("question", "propertyName"),
    NodeType.END: (),
}


@dataclass(frozen=True)
class NodeDef:
    id: str
    type: NodeType
    label: str = ""
    properties: Dict[str, Any] = field(default_factory=dict)

    @property
    def display_name(self) -> str:
        return self.label or self.id


@dataclass(frozen=True)
class EdgeDef:
    source: str
    target: str
    label: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)

    def branch_label(self) -> Optional[str]:
        """Edge label (falling back to data.label), lower-cased."""
        for candidate in (self.label, self.data.get("label")):
            if isinstance(candidate, str) and candidate.strip():
                return candidate.lower()
        return None

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target


@dataclass(frozen=True)
class GraphDef:
    nodes: Tuple[NodeDef, ...]
    edges: Tuple[EdgeDef, ...]


@dataclass
class DegreeCount:
    incoming: int = 0
    outgoing: int = 0

    @property
    def isolated(self) -> bool:
        return self.incoming == 0 and self.outgoing == 0


@dataclass
class CycleDetectionResult:
    success: bool
    order: List[str]
    cyclic_nodes: List[str]
    entry_nodes: List[str] = field(default_factory=list)
    terminal_nodes: List[str] = field(default_factory=list)


@dataclass
class ValidationReport:
    is_valid: bool
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"isValid": self.is_valid, "errors": list(self.errors)}
