from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Sequence

from pydantic import AnyUrl, TypeAdapter, ValidationError

from .schema import REQUIRED_FIELDS, DegreeCount, EdgeDef, NodeDef, NodeType

logger = logging.getLogger(__name__)

_URL_ADAPTER: TypeAdapter[AnyUrl] = TypeAdapter(AnyUrl)


def is_missing_value(value: Any) -> bool:
    """True for None, blank strings, empty lists and lists of blank items."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return not value or all(_is_blank_item(item) for item in value)
    return False


def _is_blank_item(item: Any) -> bool:
    if isinstance(item, str):
        return not item.strip()
    return not item


def is_absolute_url(value: str) -> bool:
    try:
        url = _URL_ADAPTER.validate_python(value.strip())
    except ValidationError as e:
        logger.debug(f"URL rejected {value!r}: {e.errors()[0]['msg']}")
        return False
    return bool(url.scheme and url.host)


def declared_buttons(node: NodeDef) -> List[str]:
    raw = node.properties.get("buttons") or []
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, (list, tuple)):
        return []
    # blank labels are already reported by the required-field check
    return [b for b in raw if isinstance(b, str) and b.strip()]


def check_required_fields(node: NodeDef) -> List[str]:
    errors: List[str] = []
    for field_name in REQUIRED_FIELDS.get(node.type, ()):
        value = node.properties.get(field_name)
        if is_missing_value(value):
            errors.append(
                f'Error: Node "{node.display_name}" is missing required content: {field_name}'
            )
        elif node.type is NodeType.API_CALL and field_name == "url" and isinstance(value, str):
            if not is_absolute_url(value):
                errors.append(f'Error: Node "{node.display_name}" has an invalid API URL.')
    return errors


def check_connections(node: NodeDef, degree: DegreeCount) -> List[str]:
    errors: List[str] = []
    name = node.display_name
    if degree.isolated:
        errors.append(f'Error: Node "{name}" is isolated and not connected to anything.')
    if degree.incoming == 0 and node.type is not NodeType.START:
        errors.append(f'Error: Node "{name}" has no incoming connection.')
    if degree.outgoing == 0 and node.type is not NodeType.END:
        errors.append(f'Error: Node "{name}" has no outgoing connection.')
    return errors


# ---------------------------------------------------------------------------
# Type-specific rules
# ---------------------------------------------------------------------------

TypeRule = Callable[[NodeDef, DegreeCount, Sequence[EdgeDef]], List[str]]


def _branch_labels(outgoing: Sequence[EdgeDef]) -> set:
    return {e.branch_label() for e in outgoing}


def _condition_rule(node: NodeDef, degree: DegreeCount, outgoing: Sequence[EdgeDef]) -> List[str]:
    errors: List[str] = []
    labels = _branch_labels(outgoing)
    for branch in ("true", "false"):
        if branch not in labels:
            errors.append(
                f'Error: Condition node "{node.display_name}" is missing an outgoing \'{branch}\' path.'
            )
    return errors


def _buttons_rule(node: NodeDef, degree: DegreeCount, outgoing: Sequence[EdgeDef]) -> List[str]:
    buttons = declared_buttons(node)
    if not buttons:
        if degree.outgoing > 0:
            return [
                f'Error: Buttons node "{node.display_name}" has outgoing connections but no buttons defined.'
            ]
        return []

    labels = _branch_labels(outgoing)
    return [
        f'Error: Buttons node "{node.display_name}" is missing an outgoing connection for the "{button}" button.'
        for button in buttons
        if button.lower() not in labels
    ]


def _end_rule(node: NodeDef, degree: DegreeCount, outgoing: Sequence[EdgeDef]) -> List[str]:
    if degree.outgoing > 0:
        return [f'Error: End node "{node.display_name}" cannot have outgoing connections.']
    return []


def _start_rule(node: NodeDef, degree: DegreeCount, outgoing: Sequence[EdgeDef]) -> List[str]:
    if degree.incoming > 0:
        return [f'Error: Start Node "{node.display_name}" cannot have incoming connections.']
    return []


def _no_rule(node: NodeDef, degree: DegreeCount, outgoing: Sequence[EdgeDef]) -> List[str]:
    return []


TYPE_RULES: Dict[NodeType, TypeRule] = {
    NodeType.START: _start_rule,
    NodeType.MESSAGE: _no_rule,
    NodeType.BUTTONS: _buttons_rule,
    NodeType.KEYWORD_MATCH: _no_rule,
    NodeType.API_CALL: _no_rule,
    NodeType.ASK_QUESTION: _no_rule,
    NodeType.CONDITION: _condition_rule,
    NodeType.END: _end_rule,
}

_uncovered = set(NodeType) - set(TYPE_RULES)
if _uncovered:
    raise RuntimeError(f"No type rule registered for: {sorted(t.value for t in _uncovered)}")


def check_type_rules(node: NodeDef, degree: DegreeCount, outgoing: Sequence[EdgeDef]) -> List[str]:
    return TYPE_RULES[node.type](node, degree, outgoing)
