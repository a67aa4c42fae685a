"""
Stateless (function) component detector.

Decides whether a function-like node defines a component, from local
syntax only: its name, where it sits, what it returns, and whether a
wrapper call surrounds it. Rules are checked in order and the first
one that decides wins.
"""
from typing import Optional

from . import DetectorContext
from ..jsx import is_returning_element, is_returning_jsx, is_returning_only_null
from ..syntax import FunctionKind, Node, function_kind, function_params
from .utils import (
    enclosing_property,
    identifier_name,
    is_first_letter_capitalized,
    is_member,
    property_key,
)
from .wrapper import get_pragma_component_wrapper

_ALLOWED_PARENT_KINDS = frozenset({
    "variable_declarator",
    "assignment_expression",
    "augmented_assignment_expression",
    "pair",
    "return_statement",
    "export_statement",
    "arrow_function",
})


def _returns_element(node: Node, context: DetectorContext) -> bool:
    return is_returning_element(context.is_create_element, node)


def _returns_jsx_or_null(node: Node, context: DetectorContext) -> bool:
    return is_returning_jsx(context.is_create_element, node)


def _is_default_export_value(node: Node) -> bool:
    parent = node.parent
    return (
        parent is not None
        and parent.kind == "export_statement"
        and parent.has_token("default")
        and parent.field("value") is node
    )


def is_in_allowed_position_for_component(node: Node) -> bool:
    """
    Check if a function sits where component definitions are written.

    Variable initializer, assignment, property value, return value,
    default export, arrow body, or the last expression of a sequence
    that is itself in one of those positions.
    """
    if enclosing_property(node) is node:
        return True
    parent = node.parent
    if parent is None:
        return False
    if parent.kind in _ALLOWED_PARENT_KINDS:
        return True
    if parent.kind == "sequence_expression":
        return (
            is_in_allowed_position_for_component(parent)
            and parent.children[-1] is node
        )
    return False


def is_parent_component_not_stateless_component(node: Node) -> bool:
    """
    Object members with a lowercase key that take arguments are
    ordinary helpers, not components (a render function has no params).
    """
    prop = enclosing_property(node)
    if prop is None:
        return False
    key = property_key(prop)
    if key is None or key.kind != "property_identifier":
        return False
    # custom component functions must start with a capital letter
    if key.text[0] != key.text[0].lower():
        return False
    return bool(function_params(node))


def _is_property_assignment(node: Node) -> bool:
    parent = node.parent
    if parent is None or parent.kind != "assignment_expression":
        return False
    left = parent.field("left")
    return left is not None and left.kind == "member_expression" and parent.field("right") is node


def get_stateless_component(node: Optional[Node], context: DetectorContext) -> Optional[Node]:
    """
    Get the node that registers as a stateless component, or None.

    Usually the function itself; the outermost wrapper call for
    `memo(() => ...)`-style definitions.
    """
    if node is None:
        return None
    kind = function_kind(node)
    if kind is None:
        return None

    # `export default function () {}` is a nameless declaration
    if kind is FunctionKind.EXPRESSION and _is_default_export_value(node) and node.field("name") is None:
        kind = FunctionKind.DECLARATION

    if kind is FunctionKind.DECLARATION:
        name = node.field("name")
        if (name is None or is_first_letter_capitalized(name.text)) and _returns_jsx_or_null(node, context):
            return node
        return None

    # Class methods never define stateless components
    if kind is FunctionKind.METHOD and enclosing_property(node) is None:
        return None

    parent = node.parent
    prop = enclosing_property(node)
    is_method = kind is FunctionKind.METHOD
    is_property_assignment = _is_property_assignment(node)
    is_module_exports_assignment = (
        is_property_assignment
        and is_member(parent.field("left"), "module", "exports")
    )

    if _is_default_export_value(node):
        if _returns_element(node, context):
            return node
        return None

    if parent.kind == "variable_declarator" and parent.field("value") is node:
        target = parent.field("name")
        if (
            _returns_jsx_or_null(node, context)
            and is_first_letter_capitalized(identifier_name(target))
        ):
            return node
        return None

    # case: function any() { return (props) => { return not-jsx-and-not-null } }
    if (
        parent.kind == "return_statement"
        and not _returns_element(node, context)
        and not is_returning_only_null(node)
    ):
        return None

    # case: abc = { [someobject.somekey]: props => { ... return not-jsx } }
    if (
        prop is not None
        and property_key(prop) is not None
        and property_key(prop).kind == "computed_property_name"
        and not _returns_element(node, context)
        and not is_returning_only_null(node)
    ):
        return None

    # Case like `React.memo(() => <></>)` or `React.forwardRef(...)`
    wrapper = get_pragma_component_wrapper(node, context)
    if wrapper is not None:
        return wrapper

    if not (is_in_allowed_position_for_component(node) and _returns_jsx_or_null(node, context)):
        return None

    if is_parent_component_not_stateless_component(node):
        return None

    if is_method and not is_first_letter_capitalized(identifier_name(property_key(prop))):
        return node if _returns_element(node, context) else None

    name = node.field("name")
    if name is not None and not is_method:
        return node if is_first_letter_capitalized(name.text) else None

    if is_property_assignment and not is_module_exports_assignment:
        left = parent.field("left")
        if not is_first_letter_capitalized(identifier_name(left.field("property"))):
            return None

    return node
