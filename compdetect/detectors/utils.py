"""
Stateless utility functions for component detection.

Small shape helpers shared by the detectors.
"""
from typing import Optional

from ..syntax import FunctionKind, Node, function_kind


def is_first_letter_capitalized(word: Optional[str]) -> bool:
    """
    Check if the first letter of a string is capitalized.

    Characters without case (`_`, `$`) count as capitalized.
    """
    if not word:
        return False
    first = word[0]
    return first.upper() == first


def identifier_name(node: Optional[Node]) -> Optional[str]:
    """Name of a plain identifier-like node, None for anything else."""
    if node is None:
        return None
    if node.kind in ("identifier", "property_identifier", "shorthand_property_identifier"):
        return node.text
    return None


def enclosing_call(node: Node) -> Optional[Node]:
    """
    The call a node is passed to as an argument.

        memo(() => ...)   -> the memo(...) call
        (() => ...)()     -> None (callee, not argument)
    """
    parent = node.parent
    if parent is None or parent.kind != "arguments":
        return None
    call = parent.parent
    if call is None or call.kind != "call_expression":
        return None
    return call


def enclosing_property(node: Node) -> Optional[Node]:
    """
    The object property that holds a function-like node.

    Object methods are their own property; `key: value` pairs hold
    their value.
    """
    if function_kind(node) is FunctionKind.METHOD:
        if node.parent is not None and node.parent.kind == "object":
            return node
        return None
    parent = node.parent
    if parent is not None and parent.kind == "pair" and parent.field("value") is node:
        return parent
    return None


def property_key(prop: Node) -> Optional[Node]:
    """Key node of a pair or of an object method."""
    if prop.kind == "pair":
        return prop.field("key")
    return prop.field("name")


def is_member(node: Optional[Node], object_name: str, property_name: str) -> bool:
    """Check if node is the member expression `object_name.property_name`."""
    if node is None or node.kind != "member_expression":
        return False
    obj = node.field("object")
    prop = node.field("property")
    return (
        obj is not None
        and prop is not None
        and obj.kind == "identifier"
        and obj.text == object_name
        and prop.text == property_name
    )
