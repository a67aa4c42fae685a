"""
Related component lookup.

Resolves a member chain such as `Library.Forms.Input` to the expression
that defines it, by finding the root variable in scope and walking the
object literals of its initializer:

    const Library = { Forms: { Input: () => <input/> } };
    Library.Forms.Input  ->  the arrow function

Any step that cannot be followed ends the lookup with None.
"""
from typing import List, Optional

from . import DetectorContext
from ..registry import ComponentRecord
from ..scope import DefinitionType
from ..syntax import FunctionKind, Node, function_kind

_RESOLVABLE_DEFINITIONS = (
    DefinitionType.CLASS_NAME,
    DefinitionType.FUNCTION_NAME,
    DefinitionType.VARIABLE,
)


def member_chain(node: Node) -> Optional[List[str]]:
    """
    Names along a member chain, root first.

        a.b.c -> ["a", "b", "c"]
        a     -> ["a"]

    None when the chain is not rooted at an identifier or uses
    computed access.
    """
    path = []
    current = node
    while current.kind == "member_expression":
        prop = current.field("property")
        obj = current.field("object")
        if prop is None or obj is None or prop.kind != "property_identifier":
            return None
        path.append(prop.text)
        current = obj
    if current.kind != "identifier":
        return None
    path.append(current.text)
    path.reverse()
    return path


def _object_member(obj: Node, name: str) -> Optional[Node]:
    for child in obj.children:
        if child.kind == "pair":
            key = child.field("key")
            if key is not None and key.kind in ("property_identifier", "identifier") and key.text == name:
                return child.field("value")
        elif function_kind(child) is FunctionKind.METHOD:
            key = child.field("name")
            if key is not None and key.text == name:
                return child
    return None


def resolve_member_chain(node: Node, context: DetectorContext) -> Optional[Node]:
    """Find the expression a member chain reads from, or None."""
    path = member_chain(node)
    if not path:
        return None

    variable = context.scopes.acquire(node).resolve(path[0])
    if variable is None:
        return None

    definition = next(
        (d for d in variable.defs if d.type in _RESOLVABLE_DEFINITIONS),
        None,
    )
    if definition is None:
        return None

    if definition.type is DefinitionType.VARIABLE:
        current = definition.initializer
    else:
        current = definition.node

    # Traverse the object properties to the component declaration
    for segment in path[1:]:
        if current is None or current.kind != "object":
            return None
        current = _object_member(current, segment)

    return current


def get_related_component(node: Node, context: DetectorContext) -> Optional[ComponentRecord]:
    """Registry record of the component a member chain refers to, if any."""
    target = resolve_member_chain(node, context)
    if target is None:
        return None
    return context.components.get(target)
