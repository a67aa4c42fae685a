"""
Class-based component detectors.

ES6: `class Foo extends React.Component` (or PureComponent)
ES5: the object literal passed to `createReactClass({...})`
"""
import re
from typing import Optional

from . import DetectorContext
from ..syntax import CLASS_NODE_KINDS, Node


def superclass(node: Node) -> Optional[Node]:
    """The `extends` expression of a class, if any."""
    for child in node.children:
        if child.kind == "class_heritage":
            return child.children[0] if child.children else None
    return None


def is_es6_component(node: Optional[Node], context: DetectorContext) -> bool:
    """
    Check if a class extends the framework component base class.

    Matches Component, PureComponent, <pragma>.Component and
    <pragma>.PureComponent. Class bodies are not inspected.
    """
    if node is None or node.kind not in CLASS_NODE_KINDS:
        return False
    base = superclass(node)
    if base is None:
        return False
    pattern = rf"^({re.escape(context.pragma)}\.)?(Pure)?Component$"
    return re.match(pattern, base.text) is not None


def is_es5_component(node: Optional[Node], context: DetectorContext) -> bool:
    """
    Check if an object literal is the argument of a legacy class factory.

    Matches createClass / createReactClass, optionally qualified by
    the pragma.
    """
    if node is None or node.kind != "object":
        return False
    arguments = node.parent
    if arguments is None or arguments.kind != "arguments":
        return False
    call = arguments.parent
    if call is None or call.kind != "call_expression":
        return False
    callee = call.field("function")
    if callee is None:
        return False
    pattern = (
        rf"^({re.escape(context.pragma)}\.)?"
        rf"(createClass|{re.escape(context.create_class)})$"
    )
    return re.match(pattern, callee.text) is not None
