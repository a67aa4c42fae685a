"""
Component wrapper detectors.

Wrappers are higher-order calls such as `React.memo(...)`,
`forwardRef(...)` or configured ones like `observer(...)`.
A wrapper call defines a new component, unless all it does is
forward a component that was already detected:

    memo(() => <div/>)          -> new component (the memo call)
    memo(() => <Existing/>)     -> just forwards Existing
"""
from typing import List, Optional

from . import DetectorContext
from ..jsx import return_argument
from ..registry import Components
from ..syntax import FunctionKind, Node, function_kind
from .utils import enclosing_call


def is_wrapper_call(node: Optional[Node], context: DetectorContext) -> bool:
    """
    Check if a node is a call to one of the recognized wrapper functions.

    `obj.prop(...)` must match a wrapper with that object.
    `prop(...)` matches wrappers without an object, or wrappers on the
    pragma when `prop` was destructured from the pragma import.
    """
    if node is None or node.kind != "call_expression":
        return False
    callee = node.field("function")
    if callee is None:
        return False

    if callee.kind == "member_expression":
        obj = callee.field("object")
        prop = callee.field("property")
        if obj is None or prop is None or obj.kind != "identifier":
            return False
        return any(
            wrapper.object is not None
            and wrapper.object == obj.text
            and wrapper.property == prop.text
            for wrapper in context.wrapper_functions
        )

    if callee.kind == "identifier":
        for wrapper in context.wrapper_functions:
            if wrapper.property != callee.text:
                continue
            if wrapper.object is None:
                return True
            # Functions coming from the pragma need special handling
            if wrapper.object == context.pragma and context.is_pragma_import(callee):
                return True
    return False


def get_component_name_from_jsx_element(node: Optional[Node]) -> Optional[str]:
    """Tag name of a JSX element when it is a plain identifier (`<Foo>`)."""
    if node is None:
        return None
    if node.kind == "jsx_element":
        opening = next((c for c in node.children if c.kind == "jsx_opening_element"), None)
        name = opening.field("name") if opening is not None else None
    elif node.kind == "jsx_self_closing_element":
        name = node.field("name")
    else:
        return None
    if name is None or name.kind != "identifier":
        return None
    return name.text


def get_name_of_wrapped_component(arguments: Optional[Node]) -> Optional[str]:
    """
    Getting the first JSX element's name.

    Looks at the first argument of a wrapper call: a function whose
    body is (or whose first return statement returns) a JSX element.
    """
    if arguments is None or not arguments.children:
        return None
    body = arguments.children[0].field("body")
    if body is None:
        return None
    if body.kind in ("jsx_element", "jsx_self_closing_element"):
        return get_component_name_from_jsx_element(body)
    if body.kind == "statement_block":
        for statement in body.children:
            if statement.kind == "return_statement":
                return get_component_name_from_jsx_element(return_argument(statement))
    return None


def get_detected_components(components: Components) -> List[str]:
    """
    Names of the confirmed components found so far.

    Only class declarations and arrow functions bound to a variable
    have a usable name.
    """
    names = []
    for record in components.all().values():
        node = record.node
        if node.kind == "class_declaration":
            name = node.field("name")
            if name is not None:
                names.append(name.text)
        elif function_kind(node) is FunctionKind.ARROW:
            parent = node.parent
            if parent is not None and parent.kind == "variable_declarator":
                target = parent.field("name")
                if target is not None and target.kind == "identifier":
                    names.append(target.text)
    return names


def node_wraps_component(node: Node, context: DetectorContext) -> bool:
    """Check if a wrapper call only forwards an already detected component."""
    child_component = get_name_of_wrapped_component(node.field("arguments"))
    if not child_component:
        return False
    return child_component in get_detected_components(context.components)


def is_pragma_component_wrapper(node: Optional[Node], context: DetectorContext) -> bool:
    """Wrapper call that defines a new component."""
    return is_wrapper_call(node, context) and not node_wraps_component(node, context)


def get_pragma_component_wrapper(node: Node, context: DetectorContext) -> Optional[Node]:
    """
    Outermost wrapper call around a function-like node.

        memo(forwardRef((props, ref) => ...))  -> the memo(...) call

    Returns None when the node is not passed to a wrapper call.
    """
    outermost = None
    current = enclosing_call(node)
    while current is not None and is_pragma_component_wrapper(current, context):
        outermost = current
        current = enclosing_call(current)
    return outermost
