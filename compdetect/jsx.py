"""
Return-shape analysis for JSX.

Answers "can evaluating this produce a renderable element?" by walking
returned expressions. Nested function definitions are never entered:
their return values belong to them, not to the enclosing function.
"""
from typing import Callable, List, Optional

from .syntax import ELEMENT_NODE_KINDS, FunctionKind, Node, function_kind, is_function

CreateElementCheck = Callable[[Node], bool]

# Callback receives the returned expression (None for a bare `return;`)
# and returns True to stop the traversal.
ReturnCallback = Callable[[Optional[Node]], bool]

_LOGICAL_OPERATORS = ("&&", "||", "??")


def is_jsx(node: Optional[Node]) -> bool:
    """Check if a node is a JSX element or fragment."""
    return node is not None and node.kind in ELEMENT_NODE_KINDS


def is_logical_expression(node: Node) -> bool:
    return node.kind == "binary_expression" and any(
        node.has_token(op) for op in _LOGICAL_OPERATORS
    )


def return_argument(node: Node) -> Optional[Node]:
    """Expression returned by a return statement, if any."""
    return node.children[0] if node.children else None


def traverse_returns(node: Node, on_return: ReturnCallback) -> None:
    """
    Call `on_return` for every value `node` can return.

    - return statement: its argument
    - concise arrow function: its body
    - other function-like nodes: every return statement of the body,
      skipping nested functions
    """
    if node.kind == "return_statement":
        on_return(return_argument(node))
        return

    kind = function_kind(node)
    if kind is None:
        return

    body = node.field("body")
    if body is None:
        return
    if kind is FunctionKind.ARROW and body.kind != "statement_block":
        on_return(body)
        return

    stack = list(reversed(body.children))
    while stack:
        current = stack.pop()
        if is_function(current) or current.kind in ("class_declaration", "class"):
            continue
        if current.kind == "return_statement":
            if on_return(return_argument(current)):
                return
            continue
        stack.extend(reversed(current.children))


def _contains_renderable(
    is_create_element: CreateElementCheck,
    root: Node,
    strict: bool,
    ignore_null: bool,
) -> bool:
    stack = [root]
    while stack:
        node = stack.pop()

        if is_function(node):
            continue

        if node.kind == "ternary_expression" and strict:
            if is_jsx(node.field("consequence")) and is_jsx(node.field("alternative")):
                return True
            continue

        if is_logical_expression(node) and strict:
            if is_jsx(node.field("left")) and is_jsx(node.field("right")):
                return True
            continue

        if is_jsx(node):
            return True

        if node.kind == "call_expression":
            if is_create_element(node):
                return True
            continue

        if node.kind == "null" and not ignore_null:
            return True

        stack.extend(reversed(node.children))
    return False


def is_returning_jsx(
    is_create_element: CreateElementCheck,
    node: Node,
    strict: bool = False,
    ignore_null: bool = False,
) -> bool:
    """
    Check if the node is returning JSX or null.

    Args:
        is_create_element: recognizer for element-creation calls
        node: a return statement or a function-like node
        strict: in a ternary or logical expression, both sides must be JSX
        ignore_null: a null return value does not count
    """
    found = False

    def on_return(argument: Optional[Node]) -> bool:
        nonlocal found
        if argument is not None and _contains_renderable(is_create_element, argument, strict, ignore_null):
            found = True
        return found

    traverse_returns(node, on_return)
    return found


def is_returning_only_null(node: Node) -> bool:
    """
    Check if every value the node returns is a literal null.

    A function with no return at all is not "only null".
    """
    returned: List[Optional[Node]] = []

    def on_return(argument: Optional[Node]) -> bool:
        returned.append(argument)
        return False

    traverse_returns(node, on_return)
    if not returned:
        return False
    return all(argument is not None and argument.kind == "null" for argument in returned)


def is_returning_element(is_create_element: CreateElementCheck, node: Node) -> bool:
    """
    Check if a return site directly returns an element.

    Only the returned expression itself is inspected (no descent):
    `return <div/>` and `() => createElement('div')` match,
    `return cond && <div/>` does not.
    """
    found = False

    def on_return(argument: Optional[Node]) -> bool:
        nonlocal found
        if argument is None:
            return False
        if is_jsx(argument):
            found = True
        elif argument.kind == "call_expression" and is_create_element(argument):
            found = True
        return found

    traverse_returns(node, on_return)
    return found
