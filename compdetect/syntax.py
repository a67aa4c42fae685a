"""
Syntax tree arena.

Parses JavaScript/JSX with tree-sitter and flattens the result into an
arena of Node records:
- every named node gets a stable pre-order index
- parent links, named children and grammar fields are kept
- anonymous tokens (operators, keywords) are kept as strings
- parenthesized expressions are collapsed into their inner expression
- comments are pulled out of the tree and kept on the side

The arena is built once per source and never mutated afterwards.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple, Union

import tree_sitter_javascript as tsjavascript
from tree_sitter import Language, Parser

logger = logging.getLogger(__name__)

JS_LANGUAGE = Language(tsjavascript.language())

Span = Tuple[int, int]


class FunctionKind(Enum):
    DECLARATION = "declaration"
    EXPRESSION  = "expression"
    ARROW       = "arrow"
    METHOD      = "method"


_FUNCTION_KINDS: Dict[str, FunctionKind] = {
    "function_declaration":           FunctionKind.DECLARATION,
    "generator_function_declaration": FunctionKind.DECLARATION,
    "function_expression":            FunctionKind.EXPRESSION,
    "function":                       FunctionKind.EXPRESSION,  # grammar < 0.21
    "generator_function":             FunctionKind.EXPRESSION,
    "arrow_function":                 FunctionKind.ARROW,
    "method_definition":              FunctionKind.METHOD,
}

FUNCTION_NODE_KINDS = frozenset(_FUNCTION_KINDS)
CLASS_NODE_KINDS = frozenset({"class_declaration", "class"})
ELEMENT_NODE_KINDS = frozenset({"jsx_element", "jsx_self_closing_element", "jsx_fragment"})

_TRANSPARENT_KINDS = frozenset({"parenthesized_expression"})
_COMMENT_KINDS = frozenset({"comment", "html_comment"})


@dataclass(eq=False)
class Node:
    """
    One named syntax node.

    Identity is object identity; `span` is the structural key used by
    the component registry.
    """
    index: int
    kind: str
    start: int
    end: int
    parent: Optional["Node"] = field(default=None, repr=False)
    children: List["Node"] = field(default_factory=list, repr=False)
    fields: Dict[str, List["Node"]] = field(default_factory=dict, repr=False)
    tokens: Tuple[str, ...] = ()
    source: bytes = field(default=b"", repr=False)

    @property
    def span(self) -> Span:
        return (self.start, self.end)

    @property
    def text(self) -> str:
        return self.source[self.start:self.end].decode("utf-8", errors="replace")

    def field(self, name: str) -> Optional["Node"]:
        """First child stored under a grammar field, if any."""
        nodes = self.fields.get(name)
        return nodes[0] if nodes else None

    def has_token(self, token: str) -> bool:
        return token in self.tokens

    def ancestors(self) -> Iterator["Node"]:
        current = self.parent
        while current is not None:
            yield current
            current = current.parent


def function_kind(node: Optional[Node]) -> Optional[FunctionKind]:
    """Classify a node as one of the function-like kinds, or None."""
    if node is None:
        return None
    return _FUNCTION_KINDS.get(node.kind)


def is_function(node: Optional[Node]) -> bool:
    return function_kind(node) is not None


def function_params(node: Node) -> List[Node]:
    """Declared parameters of a function-like node."""
    single = node.field("parameter")
    if single is not None:
        return [single]
    params = node.field("parameters")
    if params is None:
        return []
    return list(params.children)


def is_concise_arrow(node: Node) -> bool:
    """Arrow function whose body is an expression rather than a block."""
    if function_kind(node) is not FunctionKind.ARROW:
        return False
    body = node.field("body")
    return body is not None and body.kind != "statement_block"


@dataclass
class SyntaxTree:
    source: bytes
    nodes: List[Node]
    comments: List[str]
    has_error: bool = False

    @property
    def root(self) -> Node:
        return self.nodes[0]

    def walk(self) -> Iterator[Node]:
        """All nodes in pre-order (the arena order)."""
        return iter(self.nodes)

    def find_all(self, kind: str) -> List[Node]:
        return [node for node in self.nodes if node.kind == kind]

    def find_first(self, kind: str) -> Optional[Node]:
        for node in self.nodes:
            if node.kind == kind:
                return node
        return None


def _child_fields(ts_node):
    cursor = ts_node.walk()
    if not cursor.goto_first_child():
        return
    while True:
        yield cursor.node, cursor.field_name
        if not cursor.goto_next_sibling():
            break


def _unwrap(ts_node):
    while ts_node.type in _TRANSPARENT_KINDS:
        inner = [
            child for child in ts_node.named_children
            if child.type not in _COMMENT_KINDS
        ]
        if not inner:
            break
        ts_node = inner[0]
    return ts_node


def _build_arena(ts_root, source: bytes) -> Tuple[List[Node], List[str]]:
    nodes: List[Node] = []
    comments: List[str] = []

    stack = [(ts_root, None, None)]
    while stack:
        ts_node, parent, field_name = stack.pop()

        node = Node(
            index=len(nodes),
            kind=ts_node.type,
            start=ts_node.start_byte,
            end=ts_node.end_byte,
            parent=parent,
            source=source,
        )
        nodes.append(node)
        if parent is not None:
            parent.children.append(node)
            if field_name:
                parent.fields.setdefault(field_name, []).append(node)

        pending = []
        tokens = []
        for child, child_field in _child_fields(ts_node):
            if not child.is_named:
                tokens.append(child.type)
                continue
            if child.type in _COMMENT_KINDS:
                comments.append(source[child.start_byte:child.end_byte].decode("utf-8", errors="replace"))
                continue
            pending.append((_unwrap(child), node, child_field))
        node.tokens = tuple(tokens)

        # Reversed so the first child is popped (and indexed) first
        stack.extend(reversed(pending))

    return nodes, comments


def parse(source: Union[str, bytes]) -> SyntaxTree:
    """Parse JavaScript/JSX source into a SyntaxTree."""
    if isinstance(source, str):
        data = source.encode("utf-8")
    elif isinstance(source, bytes):
        data = source
    else:
        raise TypeError(f"source must be str or bytes, not {type(source).__name__}")

    parser = Parser(JS_LANGUAGE)
    ts_tree = parser.parse(data)

    nodes, comments = _build_arena(ts_tree.root_node, data)
    has_error = ts_tree.root_node.has_error
    if has_error:
        logger.debug("Source has syntax errors; classification is best-effort")

    return SyntaxTree(source=data, nodes=nodes, comments=comments, has_error=has_error)
