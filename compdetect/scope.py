"""
Lexical scopes.

Built once per syntax tree, before traversal. Scopes form an explicit
tree with upward links; lookups walk that chain outward.

Hoisting rules kept:
- var         -> nearest function/module scope
- let/const   -> nearest scope of any kind
- function    -> scope enclosing the declaration
- class       -> scope enclosing the declaration
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional

from .syntax import CLASS_NODE_KINDS, FunctionKind, Node, SyntaxTree, function_kind, function_params


class ScopeType(Enum):
    MODULE   = "module"
    FUNCTION = "function"
    CLASS    = "class"
    BLOCK    = "block"


class DefinitionType(Enum):
    VARIABLE      = "Variable"
    FUNCTION_NAME = "FunctionName"
    CLASS_NAME    = "ClassName"
    PARAMETER     = "Parameter"
    IMPORT        = "ImportBinding"
    CATCH         = "CatchClause"


@dataclass(frozen=True)
class Definition:
    type: DefinitionType
    name: str
    node: Node       # declaring node (declarator, function, class, specifier...)
    identifier: Node  # the binding identifier itself

    @property
    def initializer(self) -> Optional[Node]:
        """Initializer expression for plain `name = value` declarators."""
        if self.type is not DefinitionType.VARIABLE:
            return None
        if self.node.field("name") is not self.identifier:
            return None
        return self.node.field("value")


@dataclass(eq=False)
class Variable:
    name: str
    scope: "Scope" = field(repr=False)
    defs: List[Definition] = field(default_factory=list)


@dataclass(eq=False)
class Scope:
    type: ScopeType
    block: Node = field(repr=False)
    upper: Optional["Scope"] = field(default=None, repr=False)
    variables: Dict[str, Variable] = field(default_factory=dict, repr=False)

    def declare(self, definition: Definition) -> Variable:
        variable = self.variables.get(definition.name)
        if variable is None:
            variable = Variable(name=definition.name, scope=self)
            self.variables[definition.name] = variable
        variable.defs.append(definition)
        return variable

    def resolve(self, name: str) -> Optional[Variable]:
        """Find a variable by name in this scope or any enclosing one."""
        for scope in self.chain():
            variable = scope.variables.get(name)
            if variable is not None:
                return variable
        return None

    def chain(self) -> Iterator["Scope"]:
        """This scope followed by every enclosing scope, innermost first."""
        scope: Optional[Scope] = self
        while scope is not None:
            yield scope
            scope = scope.upper


_BLOCK_SCOPE_KINDS = frozenset({
    "statement_block",
    "for_statement",
    "for_in_statement",
    "catch_clause",
    "switch_body",
})


def _scope_type(node: Node) -> Optional[ScopeType]:
    if node.kind == "program":
        return ScopeType.MODULE
    if function_kind(node) is not None:
        return ScopeType.FUNCTION
    if node.kind in CLASS_NODE_KINDS:
        return ScopeType.CLASS
    if node.kind in _BLOCK_SCOPE_KINDS:
        # A function body shares the function's scope
        if node.kind == "statement_block" and function_kind(node.parent) is not None:
            return None
        return ScopeType.BLOCK
    return None


def pattern_identifiers(pattern: Optional[Node]) -> List[Node]:
    """
    Binding identifiers introduced by a declaration target.

    Handles plain identifiers and destructuring:
        a, {a, b: c}, [a, ...rest], {a = 1}
    """
    if pattern is None:
        return []
    kind = pattern.kind
    if kind in ("identifier", "shorthand_property_identifier_pattern"):
        return [pattern]
    if kind == "pair_pattern":
        return pattern_identifiers(pattern.field("value"))
    if kind in ("assignment_pattern", "object_assignment_pattern"):
        return pattern_identifiers(pattern.field("left"))
    if kind in ("object_pattern", "array_pattern", "rest_pattern"):
        found = []
        for child in pattern.children:
            found.extend(pattern_identifiers(child))
        return found
    return []


class ScopeTree:
    """All scopes of one syntax tree, indexed by their block node."""

    def __init__(self, tree: SyntaxTree):
        self.tree = tree
        self._by_block: Dict[int, Scope] = {}
        self._build()

    @property
    def module(self) -> Scope:
        return self._by_block[self.tree.root.index]

    def scope_of_block(self, node: Node) -> Optional[Scope]:
        return self._by_block.get(node.index)

    def acquire(self, node: Node) -> Scope:
        """Innermost scope whose block is `node` or one of its ancestors."""
        current: Optional[Node] = node
        while current is not None:
            scope = self._by_block.get(current.index)
            if scope is not None:
                return scope
            current = current.parent
        return self.module

    def _nearest_function_scope(self, node: Node) -> Scope:
        for scope in self.acquire(node).chain():
            if scope.type in (ScopeType.FUNCTION, ScopeType.MODULE):
                return scope
        return self.module

    def _build(self) -> None:
        for node in self.tree.walk():
            scope_type = _scope_type(node)
            if scope_type is not None:
                upper = self.acquire(node.parent) if node.parent is not None else None
                self._by_block[node.index] = Scope(type=scope_type, block=node, upper=upper)
            self._declare(node)

    def _declare(self, node: Node) -> None:
        kind = function_kind(node)
        if kind is not None:
            self._declare_function(node, kind)
        elif node.kind in CLASS_NODE_KINDS:
            self._declare_class(node)
        elif node.kind == "variable_declarator":
            self._declare_variable(node)
        elif node.kind == "catch_clause":
            scope = self._by_block[node.index]
            for ident in pattern_identifiers(node.field("parameter")):
                scope.declare(Definition(DefinitionType.CATCH, ident.text, node, ident))
        elif node.kind == "import_statement":
            self._declare_imports(node)

    def _declare_function(self, node: Node, kind: FunctionKind) -> None:
        own_scope = self._by_block[node.index]
        name = node.field("name")
        if name is not None and name.kind == "identifier":
            definition = Definition(DefinitionType.FUNCTION_NAME, name.text, node, name)
            if kind is FunctionKind.DECLARATION:
                self.acquire(node.parent).declare(definition)
            elif kind is FunctionKind.EXPRESSION:
                own_scope.declare(definition)
        for param in function_params(node):
            for ident in pattern_identifiers(param):
                own_scope.declare(Definition(DefinitionType.PARAMETER, ident.text, node, ident))

    def _declare_class(self, node: Node) -> None:
        name = node.field("name")
        if name is None:
            return
        definition = Definition(DefinitionType.CLASS_NAME, name.text, node, name)
        if node.kind == "class_declaration":
            self.acquire(node.parent).declare(definition)
        else:
            self._by_block[node.index].declare(definition)

    def _declare_variable(self, node: Node) -> None:
        declaration = node.parent
        if declaration is not None and declaration.kind == "variable_declaration":
            scope = self._nearest_function_scope(node)
        else:
            scope = self.acquire(node)
        for ident in pattern_identifiers(node.field("name")):
            scope.declare(Definition(DefinitionType.VARIABLE, ident.text, node, ident))

    def _declare_imports(self, node: Node) -> None:
        scope = self.module
        for child in node.children:
            if child.kind != "import_clause":
                continue
            for binding in child.children:
                if binding.kind == "identifier":
                    scope.declare(Definition(DefinitionType.IMPORT, binding.text, binding, binding))
                elif binding.kind == "namespace_import":
                    for ident in binding.children:
                        scope.declare(Definition(DefinitionType.IMPORT, ident.text, binding, ident))
                elif binding.kind == "named_imports":
                    for specifier in binding.children:
                        local = specifier.field("alias") or specifier.field("name")
                        if local is not None and local.kind == "identifier":
                            scope.declare(Definition(DefinitionType.IMPORT, local.text, specifier, local))


def import_source(definition: Definition) -> Optional[str]:
    """Module name an import binding comes from, without quotes."""
    if definition.type is not DefinitionType.IMPORT:
        return None
    for ancestor in definition.node.ancestors():
        if ancestor.kind == "import_statement":
            source = ancestor.field("source")
            if source is None:
                return None
            return source.text.strip("'\"")
    return None
