"""
Orchestrator

Glue layer. Builds one detection pass over one syntax tree and runs it
together with a consuming rule in a single traversal.

A rule is a function:

    rule(context, components, utils) -> {node_kind: handler}

For every node kind the built-in detection table handles, the rule's
handler (if any) runs right after the built-in one on the same visit.
Handlers keyed "<kind>:exit" run when the traversal leaves the node;
"program:exit" is where rules read the final registry.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Union

from . import jsx
from .detectors import (
    DetectorContext,
    get_detected_components,
    get_name_of_wrapped_component,
    get_pragma_component_wrapper,
    get_related_component,
    get_stateless_component,
    is_es5_component,
    is_es6_component,
    is_pragma_component_wrapper,
    node_wraps_component,
)
from .pragma import get_pragma, is_create_element, is_destructured_from_pragma_import
from .registry import ComponentRecord, Components, Confidence
from .scope import Scope, ScopeTree, ScopeType
from .settings import Settings
from .syntax import (
    FUNCTION_NODE_KINDS,
    FunctionKind,
    Node,
    Span,
    SyntaxTree,
    function_kind,
    is_concise_arrow,
    is_function,
    parse,
)

logger = logging.getLogger(__name__)

Handler = Callable[[Node], None]
Handlers = Dict[str, Handler]


@dataclass
class RuleContext:
    """What the traversal host offers a rule for one source file."""
    tree: SyntaxTree
    scopes: ScopeTree
    settings: Settings
    pragma: str

    def get_scope(self, node: Node) -> Scope:
        return self.scopes.acquire(node)


Rule = Callable[[RuleContext, Components, "ComponentUtils"], Mapping[str, Handler]]


class ComponentUtils:
    """Component detection helpers, bound to one detection pass."""

    def __init__(self, context: DetectorContext):
        self.context = context

    def is_es5_component(self, node: Node) -> bool:
        return is_es5_component(node, self.context)

    def is_es6_component(self, node: Node) -> bool:
        return is_es6_component(node, self.context)

    def is_create_element(self, node: Node) -> bool:
        return self.context.is_create_element(node)

    def is_destructured_from_pragma_import(self, name: str, node: Optional[Node] = None) -> bool:
        """Check if `name`, as seen from `node` (default: module scope), comes from the pragma import."""
        scopes = self.context.scopes
        scope = scopes.acquire(node) if node is not None else scopes.module
        return is_destructured_from_pragma_import(name, scope, self.context.pragma)

    def is_returning_jsx(self, node: Node) -> bool:
        """Check if a return statement or function directly returns an element."""
        return jsx.is_returning_element(self.context.is_create_element, node)

    def is_returning_jsx_or_null(self, node: Node, strict: bool = False) -> bool:
        return jsx.is_returning_jsx(self.context.is_create_element, node, strict=strict)

    def is_returning_only_null(self, node: Node) -> bool:
        return jsx.is_returning_only_null(node)

    def get_stateless_component(self, node: Node) -> Optional[Node]:
        return get_stateless_component(node, self.context)

    def get_pragma_component_wrapper(self, node: Node) -> Optional[Node]:
        return get_pragma_component_wrapper(node, self.context)

    def is_pragma_component_wrapper(self, node: Node) -> bool:
        return is_pragma_component_wrapper(node, self.context)

    def node_wraps_component(self, node: Node) -> bool:
        return node_wraps_component(node, self.context)

    def get_name_of_wrapped_component(self, arguments: Node) -> Optional[str]:
        return get_name_of_wrapped_component(arguments)

    def get_detected_components(self) -> List[str]:
        return get_detected_components(self.context.components)

    def get_related_component(self, node: Node) -> Optional[ComponentRecord]:
        return get_related_component(node, self.context)

    def get_parent_component(self, node: Node) -> Optional[Node]:
        """Get the component enclosing `node`, or None if we are not in a component."""
        return (
            self.get_parent_es6_component(node)
            or self.get_parent_es5_component(node)
            or self.get_parent_stateless_component(node)
        )

    def get_parent_es5_component(self, node: Node) -> Optional[Node]:
        for scope in self.context.scopes.acquire(node).chain():
            candidate = _factory_object_of(scope.block)
            if candidate is not None and self.is_es5_component(candidate):
                return candidate
        return None

    def get_parent_es6_component(self, node: Node) -> Optional[Node]:
        for scope in self.context.scopes.acquire(node).chain():
            if scope.type is ScopeType.CLASS:
                return scope.block if self.is_es6_component(scope.block) else None
        return None

    def get_parent_stateless_component(self, node: Node) -> Optional[Node]:
        for scope in self.context.scopes.acquire(node).chain():
            component = self.get_stateless_component(scope.block)
            if component is not None:
                return component
        return None


def _factory_object_of(block: Node) -> Optional[Node]:
    """Object literal a function is a member of: `{render() {}}` or `{render: function () {}}`."""
    kind = function_kind(block)
    if kind is FunctionKind.METHOD:
        parent = block.parent
        return parent if parent is not None and parent.kind == "object" else None
    if kind is not None:
        parent = block.parent
        if parent is not None and parent.kind == "pair":
            return parent.parent
    return None


def _detection_instructions(components: Components, utils: ComponentUtils) -> Handlers:
    """Built-in detection callbacks, keyed by node kind."""

    def on_class(node: Node) -> None:
        if not utils.is_es6_component(node):
            return
        components.add(node, Confidence.CONFIRMED)

    def on_class_field(node: Node) -> None:
        component = utils.get_parent_component(node)
        if component is None:
            return
        components.add(component, Confidence.CONFIRMED)

    def on_object(node: Node) -> None:
        if not utils.is_es5_component(node):
            return
        components.add(node, Confidence.CONFIRMED)

    def on_function(node: Node) -> None:
        component = utils.get_parent_component(node)
        if component is None:
            return
        components.add(component, Confidence.MAYBE)

    def on_arrow_function(node: Node) -> None:
        component = utils.get_parent_component(node)
        if component is None:
            return
        target = component
        if component.kind == "call_expression":
            # A wrapper call stands in only for the arrow it wraps
            target = node if utils.get_pragma_component_wrapper(node) is component else None
        if target is not None and is_concise_arrow(target) and utils.is_returning_jsx(target):
            components.add(component, Confidence.CONFIRMED)
        else:
            components.add(component, Confidence.MAYBE)

    def on_this(node: Node) -> None:
        component = utils.get_parent_component(node)
        if component is None or not is_function(component):
            return
        # Ban functions using `this`
        components.add(component, Confidence.BANNED)

    def on_return(node: Node) -> None:
        if not utils.is_returning_jsx(node):
            return
        component = utils.get_parent_component(node)
        if component is None:
            return
        components.add(component, Confidence.CONFIRMED)

    instructions: Handlers = {
        "class_declaration": on_class,
        "class":             on_class,
        "field_definition":  on_class_field,
        "object":            on_object,
        "arrow_function":    on_arrow_function,
        "this":              on_this,
        "return_statement":  on_return,
    }
    # Every function-like kind except arrows, which have their own entry
    for kind in FUNCTION_NODE_KINDS - {"arrow_function"}:
        instructions[kind] = on_function
    return instructions


def _compose(first: Handler, second: Optional[Handler]) -> Handler:
    if second is None:
        return first

    def handler(node: Node) -> None:
        first(node)
        second(node)

    return handler


class DetectionPass:
    """
    State of one classification pass: registry, helpers and handlers.

    Discarded once the traversal is over.
    """

    def __init__(
        self,
        context: RuleContext,
        is_create_element_fn: Optional[Callable[[Node], bool]] = None,
        is_pragma_import_fn: Optional[Callable[[Node], bool]] = None,
    ):
        self.rule_context = context
        self.components = Components()
        self.detector_context = DetectorContext(
            pragma=context.pragma,
            create_class=context.settings.create_class,
            wrapper_functions=tuple(context.settings.wrapper_functions(context.pragma)),
            components=self.components,
            scopes=context.scopes,
            is_create_element=is_create_element_fn or self._is_create_element,
            is_pragma_import=is_pragma_import_fn or self._is_pragma_import,
        )
        self.utils = ComponentUtils(self.detector_context)

    def _is_create_element(self, node: Node) -> bool:
        context = self.rule_context
        return is_create_element(node, context.scopes.acquire(node), context.pragma)

    def _is_pragma_import(self, identifier: Node) -> bool:
        context = self.rule_context
        return is_destructured_from_pragma_import(
            identifier.text, context.scopes.acquire(identifier), context.pragma
        )

    def handlers(self, rule_handlers: Optional[Mapping[str, Handler]] = None) -> Handlers:
        """Built-in detection composed with a rule's handlers (built-in first)."""
        rule_handlers = dict(rule_handlers or {})
        updated = dict(rule_handlers)
        for kind, instruction in _detection_instructions(self.components, self.utils).items():
            updated[kind] = _compose(instruction, rule_handlers.get(kind))
        return updated


def detect(rule: Rule) -> Callable[[RuleContext], Handlers]:
    """Wrap a rule so it runs with component detection."""

    def create(context: RuleContext) -> Handlers:
        detection = DetectionPass(context)
        rule_handlers = rule(context, detection.components, detection.utils)
        return detection.handlers(rule_handlers)

    return create


def traverse(tree: SyntaxTree, handlers: Mapping[str, Handler]) -> None:
    """
    Depth-first pre-order walk, calling `handlers[kind]` on enter and
    `handlers[kind + ":exit"]` on leave. Each node is visited once.
    """
    stack = [(tree.root, False)]
    while stack:
        node, leaving = stack.pop()
        if leaving:
            handler = handlers.get(f"{node.kind}:exit")
            if handler is not None:
                handler(node)
            continue

        handler = handlers.get(node.kind)
        if handler is not None:
            handler(node)

        stack.append((node, True))
        stack.extend((child, False) for child in reversed(node.children))


def build_context(source: Union[str, bytes, SyntaxTree], settings: Optional[Settings] = None) -> RuleContext:
    settings = settings or Settings()
    tree = source if isinstance(source, SyntaxTree) else parse(source)
    return RuleContext(
        tree=tree,
        scopes=ScopeTree(tree),
        settings=settings,
        pragma=get_pragma(tree, settings),
    )


def run_rule(
    source: Union[str, bytes, SyntaxTree],
    rule: Rule,
    settings: Optional[Settings] = None,
) -> RuleContext:
    """Parse `source` (unless already parsed) and run `rule` with component detection."""
    context = build_context(source, settings)
    traverse(context.tree, detect(rule)(context))
    return context


def find_components(
    source: Union[str, bytes, SyntaxTree],
    settings: Optional[Settings] = None,
) -> Dict[Span, ComponentRecord]:
    """Confirmed components of a source file, keyed by source span."""
    detected: Dict[Span, ComponentRecord] = {}

    def collect(context: RuleContext, components: Components, utils: ComponentUtils) -> Handlers:
        def on_program_exit(node: Node) -> None:
            detected.update(components.all())
            logger.debug("Detected %d components", components.count())

        return {"program:exit": on_program_exit}

    run_rule(source, collect, settings)
    return detected
