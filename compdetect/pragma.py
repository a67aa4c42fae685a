"""
Framework pragma helpers.

Default implementations of the two questions the classifier asks about
the host framework:
- is this call the element-creation entry point?
- was this identifier destructured from the framework import?

Both are best-effort: anything unresolvable answers False.
"""
import logging
import re
from typing import Optional

from .scope import DefinitionType, Scope, import_source
from .settings import JS_IDENTIFIER_REGEX, Settings, SettingsError
from .syntax import Node, SyntaxTree

logger = logging.getLogger(__name__)

JSX_ANNOTATION_REGEX = re.compile(r"@jsx\s+([^\s]+)")


def comment_value(comment: str) -> str:
    """Comment text without its `//` or `/* */` delimiters."""
    if comment.startswith("//"):
        return comment[2:]
    if comment.startswith("/*"):
        return comment[2:-2] if comment.endswith("*/") else comment[2:]
    return comment


def get_pragma(tree: SyntaxTree, settings: Settings) -> str:
    """
    Resolve the pragma for one source file.

    A `/** @jsx h */` annotation overrides the configured pragma.
    Dotted annotations (`@jsx Preact.h`) contribute their first segment.
    """
    for comment in tree.comments:
        match = JSX_ANNOTATION_REGEX.search(comment_value(comment))
        if not match:
            continue
        pragma = match.group(1).split(".")[0]
        if not JS_IDENTIFIER_REGEX.match(pragma):
            raise SettingsError(f"@jsx pragma {pragma!r} is not a valid identifier")
        logger.debug("Using @jsx annotation pragma %s", pragma)
        return pragma
    return settings.pragma


def _is_require_of(node: Optional[Node], module: str) -> bool:
    if node is None or node.kind != "call_expression":
        return False
    callee = node.field("function")
    if callee is None or callee.kind != "identifier" or callee.text != "require":
        return False
    arguments = node.field("arguments")
    if arguments is None or not arguments.children:
        return False
    first = arguments.children[0]
    return first.kind == "string" and first.text.strip("'\"") == module


def is_destructured_from_pragma_import(name: str, scope: Scope, pragma: str) -> bool:
    """
    Check if `name` is bound to something taken from the pragma module.

    Matches:
        import { name } from 'react'
        const { name } = React
        const { name } = require('react')
        const name = React.name
    """
    variable = scope.resolve(name)
    if variable is None:
        return False

    module = pragma.lower()
    for definition in variable.defs:
        if definition.type is DefinitionType.IMPORT:
            if definition.node.kind == "import_specifier" and import_source(definition) == module:
                return True
            continue

        if definition.type is not DefinitionType.VARIABLE:
            continue

        target = definition.node.field("name")
        value = definition.node.field("value")
        if value is None or target is None:
            continue

        if target.kind == "object_pattern":
            if value.kind == "identifier" and value.text == pragma:
                return True
            if _is_require_of(value, module):
                return True
        elif target.kind == "identifier" and value.kind == "member_expression":
            obj = value.field("object")
            prop = value.field("property")
            if obj is not None and obj.kind == "identifier" and obj.text == pragma:
                if prop is not None and prop.text == name:
                    return True
    return False


def is_create_element(node: Node, scope: Scope, pragma: str) -> bool:
    """Check if a call is `<pragma>.createElement(...)` or an imported `createElement(...)`."""
    if node.kind != "call_expression":
        return False
    callee = node.field("function")
    if callee is None:
        return False

    if callee.kind == "member_expression":
        obj = callee.field("object")
        prop = callee.field("property")
        return (
            obj is not None
            and prop is not None
            and obj.kind == "identifier"
            and obj.text == pragma
            and prop.text == "createElement"
        )

    if callee.kind == "identifier" and callee.text == "createElement":
        return is_destructured_from_pragma_import("createElement", scope, pragma)

    return False
