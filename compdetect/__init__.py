"""
compdetect - component detection for JSX syntax trees.

Classifies functions, classes and wrapper calls as UI component
definitions with a confidence level, in one pass over the tree.
"""
from .orchestrator import (
    ComponentUtils,
    DetectionPass,
    RuleContext,
    build_context,
    detect,
    find_components,
    run_rule,
    traverse,
)
from .registry import ComponentRecord, Components, Confidence
from .settings import Settings, SettingsError, WrapperFunction
from .syntax import Node, SyntaxTree, parse

__all__ = [
    'ComponentRecord',
    'ComponentUtils',
    'Components',
    'Confidence',
    'DetectionPass',
    'Node',
    'RuleContext',
    'Settings',
    'SettingsError',
    'SyntaxTree',
    'WrapperFunction',
    'build_context',
    'detect',
    'find_components',
    'parse',
    'run_rule',
    'traverse',
]
