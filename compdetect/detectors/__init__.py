"""
Component detectors.

Detectors are pure functions over a node and a DetectorContext.
They answer one question each ("is this an ES6 component?",
"which node does this function register as?") and never raise:
if uncertain, they answer False / None.

The only state they touch is the registry carried by the context,
and only the dispatcher in the orchestrator writes to it.
"""
from dataclasses import dataclass
from typing import Callable, Tuple

from ..registry import Components
from ..scope import ScopeTree
from ..settings import WrapperFunction
from ..syntax import Node


@dataclass(frozen=True)
class DetectorContext:
    """
    Everything a detector may consult during one detection pass.

    Created once per pass and shared by reference; never global.
    """
    pragma: str
    create_class: str
    wrapper_functions: Tuple[WrapperFunction, ...]
    components: Components
    scopes: ScopeTree
    is_create_element: Callable[[Node], bool]
    is_pragma_import: Callable[[Node], bool]  # identifier node -> bool


# Import all detector functions
from .classes import is_es5_component, is_es6_component
from .reference import get_related_component
from .stateless import get_stateless_component, is_in_allowed_position_for_component
from .wrapper import (
    get_detected_components,
    get_name_of_wrapped_component,
    get_pragma_component_wrapper,
    is_pragma_component_wrapper,
    is_wrapper_call,
    node_wraps_component,
)

__all__ = [
    'DetectorContext',
    'is_es5_component',
    'is_es6_component',
    'get_related_component',
    'get_stateless_component',
    'is_in_allowed_position_for_component',
    'get_detected_components',
    'get_name_of_wrapped_component',
    'get_pragma_component_wrapper',
    'is_pragma_component_wrapper',
    'is_wrapper_call',
    'node_wraps_component',
]
