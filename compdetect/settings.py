"""
Detection settings.

Immutable configuration for one detection pass, built from an
ESLint-style settings mapping:

    {
        "react": {"pragma": "React", "createClass": "createReactClass"},
        "componentWrapperFunctions": [
            "observer",
            {"property": "styled"},
            {"property": "observer", "object": "Mobx"},
            {"property": "observer", "object": "<pragma>"},
        ],
    }
"""
import re
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Tuple

DEFAULT_PRAGMA = "React"
DEFAULT_CREATE_CLASS = "createReactClass"

# Placeholder in wrapper descriptors for "whatever the pragma resolves to"
PRAGMA_PLACEHOLDER = "<pragma>"

JS_IDENTIFIER_REGEX = re.compile(r"^[_$a-zA-Z][_$a-zA-Z0-9]*$")

_BUILTIN_WRAPPER_PROPERTIES = ("forwardRef", "memo")


class SettingsError(ValueError):
    """Raised for settings that cannot be interpreted."""


@dataclass(frozen=True)
class WrapperFunction:
    """A higher-order function that may define a component by wrapping one."""
    property: str
    object: Optional[str] = None


@dataclass(frozen=True)
class Settings:
    pragma: str = DEFAULT_PRAGMA
    create_class: str = DEFAULT_CREATE_CLASS
    component_wrapper_functions: Tuple[WrapperFunction, ...] = ()

    def __post_init__(self):
        if not isinstance(self.pragma, str) or not JS_IDENTIFIER_REGEX.match(self.pragma):
            raise SettingsError(f"pragma must be a valid identifier, got {self.pragma!r}")
        if not isinstance(self.create_class, str) or not JS_IDENTIFIER_REGEX.match(self.create_class):
            raise SettingsError(f"createClass must be a valid identifier, got {self.create_class!r}")

    @classmethod
    def from_mapping(cls, settings: Optional[Mapping[str, Any]]) -> "Settings":
        """Build Settings from an ESLint-style mapping. Missing keys use defaults."""
        if not settings:
            return cls()
        if not isinstance(settings, Mapping):
            raise SettingsError("settings must be a mapping")

        react = settings.get("react") or {}
        if not isinstance(react, Mapping):
            raise SettingsError("settings.react must be a mapping")

        wrappers = settings.get("componentWrapperFunctions") or []
        if isinstance(wrappers, (str, bytes)) or not isinstance(wrappers, (list, tuple)):
            raise SettingsError("componentWrapperFunctions must be a list")

        return cls(
            pragma=react.get("pragma", DEFAULT_PRAGMA),
            create_class=react.get("createClass", DEFAULT_CREATE_CLASS),
            component_wrapper_functions=tuple(_parse_wrapper(entry) for entry in wrappers),
        )

    def wrapper_functions(self, pragma: str) -> List[WrapperFunction]:
        """
        Configured wrappers with the pragma placeholder resolved,
        followed by the built-in `forwardRef` and `memo`.
        """
        resolved = [
            WrapperFunction(
                property=wrapper.property,
                object=pragma if wrapper.object == PRAGMA_PLACEHOLDER else wrapper.object,
            )
            for wrapper in self.component_wrapper_functions
        ]
        resolved.extend(
            WrapperFunction(property=name, object=pragma)
            for name in _BUILTIN_WRAPPER_PROPERTIES
        )
        return resolved


def _parse_wrapper(entry: Any) -> WrapperFunction:
    if isinstance(entry, str):
        return WrapperFunction(property=entry)
    if isinstance(entry, WrapperFunction):
        return entry
    if isinstance(entry, Mapping):
        prop = entry.get("property")
        if not isinstance(prop, str) or not prop:
            raise SettingsError(f"wrapper function needs a 'property' name: {entry!r}")
        obj = entry.get("object")
        if obj is not None and not isinstance(obj, str):
            raise SettingsError(f"wrapper function 'object' must be a string: {entry!r}")
        return WrapperFunction(property=prop, object=obj)
    raise SettingsError(f"unsupported wrapper function entry: {entry!r}")
