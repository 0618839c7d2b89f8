from __future__ import annotations
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Protocol

from .errors import InvalidMethodKeyError


class MethodPreset(Protocol):
    key: str
    name: str

    def info(self) -> Dict[str, Any]: ...


@dataclass(frozen=True)
class MethodRegistry:
    """Read-only lookup of calculation-method presets by key."""
    _methods: Mapping[str, MethodPreset]

    def __post_init__(self) -> None:
        object.__setattr__(self, "_methods", MappingProxyType(dict(self._methods)))

    def get(self, key: str) -> MethodPreset:
        k = str(key).lower()
        if k not in self._methods:
            raise InvalidMethodKeyError(f"Unknown method '{key}'. Available: {sorted(self._methods)}")
        return self._methods[k]

    def list(self) -> List[str]:
        return sorted(self._methods.keys())

    def __contains__(self, key: object) -> bool:
        return str(key).lower() in self._methods

    def with_method(self, preset: MethodPreset, *, overwrite: bool = False) -> "MethodRegistry":
        if (not overwrite) and (preset.key in self._methods):
            raise KeyError(f"Method '{preset.key}' already exists. Use overwrite=True to replace.")
        return MethodRegistry({**self._methods, preset.key: preset})
