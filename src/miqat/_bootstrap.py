from __future__ import annotations
from miqat.core.engine import MethodRegistry
from miqat.engines.methods import METHODS, custom_method

def build_registry() -> MethodRegistry:
    methods = dict(METHODS)
    methods["custom"] = custom_method()
    return MethodRegistry(methods)
