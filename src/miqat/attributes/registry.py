from __future__ import annotations
from typing import Any, Callable, Dict, Sequence, Union

from ..core.types import HijriDayInfo, Locale, resolve_locale

# fn(info, engine, locale) -> {name: value}
AttrFunc = Callable[[HijriDayInfo, Any, Locale], Dict[str, Any]]
_REGISTRY: Dict[str, AttrFunc] = {}

def register_attribute(name: str, fn: AttrFunc) -> None:
    _REGISTRY[name] = fn

def available_attributes() -> list[str]:
    _load_standard()
    return sorted(_REGISTRY)

def compute_attributes(
    info: HijriDayInfo,
    names: Sequence[str],
    *,
    engine: Any,
    locale: Union[str, Locale] = Locale.AR,
) -> Dict[str, Any]:
    _load_standard()
    loc = resolve_locale(locale)
    out: Dict[str, Any] = {}
    for name in names:
        if name not in _REGISTRY:
            raise KeyError(f"Unknown attribute '{name}'. Available: {sorted(_REGISTRY)}")
        out.update(_REGISTRY[name](info, engine, loc))
    return out

def _load_standard() -> None:
    # registration happens on import
    from . import standard  # noqa: F401
