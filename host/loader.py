from __future__ import annotations

from importlib import import_module
from typing import Any

from .config import FilterConfig

_HOOKS = ("init", "on_frame", "destroy")


class FilterLoadError(Exception):
    """The configured filter class could not be imported, resolved, or built."""


def _split_class_name(class_name: str) -> tuple[str, str]:
    if ":" in class_name:
        module_name, _, attr = class_name.partition(":")
    else:
        module_name, _, attr = class_name.rpartition(".")
    if not module_name or not attr:
        raise FilterLoadError(f"could not find class {class_name}")
    return module_name, attr


def load_filter_class(class_name: str) -> type:
    """Import and return the filter class named by ``class_name``.

    The class must expose callable ``init``, ``on_frame`` and ``destroy``.
    """
    module_name, attr = _split_class_name(class_name)
    try:
        module = import_module(module_name)
    except Exception as exc:
        raise FilterLoadError(f"could not find class {class_name}: {exc}") from exc

    cls = getattr(module, attr, None)
    if not isinstance(cls, type):
        raise FilterLoadError(f"could not find class {class_name}")

    for hook in _HOOKS:
        if not callable(getattr(cls, hook, None)):
            raise FilterLoadError(f"could not resolve {hook} method on {class_name}")
    return cls


def create_filter(config: FilterConfig) -> Any:
    """Load and instantiate the filter described by ``config``."""
    cls = load_filter_class(config.class_name)
    factory = getattr(cls, "from_properties", None)

    try:
        if callable(factory):
            return factory(dict(config.properties))
        if config.properties:
            raise FilterLoadError(f"{config.class_name} does not accept properties")
        return cls()
    except FilterLoadError:
        raise
    except Exception as exc:
        raise FilterLoadError(f"could not create {config.class_name}: {exc}") from exc
