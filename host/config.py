from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict

_ALLOWED_KEYS = {"class_name", "properties"}


class ConfigError(ValueError):
    """Host config text is malformed or incomplete."""


@dataclass(frozen=True)
class FilterConfig:
    """Host-side filter selection.

    Parameters
    ----------
    class_name:
        Filter class path, ``package.module:Class`` or ``package.module.Class``.
    properties:
        String key/value pairs handed to the filter's ``from_properties``.
    """

    class_name: str
    properties: Dict[str, str] = field(default_factory=dict)


def parse_config(text: str) -> FilterConfig:
    """Parse a JSON host config.

    Raises
    ------
    ConfigError
        On invalid JSON, unknown keys, an empty ``class_name``, or empty or
        non-string property keys/values.
    """
    if text is None:
        raise ConfigError("got null config")
    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"invalid config: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError("invalid config: expected a JSON object")
    unknown = sorted(set(data) - _ALLOWED_KEYS)
    if unknown:
        raise ConfigError(f"invalid config: unknown field(s) {', '.join(unknown)}")

    class_name = data.get("class_name")
    if not isinstance(class_name, str):
        raise ConfigError("invalid config: class_name must be a string")
    class_name = class_name.strip()
    if not class_name:
        raise ConfigError("empty class_name in config")

    raw_props = data.get("properties", {})
    if not isinstance(raw_props, dict):
        raise ConfigError("invalid config: properties must be an object")

    props: Dict[str, str] = {}
    for k, v in raw_props.items():
        if not isinstance(v, str):
            raise ConfigError(f"invalid config: property {k!r} must be a string")
        k, v = k.strip(), v.strip()
        if not k or not v:
            raise ConfigError("empty property key and/or value in config")
        props[k] = v

    return FilterConfig(class_name=class_name, properties=props)
