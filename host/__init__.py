# host/__init__.py
"""Filter host: JSON config parsing, filter class loading, and the return-code adapter."""

from .adapter import ERROR, OK, FilterHost
from .config import ConfigError, FilterConfig, parse_config
from .loader import FilterLoadError, create_filter, load_filter_class

__all__ = [
    "FilterHost",
    "OK",
    "ERROR",
    "FilterConfig",
    "ConfigError",
    "parse_config",
    "FilterLoadError",
    "load_filter_class",
    "create_filter",
]

__version__ = "0.1.0"
