"""Config module - run options, config files and merging."""

from .schema import (
    DEFAULT_CONFIG,
    DEFAULT_CONFIG_PATH,
    BrowserOptions,
    RunOptions,
    ValidationError,
    ValidationResult,
)
from .parser import (
    find_config,
    load_config_file,
    merge_options,
    parse_options_data,
    resolve_options,
)
from .validator import validate_options

__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_CONFIG_PATH",
    "BrowserOptions",
    "RunOptions",
    "ValidationError",
    "ValidationResult",
    "find_config",
    "load_config_file",
    "merge_options",
    "parse_options_data",
    "resolve_options",
    "validate_options",
]
