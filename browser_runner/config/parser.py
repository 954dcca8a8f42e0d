"""Config file loading and option merging.

Options come from three sources, in ascending precedence: built-in defaults,
a config file (JSON, or YAML for .yaml/.yml files), and command line flags.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from ..errors import ConfigError
from .schema import DEFAULT_CONFIG_PATH, OPTION_KEYS, BrowserOptions, RunOptions

logger = logging.getLogger("browser_runner.config")

_LIST_KEYS = ("srcFiles", "specFiles", "helpers", "frameworkScripts", "frameworkStyles")


def load_config_file(file_path: Union[str, Path]) -> dict[str, Any]:
    """Load a config file into a dictionary.

    Args:
        file_path: Path to a .json, .yaml or .yml file.

    Returns:
        The top-level mapping from the file.

    Raises:
        ConfigError: If the file is missing, unparsable, or not a mapping.
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise ConfigError(f"Config file not found: {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        text = f.read()

    try:
        if file_path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not parse config file {file_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Config file {file_path} must contain a mapping, got {type(data).__name__}"
        )
    return data


def find_config(base_dir: Union[str, Path], explicit: Optional[str] = None) -> Optional[Path]:
    """Locate the config file to use.

    An explicit path is resolved against base_dir and must exist. Without one,
    spec/support/browser-runner.json (or .yaml/.yml) is used when present.

    Returns:
        Path of the config file, or None when no default file exists.
    """
    base_dir = Path(base_dir)

    if explicit:
        path = base_dir / explicit
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        return path

    default = base_dir / DEFAULT_CONFIG_PATH
    for candidate in (default, default.with_suffix(".yaml"), default.with_suffix(".yml")):
        if candidate.exists():
            return candidate
    return None


def merge_options(
    file_values: Optional[dict[str, Any]] = None,
    cli_values: Optional[dict[str, Any]] = None,
    defaults: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    """Merge option sources into one config mapping.

    CLI values of None mean "not given" and never replace file values.
    Browser mappings merge key by key. A true failFast forces both env stop
    flags on.
    """
    merged: dict[str, Any] = dict(defaults or {})
    merged.update(file_values or {})

    for key, value in (cli_values or {}).items():
        if value is None:
            continue
        current = merged.get(key)
        if key == "browser" and isinstance(current, dict) and isinstance(value, dict):
            value = {**current, **value}
        merged[key] = value

    if merged.get("failFast"):
        env = dict(merged.get("env") or {})
        env["stopOnSpecFailure"] = True
        env["stopSpecOnExpectationFailure"] = True
        merged["env"] = env

    return merged


def parse_options_data(
    data: dict[str, Any],
    source: str = "<inline>",
    base_dir: Optional[Union[str, Path]] = None,
) -> RunOptions:
    """Parse a merged config mapping into RunOptions.

    Raises:
        ConfigError: If a value has the wrong shape.
    """
    if not isinstance(data, dict):
        raise ConfigError(f"Options must be a mapping, got {type(data).__name__}")

    kwargs: dict[str, Any] = {}
    extra: dict[str, Any] = {}

    for key, value in data.items():
        attr = OPTION_KEYS.get(key)
        if attr is None:
            extra[key] = value
            continue
        if value is None:
            continue
        kwargs[attr] = value

    for key in _LIST_KEYS:
        attr = OPTION_KEYS[key]
        if attr in kwargs:
            kwargs[attr] = _as_string_list(kwargs[attr], key, source)

    if "reporters" in kwargs:
        reporters = kwargs["reporters"]
        if not isinstance(reporters, (list, tuple)):
            reporters = [reporters]
        kwargs["reporters"] = list(reporters)

    if "env" in kwargs and not isinstance(kwargs["env"], dict):
        raise ConfigError(f"'env' must be a mapping in {source}")

    if "port" in kwargs:
        try:
            kwargs["port"] = int(kwargs["port"])
        except (TypeError, ValueError) as e:
            raise ConfigError(f"'port' must be an integer in {source}") from e

    if "timeout" in kwargs:
        try:
            kwargs["timeout"] = float(kwargs["timeout"])
        except (TypeError, ValueError) as e:
            raise ConfigError(f"'timeout' must be a number of seconds in {source}") from e

    if "seed" in kwargs:
        kwargs["seed"] = str(kwargs["seed"])

    try:
        kwargs["browser"] = BrowserOptions.from_value(kwargs.get("browser"))
    except ValueError as e:
        raise ConfigError(f"{e} in {source}") from e

    options = RunOptions(**kwargs, extra=extra)
    if base_dir is not None:
        options.base_dir = str(base_dir)
    return options


def resolve_options(
    base_dir: Union[str, Path],
    config_path: Optional[str] = None,
    cli_values: Optional[dict[str, Any]] = None,
) -> RunOptions:
    """Find, load and merge every option source for a command.

    Args:
        base_dir: Directory config paths are resolved against.
        config_path: Explicit --config value, if any.
        cli_values: Flags from the command line keyed by config-file names.

    Returns:
        Validated RunOptions.

    Raises:
        ConfigError: On a missing explicit config, a malformed file, or
            invalid merged options.
    """
    from .validator import validate_options

    path = find_config(base_dir, config_path)
    file_values = load_config_file(path) if path else {}
    source = str(path) if path else "<command line>"
    if path:
        logger.debug("Loaded config from %s", path)

    merged = merge_options(file_values, cli_values)
    options = parse_options_data(merged, source=source, base_dir=base_dir)

    validation = validate_options(options)
    for warning in validation.warnings:
        logger.warning("%s: %s", warning.path, warning.message)
    if not validation.valid:
        errors_str = "; ".join(f"{e.path}: {e.message}" for e in validation.errors)
        raise ConfigError(f"Invalid configuration: {errors_str}")

    return options


def _as_string_list(value: Any, key: str, source: str) -> list[str]:
    if isinstance(value, str):
        return [value]
    if not isinstance(value, (list, tuple)):
        raise ConfigError(f"'{key}' must be a list in {source}")
    for i, item in enumerate(value):
        if not isinstance(item, str):
            raise ConfigError(f"{key}[{i}] must be a string in {source}")
    return list(value)
