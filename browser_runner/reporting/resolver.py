"""Reporter resolution with plugin support.

Turns the ``reporters`` entries of a run's options into reporter instances.
Each entry is either an inline reporter object or a module reference string.
A reference is looked up in this order:

1. A registered name (``register_reporter``, or an entry point in the
   ``browser_runner.reporters`` group).
2. A file path such as ``./reporters/mine.py``, relative to the base
   directory.
3. A dotted module path, optionally ``module:attribute``. Modules under
   the base directory win over installed ones.

For plugin packages, add to pyproject.toml:
    [project.entry-points."browser_runner.reporters"]
    my_reporter = "my_package.reporters:MyReporter"
"""

import hashlib
import importlib
import importlib.util
import logging
import os
import sys
from dataclasses import dataclass
from importlib.metadata import entry_points
from pathlib import Path
from typing import Any, Callable, Optional, Union

from ..errors import ReporterLoadError
from .default_reporter import DefaultReporter
from .json_reporter import JsonReporter

logger = logging.getLogger("browser_runner.reporting.resolver")

ReporterFactory = Callable[[], Any]

ENTRY_POINT_GROUP = "browser_runner.reporters"

# Attributes checked, in order, when a reference names no attribute
DEFAULT_EXPORTS = ("reporter", "Reporter")

_REGISTRY: dict[str, ReporterFactory] = {}
_entry_points_loaded = False


@dataclass(frozen=True)
class InlineReporter:
    """An already-built reporter object, used as is."""
    instance: Any


@dataclass(frozen=True)
class ModuleReporter:
    """A reporter named by registry key, file path, or module path."""
    reference: str


ReporterSpec = Union[InlineReporter, ModuleReporter]


def reporter_spec(value: Any) -> ReporterSpec:
    """Classify a raw ``reporters`` entry."""
    if isinstance(value, (InlineReporter, ModuleReporter)):
        return value
    if isinstance(value, str):
        return ModuleReporter(value)
    return InlineReporter(value)


def register_reporter(name: str, factory: ReporterFactory, *, overwrite: bool = False) -> None:
    """Register a reporter factory under a name.

    Args:
        name: Name usable in the ``reporters`` option.
        factory: Zero-argument callable returning a reporter instance.
        overwrite: Allow replacing an existing registration.

    Raises:
        ValueError: If the name is taken and overwrite is False.
    """
    if name in _REGISTRY and not overwrite:
        raise ValueError(f"Reporter '{name}' is already registered. Use overwrite=True to replace it.")
    _REGISTRY[name] = factory
    logger.debug("Registered reporter: %s", name)


def unregister_reporter(name: str) -> bool:
    """Remove a registered reporter. Returns True if it was registered."""
    return _REGISTRY.pop(name, None) is not None


def list_registered_reporters() -> list[str]:
    """Return a sorted list of registered reporter names."""
    _ensure_entry_points_loaded()
    return sorted(_REGISTRY)


def load_entry_point_reporters() -> int:
    """Register reporters advertised by installed packages.

    Returns:
        Number of reporters registered from entry points.
    """
    global _entry_points_loaded
    _entry_points_loaded = True

    count = 0
    for ep in entry_points(group=ENTRY_POINT_GROUP):
        if ep.name in _REGISTRY:
            continue
        try:
            _REGISTRY[ep.name] = ep.load()
            count += 1
        except Exception as e:
            logger.warning("Failed to load reporter entry point '%s': %s", ep.name, e)
    return count


def _ensure_entry_points_loaded() -> None:
    if not _entry_points_loaded:
        load_entry_point_reporters()


def resolve_reporters(
    specs: Optional[list[Any]],
    base_dir: Optional[Union[str, Path]] = None,
    color: Optional[bool] = None,
) -> list[Any]:
    """Resolve reporter entries into instances, keeping declaration order.

    Args:
        specs: Raw ``reporters`` entries or ReporterSpec values.
        base_dir: Directory module references are resolved against.
            Defaults to the current working directory at call time.
        color: Colour setting for the default reporter.

    Returns:
        Reporter instances. A single DefaultReporter when specs is empty.

    Raises:
        ReporterLoadError: If any reference cannot be loaded or built.
    """
    if not specs:
        return [DefaultReporter(color=color)]

    base_dir = Path(base_dir) if base_dir is not None else Path(os.getcwd())
    reporters = []

    for spec in map(reporter_spec, specs):
        if isinstance(spec, InlineReporter):
            reporters.append(spec.instance)
            continue
        try:
            reporters.append(_instantiate(_load_export(spec.reference, base_dir)))
        except Exception as e:
            raise ReporterLoadError(spec.reference, e) from e

    logger.debug("Resolved %d reporter(s)", len(reporters))
    return reporters


def _instantiate(export: Any) -> Any:
    if callable(export):
        return export()
    return export


def _load_export(reference: str, base_dir: Path) -> Any:
    _ensure_entry_points_loaded()
    if reference in _REGISTRY:
        return _REGISTRY[reference]

    module_ref, _, attribute = reference.partition(":")

    if _looks_like_path(module_ref):
        module = _load_file(base_dir / module_ref)
    else:
        module = _load_dotted(module_ref, base_dir)

    if attribute:
        return getattr(module, attribute)

    for name in DEFAULT_EXPORTS:
        if hasattr(module, name):
            return getattr(module, name)

    raise AttributeError(
        f"module '{module_ref}' defines none of: {', '.join(DEFAULT_EXPORTS)}"
    )


def _looks_like_path(ref: str) -> bool:
    return ref.endswith(".py") or "/" in ref or os.sep in ref or ref.startswith(".")


def _load_dotted(name: str, base_dir: Path) -> Any:
    local = base_dir.joinpath(*name.split("."))
    for candidate in (local.with_suffix(".py"), local / "__init__.py"):
        if candidate.is_file():
            return _load_file(candidate)
    return importlib.import_module(name)


def _load_file(path: Path) -> Any:
    if path.is_dir():
        path = path / "__init__.py"
    elif not path.suffix:
        path = path.with_suffix(".py")
    path = path.resolve()

    if not path.is_file():
        raise ModuleNotFoundError(f"Cannot find module '{path}'")

    digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:12]
    module_name = f"_browser_runner_reporter_{path.stem}_{digest}"
    if module_name in sys.modules:
        return sys.modules[module_name]

    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load module from '{path}'")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        del sys.modules[module_name]
        raise
    return module


register_reporter("default", DefaultReporter)
register_reporter("json", JsonReporter)
