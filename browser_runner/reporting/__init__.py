"""Reporting module - host-side reporters and reporter resolution."""

from .console_reporter import ConsoleReporter
from .default_reporter import DefaultReporter, random_seed_reproduction_cmd
from .json_reporter import JsonReporter
from .resolver import (
    InlineReporter,
    ModuleReporter,
    ReporterSpec,
    list_registered_reporters,
    register_reporter,
    reporter_spec,
    resolve_reporters,
    unregister_reporter,
)

__all__ = [
    "ConsoleReporter",
    "DefaultReporter",
    "random_seed_reproduction_cmd",
    "JsonReporter",
    "InlineReporter",
    "ModuleReporter",
    "ReporterSpec",
    "list_registered_reporters",
    "register_reporter",
    "reporter_spec",
    "resolve_reporters",
    "unregister_reporter",
]
