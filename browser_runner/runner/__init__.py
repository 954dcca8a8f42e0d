"""Runner module - run orchestration and the in-page runner."""

from .orchestrator import build_run_config, exit_code_for, run_specs, start_server
from .page_runner import RunResult, Runner
from .result_collector import CollectedResult, ResultCollector

__all__ = [
    "build_run_config",
    "exit_code_for",
    "run_specs",
    "start_server",
    "RunResult",
    "Runner",
    "CollectedResult",
    "ResultCollector",
]
