"""browser-runner - run a spec suite in a real browser."""

__version__ = "0.1.0"

from .config import RunOptions
from .reporting import DefaultReporter
from .runner import RunResult, Runner, run_specs, start_server
from .server import Server

__all__ = [
    "__version__",
    "DefaultReporter",
    "RunOptions",
    "RunResult",
    "Runner",
    "Server",
    "run_specs",
    "start_server",
]
