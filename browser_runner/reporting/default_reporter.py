"""Reporter used when a run configures no reporters."""

import sys
from typing import Any, Callable, Optional

from .console_reporter import ConsoleReporter

CLI_NAME = "browser-runner"


def _write_stdout(*args: Any) -> None:
    sys.stdout.write(" ".join(str(a) for a in args))
    sys.stdout.flush()


def random_seed_reproduction_cmd(seed: Any) -> str:
    """Command that reruns the suite with the same random order."""
    return f"{CLI_NAME} runSpecs --seed={seed}"


class DefaultReporter(ConsoleReporter):
    """Console reporter writing to a sink, stdout by default.

    Args:
        print: Output sink. Receives every piece of text the reporter emits.
        color: Whether to colour output. None means colour on.
    """

    def __init__(
        self,
        print: Optional[Callable[..., None]] = None,
        color: Optional[bool] = None,
    ):
        super().__init__()
        self.set_options(
            print=print or _write_stdout,
            show_colors=True if color is None else color,
            random_seed_reproduction_cmd=random_seed_reproduction_cmd,
        )
