"""Console-style reporter.

Prints dot progress while specs finish, then failures, pending specs, a
summary line and the random seed. All output goes through a print sink so
callers can capture it.
"""

import sys
from typing import Any, Callable, Optional

_COLORS = {
    "green": "\x1b[32m",
    "red": "\x1b[31m",
    "yellow": "\x1b[33m",
    "none": "\x1b[0m",
}

_PROGRESS = {
    "passed": (".", "green"),
    "failed": ("F", "red"),
    "pending": ("*", "yellow"),
}


def _stdout_print(*args: Any) -> None:
    sys.stdout.write(" ".join(str(a) for a in args))


def _plural(word: str, count: int) -> str:
    return word if count == 1 else word + "s"


class ConsoleReporter:
    """Reports run progress and results as text."""

    def __init__(self):
        self._print: Callable[..., None] = _stdout_print
        self._show_colors = False
        self._seed_cmd: Optional[Callable[[str], str]] = None
        self._reset()

    def set_options(
        self,
        print: Optional[Callable[..., None]] = None,
        show_colors: Optional[bool] = None,
        random_seed_reproduction_cmd: Optional[Callable[[str], str]] = None,
    ) -> None:
        """Configure output.

        Args:
            print: Sink receiving every piece of text. Defaults to stdout.
            show_colors: Whether to emit ANSI colour codes.
            random_seed_reproduction_cmd: Formats the command that reruns
                the suite in the same random order.
        """
        if print is not None:
            self._print = print
        if show_colors is not None:
            self._show_colors = show_colors
        if random_seed_reproduction_cmd is not None:
            self._seed_cmd = random_seed_reproduction_cmd

    def _reset(self) -> None:
        self.spec_count = 0
        self.executable_spec_count = 0
        self.failure_count = 0
        self.failed_specs: list[dict] = []
        self.pending_specs: list[dict] = []
        self.failed_suites: list[dict] = []

    def jasmine_started(self, options: dict) -> None:
        self._reset()
        self._print("Started")
        self._newline()

    def spec_done(self, result: dict) -> None:
        self.spec_count += 1
        status = result.get("status")

        if status in ("passed", "failed"):
            self.executable_spec_count += 1
        if status == "failed":
            self.failure_count += 1
            self.failed_specs.append(result)
        elif status == "pending":
            self.pending_specs.append(result)

        if status in _PROGRESS:
            char, color = _PROGRESS[status]
            self._print(self._colored(color, char))

    def suite_done(self, result: dict) -> None:
        if result.get("failedExpectations"):
            self.failure_count += 1
            self.failed_suites.append(result)

    def jasmine_done(self, result: dict) -> None:
        self._newline()
        self._newline()

        if self.failed_specs:
            self._print("Failures:")
        for i, spec in enumerate(self.failed_specs, start=1):
            self._spec_failure_details(spec, i)

        for suite in self.failed_suites:
            self._suite_failure_details(suite)

        if result.get("failedExpectations"):
            self._suite_failure_details({
                "fullName": "top suite",
                "failedExpectations": result["failedExpectations"],
            })

        if self.pending_specs:
            self._print("Pending:")
        for i, spec in enumerate(self.pending_specs, start=1):
            self._pending_spec_details(spec, i)

        if self.spec_count > 0:
            self._newline()
            if self.executable_spec_count != self.spec_count:
                self._print(f"Ran {self.executable_spec_count} of {self.spec_count} "
                            f"{_plural('spec', self.spec_count)} - run the full suite "
                            "to get the full set of results")
                self._newline()
            spec_counts = (f"{self.executable_spec_count} "
                           f"{_plural('spec', self.executable_spec_count)}, "
                           f"{self.failure_count} {_plural('failure', self.failure_count)}")
            if self.pending_specs:
                spec_counts += f", {len(self.pending_specs)} pending " \
                               f"{_plural('spec', len(self.pending_specs))}"
            self._print(spec_counts)
        else:
            self._print("No specs found")

        self._newline()
        total_time = result.get("totalTime")
        if total_time is not None:
            self._print(f"Finished in {total_time / 1000} {_plural('second', total_time // 1000)}")
            self._newline()

        order = result.get("order") or {}
        if order.get("random"):
            seed = order.get("seed")
            self._print(f"Randomized with seed {seed}")
            if self._seed_cmd:
                self._print(f" ({self._seed_cmd(seed)})")
            self._newline()

        if result.get("overallStatus") == "incomplete":
            self._print(f"Incomplete: {result.get('incompleteReason', '')}")
            self._newline()

    def _spec_failure_details(self, result: dict, number: int) -> None:
        self._newline()
        self._print(f"{number}) {result.get('fullName', '')}")
        self._failed_expectations(result.get("failedExpectations", []))

    def _suite_failure_details(self, result: dict) -> None:
        self._newline()
        self._print(self._colored("red", f"Suite error: {result.get('fullName', '')}"))
        self._failed_expectations(result.get("failedExpectations", []))

    def _failed_expectations(self, expectations: list) -> None:
        for expectation in expectations:
            self._newline()
            self._print(self._indent("Message:", 2))
            self._newline()
            self._print(self._colored("red", self._indent(expectation.get("message", ""), 4)))
            self._newline()
            self._print(self._indent("Stack:", 2))
            self._newline()
            self._print(self._indent(expectation.get("stack") or "", 4))
        self._newline()

    def _pending_spec_details(self, result: dict, number: int) -> None:
        self._newline()
        self._print(f"{number}) {result.get('fullName', '')}")
        self._newline()
        reason = result.get("pendingReason") or "No reason given"
        self._print(self._colored("yellow", self._indent(reason, 2)))
        self._newline()

    def _newline(self) -> None:
        self._print("\n")

    def _colored(self, color: str, text: str) -> str:
        if not self._show_colors:
            return text
        return f"{_COLORS[color]}{text}{_COLORS['none']}"

    @staticmethod
    def _indent(text: str, spaces: int) -> str:
        pad = " " * spaces
        return "\n".join(pad + line for line in str(text).split("\n"))
