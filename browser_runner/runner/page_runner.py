"""In-page runner.

Starts the suite inside the browser and relays reporter events from the
page to host-side reporters until the run finishes.

Two transports carry events out of the page:
- batch: a script call returns the queued events as structured values
- JSON-DOM: a script call returns the events as JSON text kept in a DOM
  node, parsed on the host (for browsers that cannot return nested values)
"""

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Optional

from .result_collector import CollectedResult, ResultCollector

logger = logging.getLogger("browser_runner.runner")

START_SCRIPT = "return window.browserRunner.start(JSON.parse(arguments[0]));"
BATCH_SCRIPT = "return window.browserRunner.takeBatch();"
JSON_DOM_SCRIPT = "return window.browserRunner.takeJson();"

# In-page event name -> reporter method
EVENT_METHODS = {
    "jasmineStarted": "jasmine_started",
    "suiteStarted": "suite_started",
    "specStarted": "spec_started",
    "specDone": "spec_done",
    "suiteDone": "suite_done",
    "jasmineDone": "jasmine_done",
}


@dataclass
class RunResult:
    """Outcome of one run, built from the jasmineDone event."""
    overall_status: str
    incomplete_reason: Optional[str] = None
    order: dict[str, Any] = field(default_factory=dict)
    failed_expectations: list[dict] = field(default_factory=list)
    summary: Optional[CollectedResult] = None
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def passed(self) -> bool:
        return self.overall_status == "passed"

    @property
    def seed(self) -> Optional[str]:
        return self.order.get("seed") if self.order.get("random") else None

    @classmethod
    def from_event(cls, payload: dict, summary: Optional[CollectedResult] = None) -> "RunResult":
        return cls(
            overall_status=payload.get("overallStatus", ""),
            incomplete_reason=payload.get("incompleteReason"),
            order=dict(payload.get("order") or {}),
            failed_expectations=list(payload.get("failedExpectations") or []),
            summary=summary,
            details=payload,
        )


class Runner:
    """Drives one suite execution in an already-loaded harness page."""

    def __init__(
        self,
        webdriver: Any,
        reporters: list[Any],
        host: str = "",
        poll_interval: float = 0.1,
        timeout: Optional[float] = None,
    ):
        """Initialize the runner.

        Args:
            webdriver: Browser session with execute_script().
            reporters: Host-side reporters, called in order for each event.
            host: Harness page URL, for diagnostics.
            poll_interval: Seconds between event fetches.
            timeout: Seconds to wait for the run to finish. None waits
                forever.
        """
        self.webdriver = webdriver
        self.reporters = list(reporters)
        self.host = host
        self.poll_interval = poll_interval
        self.timeout = timeout
        self._collector = ResultCollector()

    def run(self, config: Optional[dict] = None) -> RunResult:
        """Execute the suite and wait for it to finish.

        Args:
            config: Run config. Keys: ``env``, ``filter``,
                ``clear_reporters``, and one of ``batch_reporter`` or
                ``json_dom_reporter``.

        Returns:
            RunResult from the jasmineDone event.

        Raises:
            TimeoutError: If a timeout is set and the run does not finish.
            selenium.common.exceptions.WebDriverException: If a script
                call fails in the browser.
        """
        config = config or {}
        json_dom = bool(config.get("json_dom_reporter"))
        page_config = {
            "env": config.get("env") or {},
            "filter": config.get("filter"),
            "clearReporters": bool(config.get("clear_reporters")),
            "jsonDom": json_dom,
        }

        logger.debug("Starting suite at %s (%s transport)", self.host,
                     "json-dom" if json_dom else "batch")
        self.webdriver.execute_script(START_SCRIPT, json.dumps(page_config))

        start_time = time.monotonic()
        while True:
            for event in self._fetch(json_dom):
                payload = event.get("payload") or {}
                self._dispatch(event.get("type", ""), payload)
                if event.get("type") == "jasmineDone":
                    return RunResult.from_event(payload, self._collector.result)

            if self.timeout is not None and time.monotonic() - start_time >= self.timeout:
                raise TimeoutError(f"Run did not complete within {self.timeout}s")

            time.sleep(self.poll_interval)

    def _fetch(self, json_dom: bool) -> list[dict]:
        if json_dom:
            text = self.webdriver.execute_script(JSON_DOM_SCRIPT)
            return json.loads(text or "[]")
        return self.webdriver.execute_script(BATCH_SCRIPT) or []

    def _dispatch(self, event_type: str, payload: dict) -> None:
        method_name = EVENT_METHODS.get(event_type)
        if method_name is None:
            logger.debug("Ignoring unknown event %r", event_type)
            return

        for reporter in [self._collector, *self.reporters]:
            method = getattr(reporter, method_name, None)
            if callable(method):
                method(payload)
