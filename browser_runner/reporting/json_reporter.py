"""JSON report generator for browser runs.

Collects spec and suite results as they arrive and writes a structured JSON
report when the run finishes.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

DEFAULT_REPORT_PATH = "browser-runner-report.json"


class JsonReporter:
    """Writes a JSON report file at the end of a run."""

    def __init__(self, path: Optional[Path] = None):
        """Initialize the reporter.

        Args:
            path: Output file path. Defaults to browser-runner-report.json
                in the current directory.
        """
        self.path = Path(path or DEFAULT_REPORT_PATH)
        self.specs: list[dict[str, Any]] = []
        self.suite_errors: list[dict[str, Any]] = []
        self.report: Optional[dict[str, Any]] = None
        self.saved_path: Optional[Path] = None

    def jasmine_started(self, options: dict) -> None:
        self.specs = []
        self.suite_errors = []
        self.report = None

    def spec_done(self, result: dict) -> None:
        self.specs.append(result)

    def suite_done(self, result: dict) -> None:
        if result.get("failedExpectations"):
            self.suite_errors.append(result)

    def jasmine_done(self, result: dict) -> None:
        self.report = self.generate(result)
        self.saved_path = self.save(self.report, self.path)

    def generate(self, result: dict) -> dict[str, Any]:
        """Generate a JSON report from collected results.

        Args:
            result: The run's jasmineDone payload.

        Returns:
            Report dictionary ready for JSON serialization.
        """
        passed = sum(1 for s in self.specs if s.get("status") == "passed")
        failed = sum(1 for s in self.specs if s.get("status") == "failed")
        pending = sum(1 for s in self.specs if s.get("status") == "pending")
        order = result.get("order") or {}

        return {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "status": result.get("overallStatus"),
            "incomplete_reason": result.get("incompleteReason"),
            "seed": order.get("seed") if order.get("random") else None,
            "summary": {
                "total": len(self.specs),
                "passed": passed,
                "failed": failed,
                "pending": pending,
                "duration_ms": result.get("totalTime", 0),
            },
            "specs": [
                {
                    "name": s.get("fullName", ""),
                    "status": s.get("status"),
                    "failures": [
                        e.get("message", "") for e in s.get("failedExpectations", [])
                    ],
                    "pending_reason": s.get("pendingReason") or None,
                }
                for s in self.specs
            ],
            "suite_errors": [
                {
                    "name": s.get("fullName", ""),
                    "failures": [
                        e.get("message", "") for e in s.get("failedExpectations", [])
                    ],
                }
                for s in self.suite_errors
            ],
        }

    def save(self, report: dict[str, Any], path: Path) -> Path:
        """Save report to a JSON file.

        Args:
            report: Report dictionary.
            path: Output file path.

        Returns:
            Path to the saved file.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            json.dump(report, f, indent=2, ensure_ascii=False)

        return path

    def to_json_string(self, report: dict[str, Any], pretty: bool = True) -> str:
        """Convert report to JSON string."""
        if pretty:
            return json.dumps(report, indent=2, ensure_ascii=False)
        return json.dumps(report, ensure_ascii=False)
