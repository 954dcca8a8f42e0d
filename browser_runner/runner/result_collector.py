"""Result collector for browser runs.

Tallies spec and suite results as reporter events arrive.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class CollectedSpec:
    """A finished spec."""
    full_name: str
    status: str
    failures: list[str] = field(default_factory=list)
    pending_reason: Optional[str] = None


@dataclass
class CollectedResult:
    """Aggregated spec results for one run."""
    specs: list[CollectedSpec] = field(default_factory=list)
    suite_errors: list[str] = field(default_factory=list)
    total_defined: int = 0

    def count(self, status: str) -> int:
        return sum(1 for s in self.specs if s.status == status)

    @property
    def passed_count(self) -> int:
        return self.count("passed")

    @property
    def failed_count(self) -> int:
        return self.count("failed")

    @property
    def pending_count(self) -> int:
        return self.count("pending")

    @property
    def failed_specs(self) -> list[str]:
        return [s.full_name for s in self.specs if s.status == "failed"]

    def to_dict(self) -> dict:
        return {
            "total": len(self.specs),
            "total_defined": self.total_defined,
            "passed": self.passed_count,
            "failed": self.failed_count,
            "pending": self.pending_count,
            "suite_errors": list(self.suite_errors),
        }


class ResultCollector:
    """Reporter that records results into a CollectedResult."""

    def __init__(self):
        self.result = CollectedResult()

    def jasmine_started(self, options: dict) -> None:
        self.result = CollectedResult(total_defined=options.get("totalSpecsDefined", 0))

    def spec_done(self, result: dict) -> None:
        self.result.specs.append(CollectedSpec(
            full_name=result.get("fullName", ""),
            status=result.get("status", ""),
            failures=[e.get("message", "") for e in result.get("failedExpectations", [])],
            pending_reason=result.get("pendingReason") or None,
        ))

    def suite_done(self, result: dict) -> None:
        for expectation in result.get("failedExpectations", []):
            self.result.suite_errors.append(
                f"{result.get('fullName', '')}: {expectation.get('message', '')}"
            )
