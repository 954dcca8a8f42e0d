"""Tests for the result collector."""

from browser_runner.runner.result_collector import ResultCollector


def test_tallies_spec_statuses():
    collector = ResultCollector()

    collector.jasmine_started({"totalSpecsDefined": 4})
    collector.spec_done({"fullName": "a passes", "status": "passed", "failedExpectations": []})
    collector.spec_done({"fullName": "a fails", "status": "failed",
                         "failedExpectations": [{"message": "boom"}]})
    collector.spec_done({"fullName": "a waits", "status": "pending", "pendingReason": ""})

    result = collector.result
    assert result.failed_specs == ["a fails"]
    assert result.specs[1].failures == ["boom"]
    assert result.specs[2].pending_reason is None
    assert result.to_dict() == {
        "total": 3, "total_defined": 4, "passed": 1, "failed": 1, "pending": 1,
        "suite_errors": [],
    }


def test_suite_errors_are_prefixed_with_suite_name():
    collector = ResultCollector()

    collector.suite_done({"fullName": "top", "failedExpectations": [{"message": "afterAll"}]})

    assert collector.result.suite_errors == ["top: afterAll"]


def test_jasmine_started_resets_previous_run():
    collector = ResultCollector()
    collector.spec_done({"fullName": "old", "status": "passed"})

    collector.jasmine_started({})

    assert collector.result.specs == []
    assert collector.result.total_defined == 0
