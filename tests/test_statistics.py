"""Tests for report statistics."""

import pytest

from xrayjunit.junit_reporter import build_junit_report
from xrayjunit.models import RunSummary
from xrayjunit.statistics import ReportStatistics, SuiteStatistics, fold_suites


class TestSuiteStatistics:
    """Tests for per-suite counts."""

    def test_defaults(self) -> None:
        """Test counters start at zero."""
        suite = SuiteStatistics(id=3, name="Login")
        assert (suite.tests, suite.testcases, suite.failures, suite.errors) == (0, 0, 0, 0)
        assert suite.time == 0.0

    def test_serialization(self) -> None:
        """Test to_dict rounds the time to milliseconds."""
        suite = SuiteStatistics(
            id=0, name="Orders", tests=2, testcases=4, failures=1, errors=0, time=0.25049
        )
        assert suite.to_dict() == {
            "id": 0,
            "name": "Orders",
            "tests": 2,
            "testcases": 4,
            "failures": 1,
            "errors": 0,
            "time": 0.25,
        }


class TestFoldSuites:
    """Tests for folding suites into report totals."""

    def test_sums_counters(self) -> None:
        """Test every counter is summed across suites."""
        stats = fold_suites(
            [
                SuiteStatistics(id=0, name="a", tests=2, testcases=4, failures=1, time=0.25),
                SuiteStatistics(id=1, name="b", tests=0, testcases=1, errors=1, time=0.1),
            ],
            excluded=2,
        )
        assert stats.suites == 2
        assert stats.tests == 2
        assert stats.testcases == 5
        assert stats.failures == 1
        assert stats.errors == 1
        assert stats.excluded == 2
        assert stats.time == pytest.approx(0.35)
        assert [s.name for s in stats.per_suite] == ["a", "b"]

    def test_empty(self) -> None:
        """Test folding nothing yields zeroed totals."""
        stats = fold_suites([])
        assert stats == ReportStatistics()
        assert not stats.has_failures

    def test_add_suite_returns_self(self) -> None:
        """Test add_suite can be chained."""
        stats = ReportStatistics()
        assert stats.add_suite(SuiteStatistics(id=0, name="a")) is stats
        assert stats.suites == 1

    @pytest.mark.parametrize(
        "failures,errors,expected",
        [(0, 0, False), (1, 0, True), (0, 1, True)],
    )
    def test_has_failures(self, failures: int, errors: int, expected: bool) -> None:
        """Test failures and errors both count as a failed report."""
        stats = fold_suites(
            [SuiteStatistics(id=0, name="a", failures=failures, errors=errors)]
        )
        assert stats.has_failures is expected

    def test_report_serialization(self) -> None:
        """Test the report dict nests the per-suite entries."""
        data = fold_suites([SuiteStatistics(id=0, name="a", time=0.1234)]).to_dict()
        assert data["suites"] == 1
        assert data["time"] == 0.123
        assert data["per_suite"][0]["name"] == "a"


class TestReportIntegration:
    """Tests for statistics attached to a generated report."""

    def test_statistics_match_xml(self, summary_data, start_time) -> None:
        """Test the report totals agree with the emitted suites."""
        report = build_junit_report(RunSummary.from_dict(summary_data), start_time=start_time)
        assert report is not None

        stats = report.statistics
        assert stats.suites == len(report.root.findall("testsuite"))
        assert [s.id for s in stats.per_suite] == [0, 1]
        assert stats.failures == 1
        assert stats.errors == 1
        assert stats.time == pytest.approx(0.35)
        assert stats.has_failures
