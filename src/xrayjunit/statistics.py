"""Aggregate counters for a generated JUnit report.

The synthesizer returns one :class:`SuiteStatistics` per emitted test suite
and folds them into a :class:`ReportStatistics`, instead of mutating run-level
counters while it iterates.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class SuiteStatistics:
    """Counts for a single ``testsuite`` element."""

    id: int
    name: str
    tests: int = 0
    testcases: int = 0
    failures: int = 0
    errors: int = 0
    time: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "tests": self.tests,
            "testcases": self.testcases,
            "failures": self.failures,
            "errors": self.errors,
            "time": round(self.time, 3),
        }


@dataclass
class ReportStatistics:
    """Run-level totals across all emitted suites."""

    suites: int = 0
    tests: int = 0
    testcases: int = 0
    failures: int = 0
    errors: int = 0
    excluded: int = 0
    time: float = 0.0
    per_suite: list[SuiteStatistics] = field(default_factory=list)

    def add_suite(self, suite: SuiteStatistics) -> "ReportStatistics":
        """Fold one suite into the totals and return self."""
        self.suites += 1
        self.tests += suite.tests
        self.testcases += suite.testcases
        self.failures += suite.failures
        self.errors += suite.errors
        self.time += suite.time
        self.per_suite.append(suite)
        return self

    @property
    def has_failures(self) -> bool:
        """Check if any suite recorded a failure or an error."""
        return self.failures > 0 or self.errors > 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "suites": self.suites,
            "tests": self.tests,
            "testcases": self.testcases,
            "failures": self.failures,
            "errors": self.errors,
            "excluded": self.excluded,
            "time": round(self.time, 3),
            "per_suite": [suite.to_dict() for suite in self.per_suite],
        }


def fold_suites(suites: list[SuiteStatistics], excluded: int = 0) -> ReportStatistics:
    """Build report totals from per-suite counts.

    Args:
        suites: Suite statistics in report order.
        excluded: Number of executions skipped by the exclusion list.

    Returns:
        ReportStatistics with the summed counters.
    """
    stats = ReportStatistics(excluded=excluded)
    for suite in suites:
        stats.add_suite(suite)
    return stats
