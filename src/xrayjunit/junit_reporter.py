"""JUnit XML report generation for Newman runs with Xray test keys."""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

from .config import ReporterConfig
from .models import ErrorInfo, Execution, KeyValue, RunSummary
from .naming import get_parent_name
from .statistics import ReportStatistics, SuiteStatistics, fold_suites
from .ticket_key import ASSERTIONS, PREREQUEST_SCRIPT, TEST_SCRIPT, resolve_test_key
from .tree import find_item_by_id

logger = logging.getLogger(__name__)

REQ_NAME_KEY = "__name__"
SENSITIVE_KEY_PARTS = ("user", "token", "password", "pwd", "passwd", "usr")
PROPERTY_VALUE_LIMIT = 70
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%f"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

# Test case categories, in the order they appear inside a suite.
TESTCASE_KINDS = (PREREQUEST_SCRIPT, ASSERTIONS, TEST_SCRIPT)
SCRIPT_TESTCASE_NAMES = {
    PREREQUEST_SCRIPT: "Pre-request Script",
    TEST_SCRIPT: "Tests",
}


@dataclass
class JUnitReport:
    """A generated report: the ``testsuites`` element and its totals."""

    root: ET.Element
    statistics: ReportStatistics

    def to_xml(self) -> str:
        return render_junit_xml(self.root)


def format_timestamp(moment: datetime) -> str:
    """Format a timestamp with millisecond precision."""
    return moment.strftime(TIMESTAMP_FORMAT)[:-3]


def merge_variables(environment: list[KeyValue], globals_: list[KeyValue]) -> list[KeyValue]:
    """Merge environment and global variables, globals winning on duplicate keys."""
    merged: dict[str, KeyValue] = {}
    for variable in [*environment, *globals_]:
        merged[variable.key] = variable
    return list(merged.values())


def is_sensitive_key(key: str) -> bool:
    """Check if a variable name looks like it holds credentials."""
    key_lower = key.lower()
    return any(part in key_lower for part in SENSITIVE_KEY_PARTS)


def _property_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)[:PROPERTY_VALUE_LIMIT]


def _has_text(value: Any) -> bool:
    return value is not None and str(value).strip() != ""


def apply_name_overrides(
    variables: list[KeyValue], execution: Execution, request_name: str, iteration_name: str
) -> tuple[list[KeyValue], str, str]:
    """Pull the reserved ``__name__`` variables out of the property list.

    ``__name__<iteration><request name>`` renames the suite for that iteration
    and ``__name__<iteration>`` renames the iteration label. Keys compare
    case-insensitively.

    Returns:
        Tuple of (remaining variables, suite name, iteration label).
    """
    iteration = execution.cursor.iteration
    item_name = (execution.item.name or "").lower()
    name_key = f"{REQ_NAME_KEY}{iteration}{item_name}"
    label_key = f"{REQ_NAME_KEY}{iteration}"

    remaining = []
    for variable in variables:
        key = variable.key.lower()
        if not key.startswith(REQ_NAME_KEY):
            remaining.append(variable)
            continue
        if not _has_text(variable.value):
            continue
        if key == name_key:
            request_name = str(variable.value)
        elif key == label_key:
            iteration_name = str(variable.value)
    return remaining, request_name, iteration_name


def _append_properties(
    testsuite: ET.Element, variables: list[KeyValue], hide_sensitive_data: bool
) -> None:
    visible = [v for v in variables if not (hide_sensitive_data and is_sensitive_key(v.key))]
    if not visible:
        return
    properties = ET.SubElement(testsuite, "properties")
    for variable in visible:
        _add_property(properties, variable.key, _property_value(variable.value))


def _hostname(execution: Execution) -> str:
    protocol = execution.url.protocol or "https"
    host = execution.url.host or ["localhost"]
    return f"{protocol}://" + ".".join(str(part) for part in host)


def _package_name(
    execution: Execution, collection: Any, iteration_name: str, separator: str
) -> str:
    item = execution.item
    if getattr(item, "parent", None) is None:
        # Snapshot not linked to the tree; use the tree node directly.
        item = find_item_by_id(collection, item.id) or item
    parent_name = get_parent_name(item, separator)

    if execution.cursor.cycles > 1:
        if parent_name:
            return f"{iteration_name}{separator}{parent_name}"
        return iteration_name
    return parent_name or ""


def _create_test_case(
    execution: Execution,
    collection: Any,
    kind: str,
    entry: Any,
    classname: str,
    suite_time: float,
) -> tuple[ET.Element, str | None]:
    """Create a test case element for a script result or an assertion.

    Returns:
        Tuple of (testcase element, ``failure``/``error`` or None).
    """
    testcase = ET.Element("testcase")
    testcase.set("classname", classname)

    if kind == ASSERTIONS:
        name = entry.assertion
        testcase.set("name", name)
        count = len(execution.assertions or [])
        testcase.set("time", f"{suite_time / count if count else 0:.3f}")
    else:
        name = SCRIPT_TESTCASE_NAMES[kind]
        testcase.set("name", name)

    properties = ET.SubElement(testcase, "properties")
    _add_property(properties, "test_key", resolve_test_key(execution, collection, name, kind))

    error: ErrorInfo | None = entry.error
    if error is None:
        return testcase, None

    if kind == ASSERTIONS:
        outcome = "failure"
        body = error.stack
    else:
        outcome = "error"
        body = error.stacktrace or error.stack
    result = ET.SubElement(testcase, outcome)
    result.set("type", error.name or "")
    result.set("message", error.message or "")
    if body:
        result.text = body
    return testcase, outcome


def _create_test_suite(
    execution: Execution,
    summary: RunSummary,
    config: ReporterConfig,
    timestamp: datetime,
) -> tuple[ET.Element, SuiteStatistics]:
    """Create the test suite element for one execution.

    Args:
        execution: Execution to report.
        summary: The run summary (variables and collection tree).
        config: Reporter options.
        timestamp: Start time assigned to this suite.

    Returns:
        Tuple of (testsuite element, its counters).
    """
    separator = config.separator
    cursor = execution.cursor
    testsuite = ET.Element("testsuite")

    variables = merge_variables(summary.environment, summary.globals)
    variables, request_name, iteration_name = apply_name_overrides(
        variables, execution, execution.item.name or "", f"Iteration {cursor.iteration}"
    )
    _append_properties(testsuite, variables, config.hide_sensitive_data)

    package = _package_name(execution, summary.collection, iteration_name, separator)
    assertions = execution.assertions or []
    suite_time_text = f"{(execution.response_time or 0) / 1000:.3f}"
    suite_time = float(suite_time_text)

    testsuite.set("id", str(cursor.iteration * cursor.length + cursor.position))
    testsuite.set("hostname", _hostname(execution))
    testsuite.set("package", package)
    testsuite.set("name", request_name)
    testsuite.set("tests", str(len(assertions)))
    testsuite.set("timestamp", format_timestamp(timestamp))
    testsuite.set("time", suite_time_text)

    stats = SuiteStatistics(
        id=cursor.iteration * cursor.length + cursor.position,
        name=request_name,
        tests=len(assertions),
        time=suite_time,
    )
    classname = f"{package}{separator}{request_name}"
    entries = {
        PREREQUEST_SCRIPT: execution.prerequest_script,
        ASSERTIONS: assertions,
        TEST_SCRIPT: execution.test_script,
    }
    for kind in TESTCASE_KINDS:
        for entry in entries[kind]:
            testcase, outcome = _create_test_case(
                execution, summary.collection, kind, entry, classname, suite_time
            )
            testsuite.append(testcase)
            stats.testcases += 1
            if outcome == "failure":
                stats.failures += 1
            elif outcome == "error":
                stats.errors += 1

    testsuite.set("failures", str(stats.failures))
    testsuite.set("errors", str(stats.errors))
    return testsuite, stats


def build_junit_report(
    summary: RunSummary,
    config: ReporterConfig | None = None,
    start_time: datetime | None = None,
) -> JUnitReport | None:
    """Build the JUnit ``testsuites`` document for a finished run.

    Each execution becomes a ``testsuite``; its pre-request script results,
    assertions and test script results become ``testcase`` elements carrying
    an Xray ``test_key`` property. Suite timestamps start at ``start_time``
    and advance by each execution's response time, so suites never overlap.

    Args:
        summary: Newman run summary.
        config: Reporter options. Defaults to ReporterConfig().
        start_time: Timestamp of the first suite. Defaults to now (local time).

    Returns:
        The report, or None if the run has no executions.
    """
    if not summary.executions:
        logger.info("Run has no executions; no JUnit report generated")
        return None

    config = config or ReporterConfig()
    timestamp = start_time or datetime.now()
    excluded_names = set(config.exclude_request)

    testsuites = ET.Element("testsuites")
    testsuites.set("name", summary.collection.name or "")
    testsuites.set(
        "tests", str(summary.total_tests) if summary.total_tests is not None else "unknown"
    )

    suites: list[SuiteStatistics] = []
    excluded = 0
    for execution in summary.executions:
        if execution.item.name in excluded_names:
            logger.debug("Excluding request %r from the report", execution.item.name)
            excluded += 1
            continue

        testsuite, suite_stats = _create_test_suite(execution, summary, config, timestamp)
        testsuites.append(testsuite)
        suites.append(suite_stats)
        timestamp += timedelta(milliseconds=execution.response_time or 0)

    statistics = fold_suites(suites, excluded=excluded)
    if config.aggregate:
        testsuites.set("failures", str(statistics.failures))
        testsuites.set("errors", str(statistics.errors))

    return JUnitReport(root=testsuites, statistics=statistics)


def render_junit_xml(root: ET.Element) -> str:
    """Serialize a report element as indented XML without self-closing tags."""
    ET.indent(root, space="  ")
    body = ET.tostring(root, encoding="unicode", short_empty_elements=False)
    return f"{XML_DECLARATION}\n{body}\n"


def save_junit_xml(report: JUnitReport, output_path: Path) -> Path:
    """Write a report to ``output_path``, creating parent directories.

    Returns:
        The path written to.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(report.to_xml(), encoding="utf-8")
    logger.info("JUnit XML report written to %s", output_path)
    return output_path


def _add_property(properties: ET.Element, name: str, value: str) -> None:
    """Add a property element to the properties section.

    Args:
        properties: Properties element.
        name: Property name.
        value: Property value.
    """
    prop = ET.SubElement(properties, "property")
    prop.set("name", name)
    prop.set("value", value)
