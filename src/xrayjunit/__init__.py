"""Newman run summaries to JUnit XML with Xray test keys."""

from .config import ReporterConfig, load_config
from .junit_reporter import JUnitReport, build_junit_report, render_junit_xml, save_junit_xml
from .loader import load_collection, load_run_summary
from .models import RunSummary
from .ticket_key import resolve_test_key

__version__ = "0.1.0"

__all__ = [
    "JUnitReport",
    "ReporterConfig",
    "RunSummary",
    "build_junit_report",
    "load_collection",
    "load_config",
    "load_run_summary",
    "render_junit_xml",
    "resolve_test_key",
    "save_junit_xml",
]
