"""Tests for the command line entry point."""

import json
import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

from xrayjunit.cli import build_parser, main
from xrayjunit.config import DEFAULT_EXPORT_NAME


@pytest.fixture
def summary_path(tmp_path: Path, summary_data) -> Path:
    path = tmp_path / "summary.json"
    path.write_text(json.dumps(summary_data), encoding="utf-8")
    return path


class TestParser:
    """Tests for argument parsing."""

    def test_flags_default_to_unset(self) -> None:
        """Test boolean flags stay None so config files are not overridden."""
        args = build_parser().parse_args(["summary.json"])
        assert args.hide_sensitive_data is None
        assert args.aggregate is None
        assert args.separator is None

    def test_flags_set(self) -> None:
        """Test boolean flags are True when given."""
        args = build_parser().parse_args(["s.json", "--aggregate", "--hide-sensitive-data"])
        assert args.aggregate is True
        assert args.hide_sensitive_data is True


class TestMain:
    """Tests for main()."""

    def test_writes_report(self, tmp_path: Path, summary_path: Path) -> None:
        """Test a report is written to the export path."""
        output = tmp_path / "out" / "report.xml"
        assert main([str(summary_path), "--export", str(output), "--aggregate"]) == 0

        root = ET.parse(output).getroot()
        assert root.tag == "testsuites"
        assert root.get("failures") == "1"
        assert len(root.findall("testsuite")) == 2

    def test_export_directory(self, tmp_path: Path, summary_path: Path) -> None:
        """Test exporting into an existing directory uses the default file name."""
        assert main([str(summary_path), "--export", str(tmp_path)]) == 0
        assert (tmp_path / DEFAULT_EXPORT_NAME).exists()

    def test_exclude_and_hide(self, tmp_path: Path, summary_path: Path) -> None:
        """Test command line options reach the report."""
        output = tmp_path / "report.xml"
        code = main(
            [
                str(summary_path),
                "--export",
                str(output),
                "--exclude-request",
                "Login",
                "--hide-sensitive-data",
            ]
        )
        assert code == 0
        root = ET.parse(output).getroot()
        suites = root.findall("testsuite")
        assert [s.get("name") for s in suites] == ["Create Order PROJ-7"]
        names = [p.get("name") for p in suites[0].findall("properties/property")]
        assert "userToken" not in names

    def test_config_file_with_override(self, tmp_path: Path, summary_path: Path) -> None:
        """Test command line flags win over the config file."""
        config = tmp_path / "reporter.yaml"
        config.write_text(f"export: {tmp_path / 'from-config.xml'}\nseparator: '::'\n")
        output = tmp_path / "from-cli.xml"
        assert main([str(summary_path), "--config", str(config), "--export", str(output)]) == 0

        assert output.exists()
        assert not (tmp_path / "from-config.xml").exists()
        suite = ET.parse(output).getroot().find("testsuite")
        assert suite.find("testcase").get("classname") == "Orders::Create Order PROJ-7"

    def test_invalid_config(
        self, tmp_path: Path, summary_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test an invalid config file exits with status 1."""
        config = tmp_path / "reporter.yaml"
        config.write_text("aggregate: sometimes\n")
        assert main([str(summary_path), "--config", str(config)]) == 1
        assert "Error" in capsys.readouterr().out

    def test_missing_summary(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test a missing summary file exits with status 1."""
        assert main([str(tmp_path / "missing.json")]) == 1
        assert "not found" in capsys.readouterr().out

    def test_no_executions(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test an empty run writes nothing and succeeds."""
        summary = tmp_path / "summary.json"
        summary.write_text(json.dumps({"collection": {}, "run": {"executions": []}}))
        output = tmp_path / "report.xml"
        assert main([str(summary), "--export", str(output)]) == 0
        assert not output.exists()
        assert "No executions" in capsys.readouterr().out
