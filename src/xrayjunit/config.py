"""Reporter options and configuration file loading."""

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .naming import SEPARATOR

DEFAULT_EXPORT_NAME = "newman-run-report-full.xml"

VALID_CONFIG_SUFFIXES = (".yaml", ".yml", ".toml")

# ${VAR} or ${VAR:-default}
_ENV_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-(.*?))?\}")


class ReporterConfig(BaseModel):
    """Options understood by the JUnit reporter.

    Every option also accepts the spelling used by the Newman reporter flags,
    e.g. ``excludeRequest`` or ``xunit-xray-excludeRequest``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    exclude_request: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices(
            "exclude_request", "excludeRequest", "xunit-xray-excludeRequest"
        ),
        description="Request names to leave out of the report",
    )
    hide_sensitive_data: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "hide_sensitive_data", "hideSensitiveData", "xunit-xray-hideSensitiveData"
        ),
        description="Drop user, token and password variables from suite properties",
    )
    aggregate: bool = Field(
        default=False,
        validation_alias=AliasChoices("aggregate", "xunit-xray-aggregate"),
        description="Write total failures and errors on the testsuites element",
    )
    export: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "export", "xunit-xray-export", "reporter-xunit-xray-export", "xunitXrayExport"
        ),
        description="File or directory to write the report to",
    )
    separator: str = Field(
        default=SEPARATOR,
        min_length=1,
        description="Token joining folder names in package and classname",
    )

    @field_validator("exclude_request", mode="before")
    @classmethod
    def _split_names(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [name for name in value.split(",") if name]
        return value

    @field_validator("export", mode="before")
    @classmethod
    def _blank_export(cls, value: Any) -> Any:
        if isinstance(value, Path):
            return str(value)
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def resolve_export_path(self) -> Path:
        """Return the report file path, applying the default file name.

        A missing export, an existing directory, or a path ending in a
        separator all resolve to ``newman-run-report-full.xml`` inside it.
        """
        if self.export is None:
            return Path(DEFAULT_EXPORT_NAME)
        export = Path(self.export)
        if self.export.endswith(("/", os.sep)) or export.is_dir():
            return export / DEFAULT_EXPORT_NAME
        return export


def expand_env_vars(value: Any) -> Any:
    """Expand ``${VAR}`` and ``${VAR:-default}`` in strings, dicts and lists.

    Raises:
        ValueError: If a variable without default is not set.
    """
    if isinstance(value, dict):
        return {key: expand_env_vars(item) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_env_vars(item) for item in value]
    if not isinstance(value, str):
        return value

    def replace(match: re.Match) -> str:
        name, default = match.group(1), match.group(2)
        if name in os.environ:
            return os.environ[name]
        if default is not None:
            return default
        raise ValueError(
            f"Required environment variable '{name}' is not set. "
            f"Set it or provide a default with ${{{name}:-default}}."
        )

    return _ENV_PATTERN.sub(replace, value)


def parse_config_text(content: str, suffix: str) -> dict[str, Any]:
    """Parse YAML or TOML configuration text into a dictionary."""
    if suffix in (".yaml", ".yml"):
        data = yaml.safe_load(content) or {}
    elif suffix == ".toml":
        import tomllib

        data = tomllib.loads(content)
    else:
        raise ValueError(f"Unsupported file format: {suffix}")

    if not isinstance(data, dict):
        raise ValueError("Configuration must be a mapping of option names to values")
    # Options may live at the top level or under a "reporter" section.
    section = data.get("reporter")
    return section if isinstance(section, dict) else data


def load_config(config_path: str | Path, **overrides: Any) -> ReporterConfig:
    """Load reporter options from a YAML or TOML file.

    Args:
        config_path: Path to the configuration file.
        **overrides: Options that take precedence over the file (None is ignored).

    Returns:
        Validated ReporterConfig.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file cannot be parsed or references an unset variable.
        pydantic.ValidationError: If an option has the wrong type.
    """
    path = Path(config_path)
    raw = parse_config_text(path.read_text(encoding="utf-8"), path.suffix)
    data = expand_env_vars(raw)
    data.update({key: value for key, value in overrides.items() if value is not None})
    return ReporterConfig.model_validate(data)
