"""Reporter configuration validation with detailed error messages and suggestions."""

import difflib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .config import VALID_CONFIG_SUFFIXES, ReporterConfig, expand_env_vars, parse_config_text


@dataclass
class ConfigValidationError:
    """A validation error with context and suggestions."""

    field: str
    error: str
    line_number: int | None = None
    suggestion: str | None = None


@dataclass
class ValidationResult:
    """Result of configuration validation."""

    valid: bool
    errors: list[ConfigValidationError]
    warnings: list[ConfigValidationError]

    @property
    def has_errors(self) -> bool:
        """Check if there are any errors."""
        return len(self.errors) > 0

    @property
    def has_warnings(self) -> bool:
        """Check if there are any warnings."""
        return len(self.warnings) > 0


def known_option_names() -> list[str]:
    """All option spellings ReporterConfig accepts."""
    names = []
    for field_name, info in ReporterConfig.model_fields.items():
        names.append(field_name)
        alias = info.validation_alias
        choices = getattr(alias, "choices", None)
        if choices:
            names.extend(choice for choice in choices if isinstance(choice, str))
    return sorted(set(names))


class ConfigValidator:
    """Validates YAML/TOML reporter configuration files."""

    def __init__(self) -> None:
        self.errors: list[ConfigValidationError] = []
        self.warnings: list[ConfigValidationError] = []

    def _result(self) -> ValidationResult:
        return ValidationResult(
            valid=not self.has_errors, errors=self.errors, warnings=self.warnings
        )

    def validate_file(self, config_path: str | Path) -> ValidationResult:
        """Validate a configuration file.

        Args:
            config_path: Path to the configuration file.

        Returns:
            ValidationResult with errors and warnings.
        """
        self.errors = []
        self.warnings = []
        path = Path(config_path)

        if not path.exists():
            self.errors.append(
                ConfigValidationError(
                    field="file",
                    error=f"Configuration file not found: {path}",
                    suggestion="Check the file path and ensure the file exists.",
                )
            )
            return self._result()

        if path.suffix not in VALID_CONFIG_SUFFIXES:
            self.errors.append(
                ConfigValidationError(
                    field="file",
                    error=f"Unsupported file extension: {path.suffix}",
                    suggestion="Use a .yaml, .yml or .toml configuration file.",
                )
            )
            return self._result()

        try:
            raw_config = parse_config_text(path.read_text(encoding="utf-8"), path.suffix)
        except yaml.YAMLError as e:
            line_num = None
            error_msg = str(e)
            mark = getattr(e, "problem_mark", None)
            if mark is not None:
                line_num = mark.line + 1
                error_msg = f"YAML syntax error at line {line_num}: {getattr(e, 'problem', e)}"
            self.errors.append(
                ConfigValidationError(
                    field="syntax",
                    error=error_msg,
                    line_number=line_num,
                    suggestion="Check indentation and quote values containing ':' or '#'.",
                )
            )
            return self._result()
        except Exception as e:
            self.errors.append(
                ConfigValidationError(
                    field="parsing",
                    error=f"Failed to parse configuration file: {e}",
                    suggestion="Ensure the file is a YAML or TOML mapping of options.",
                )
            )
            return self._result()

        self._validate_keys(raw_config)
        self._validate_exclude_request(raw_config)

        try:
            expanded = expand_env_vars(raw_config)
        except ValueError as e:
            self.errors.append(
                ConfigValidationError(
                    field="environment",
                    error=str(e),
                    suggestion="Export the variable or give it a default: ${VAR:-value}",
                )
            )
            return self._result()

        self._validate_with_pydantic(expanded)
        return self._result()

    def _validate_keys(self, config: dict[str, Any]) -> None:
        """Warn about options the reporter does not recognise."""
        known = known_option_names()
        for key in config:
            if key in known:
                continue
            matches = difflib.get_close_matches(str(key), known, n=1)
            self.warnings.append(
                ConfigValidationError(
                    field=str(key),
                    error=f"Unknown option: '{key}' (ignored)",
                    suggestion=f"Did you mean '{matches[0]}'?" if matches else None,
                )
            )

    def _validate_exclude_request(self, config: dict[str, Any]) -> None:
        """Flag request names that will never match because of padding."""
        value = next(
            (config[key] for key in ("exclude_request", "excludeRequest") if key in config),
            None,
        )
        names = value.split(",") if isinstance(value, str) else value
        if not isinstance(names, list):
            return
        for name in names:
            if isinstance(name, str) and name != name.strip():
                self.warnings.append(
                    ConfigValidationError(
                        field="exclude_request",
                        error=f"Request name '{name}' has leading or trailing spaces",
                        suggestion="Names are matched exactly; remove spaces around commas.",
                    )
                )

    def _validate_with_pydantic(self, config: dict[str, Any]) -> None:
        try:
            ReporterConfig.model_validate(config)
        except ValidationError as e:
            for error in e.errors():
                field_path = ".".join(str(loc) for loc in error["loc"])
                self.errors.append(
                    ConfigValidationError(
                        field=field_path,
                        error=error["msg"],
                        suggestion=self._get_pydantic_error_suggestion(error),
                    )
                )

    def _get_pydantic_error_suggestion(self, error: dict[str, Any]) -> str | None:
        error_type = error.get("type", "")
        field = error.get("loc", [])[-1] if error.get("loc") else ""

        suggestions = {
            "bool": f"'{field}' should be true or false",
            "string_too_short": f"'{field}' must not be empty",
            "list_type": f"'{field}' should be a comma-separated string or a list",
            "string_type": f"'{field}' should be a file or directory path",
        }
        for error_pattern, suggestion in suggestions.items():
            if error_pattern in error_type:
                return suggestion
        return None

    @property
    def has_errors(self) -> bool:
        """Check if there are any validation errors."""
        return len(self.errors) > 0


def validate_config(config_path: str | Path) -> ValidationResult:
    """Validate a configuration file.

    Args:
        config_path: Path to the configuration file.

    Returns:
        ValidationResult with errors and warnings.
    """
    validator = ConfigValidator()
    return validator.validate_file(config_path)
