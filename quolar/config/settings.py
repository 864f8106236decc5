"""
Configuration system using Pydantic for type-safe settings management.

This module provides configuration classes for the capability providers
(test framework, tickets, documentation, analytics, version control) and
for workflow behaviour, plus YAML loading with environment variable
interpolation.

Configuration files may use either snake_case keys or the camelCase keys
common in JSON configuration files::

    testFramework:
      provider: playwright
      testDir: ./tests/e2e
    tickets:
      provider: linear
      workspace: my-company
    workflow:
      autoHealingThreshold: 80
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, HttpUrl, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from quolar.exceptions import ConfigurationError

# Config file names searched by ``find_config_file`` (in order of priority)
CONFIG_FILE_NAMES = (
    "quolar.config.yaml",
    "quolar.config.yml",
    "quolar.config.json",
    ".quolar/config.yaml",
)

_ADAPTER_PATTERN = re.compile(r"^[A-Za-z_][\w.]*:[A-Za-z_][\w.]*$")
_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


class ProviderSectionConfig(BaseModel):
    """Settings shared by every provider section.

    ``adapter`` points at the adapter class as ``"package.module:ClassName"``.
    When omitted, the adapter is looked up in the ``quolar.providers``
    entry-point group. ``options`` is handed to the adapter untouched.
    """

    adapter: str | None = Field(default=None, description="Adapter class as 'package.module:ClassName'")
    options: dict[str, Any] = Field(default_factory=dict, description="Adapter-specific options")

    @field_validator("adapter")
    @classmethod
    def validate_adapter_path(cls, value: str | None) -> str | None:
        """Ensure the adapter reference has the ``module:attr`` form."""
        if value is not None and not _ADAPTER_PATTERN.match(value):
            raise ValueError(f"adapter must look like 'package.module:ClassName', got: {value}")
        return value

    @model_validator(mode="after")
    def validate_custom_adapter(self) -> ProviderSectionConfig:
        """A ``custom`` provider has nothing to look up and needs an adapter path."""
        if getattr(self, "provider", None) == "custom" and self.adapter is None:
            raise ValueError("adapter is required when provider='custom'")
        return self


class TestFrameworkConfig(ProviderSectionConfig):
    """Test framework configuration."""

    __test__ = False

    provider: Literal["playwright", "vitest", "cypress", "custom"] = Field(..., description="Test framework")
    config: str | None = Field(default=None, description="Path to the framework's own config file")
    test_dir: str = Field(default="./tests", description="Directory for generated tests")
    page_objects_dir: str | None = Field(default=None, description="Directory holding page objects")


class TicketsConfig(ProviderSectionConfig):
    """Ticket system configuration."""

    provider: Literal["linear", "jira", "github-issues", "custom"] = Field(..., description="Ticket system")
    workspace: str | None = Field(default=None, description="Linear workspace slug")
    project_key: str | None = Field(default=None, description="Jira project key")
    owner: str | None = Field(default=None, description="GitHub Issues repository owner")
    repo: str | None = Field(default=None, description="GitHub Issues repository name")


class DocumentationConfig(ProviderSectionConfig):
    """Documentation system configuration (optional)."""

    provider: Literal["quoth", "custom"] | None = Field(default=None, description="Documentation system")
    endpoint: HttpUrl | None = Field(default=None, description="Documentation service endpoint")


class AnalyticsConfig(ProviderSectionConfig):
    """Analytics system configuration (optional)."""

    provider: Literal["exolar", "datadog", "custom"] | None = Field(default=None, description="Analytics system")
    endpoint: HttpUrl | None = Field(default=None, description="Analytics service endpoint")


class VCSConfig(ProviderSectionConfig):
    """Version control configuration."""

    provider: Literal["github", "gitlab", "bitbucket"] = Field(default="github", description="VCS host")
    ci_system: Literal["github-actions", "gitlab-ci", "jenkins"] | None = Field(
        default=None, description="CI system running the generated tests"
    )


class WorkflowConfig(BaseModel):
    """Workflow behavior configuration."""

    max_retries: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Retry attempts for recoverable failures (accepted, not enforced by the engine)",
    )
    auto_healing_threshold: float = Field(
        default=70, ge=0, le=100, description="Minimum confidence (%) to accept a healed test"
    )
    parallel_agents: int = Field(default=3, ge=1, le=10, description="Maximum concurrent healing attempts")


class QuolarSettings(BaseSettings):
    """Main Quolar settings.

    Combines all configuration sections and provides loading from YAML (or
    JSON) files with environment variable interpolation. ``QUOLAR_`` prefixed
    environment variables take precedence over the file, e.g.
    ``QUOLAR_WORKFLOW__AUTO_HEALING_THRESHOLD=85``.
    """

    model_config = SettingsConfigDict(
        env_prefix="QUOLAR_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    test_framework: TestFrameworkConfig
    tickets: TicketsConfig
    documentation: DocumentationConfig | None = None
    analytics: AnalyticsConfig | None = None
    vcs: VCSConfig = Field(default_factory=VCSConfig)
    workflow: WorkflowConfig = Field(default_factory=WorkflowConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Environment variables take precedence over values from the config file."""
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @property
    def documentation_enabled(self) -> bool:
        """True when a documentation provider is configured."""
        return self.documentation is not None and self.documentation.provider is not None

    @property
    def analytics_enabled(self) -> bool:
        """True when an analytics provider is configured."""
        return self.analytics is not None and self.analytics.provider is not None

    @classmethod
    def load(cls, config_path: str | None = None, cwd: str | Path | None = None) -> QuolarSettings:
        """Load settings from an explicit path or from the first config file found.

        Args:
            config_path: Explicit configuration file. Takes precedence.
            cwd: Directory to search when no path is given (defaults to the
                current working directory).

        Returns:
            QuolarSettings instance

        Raises:
            ConfigurationError: If no configuration file is found or it is invalid
        """
        if config_path is not None:
            return cls.from_yaml(config_path)

        found = find_config_file(cwd)
        if found is None:
            raise ConfigurationError(
                f"No configuration file found. Create one of: {', '.join(CONFIG_FILE_NAMES)}"
            )
        return cls.from_yaml(str(found))

    @classmethod
    def from_yaml(cls, config_path: str) -> QuolarSettings:
        """Load settings from YAML file with environment variable interpolation.

        Supports ${VAR_NAME} syntax for environment variable substitution.
        JSON files load through the same path since JSON is valid YAML.

        Args:
            config_path: Path to YAML or JSON configuration file

        Returns:
            QuolarSettings instance

        Raises:
            ConfigurationError: If config file is invalid or missing required fields
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_file, encoding="utf-8") as f:
                yaml_content = f.read()
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file: {config_path}") from e

        try:
            yaml_content = cls._interpolate_env_vars(yaml_content)
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment variable reference in config: {e}") from e

        try:
            config_dict = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in {config_path}: {e}") from e

        if not isinstance(config_dict, dict):
            raise ConfigurationError("Configuration must be a YAML object, not a list or scalar")

        return cls.from_dict(config_dict)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> QuolarSettings:
        """Validate a raw configuration mapping.

        Args:
            config_dict: Parsed configuration, snake_case or camelCase keys

        Returns:
            QuolarSettings instance

        Raises:
            ConfigurationError: If validation fails
        """
        try:
            return cls(**_normalize_keys(config_dict))
        except ValidationError as e:
            raise ConfigurationError(f"Failed to validate configuration: {e}") from e
        except TypeError as e:
            raise ConfigurationError(f"Missing or invalid configuration fields: {e}") from e

    @staticmethod
    def _interpolate_env_vars(content: str) -> str:
        """Interpolate ${VAR_NAME} placeholders with environment variables.

        Supports two syntaxes:
        - ${VAR_NAME} - Required environment variable (raises if not set)
        - ${VAR_NAME:-default} - Optional with default value

        YAML comment lines (starting with #) are left unchanged.

        Raises:
            ValueError: If a required environment variable is not set
        """
        pattern = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            default_value = match.group(2)
            value = os.getenv(var_name)

            if value is not None:
                return value
            elif default_value is not None:
                return default_value
            else:
                raise ValueError(f"Environment variable {var_name} is not set")

        def process_line(line: str) -> str:
            if line.lstrip().startswith("#"):
                return line
            return pattern.sub(replace_var, line)

        return "\n".join(process_line(line) for line in content.split("\n"))


def find_config_file(cwd: str | Path | None = None) -> Path | None:
    """Return the first configuration file found in ``cwd``.

    Args:
        cwd: Directory to search. Defaults to the current working directory.

    Returns:
        Path of the first existing file from ``CONFIG_FILE_NAMES``, or None.
    """
    base = Path(cwd) if cwd is not None else Path.cwd()
    for name in CONFIG_FILE_NAMES:
        candidate = base / name
        if candidate.is_file():
            return candidate
    return None


def _normalize_keys(value: Any) -> Any:
    """Convert camelCase mapping keys to snake_case, recursively.

    Adapter ``options`` are passed through as written.
    """
    if isinstance(value, dict):
        normalized: dict[str, Any] = {}
        for key, item in value.items():
            new_key = _CAMEL_BOUNDARY.sub("_", key).lower() if isinstance(key, str) else key
            normalized[new_key] = item if new_key == "options" else _normalize_keys(item)
        return normalized
    if isinstance(value, list):
        return [_normalize_keys(item) for item in value]
    return value
