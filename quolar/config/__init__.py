"""Configuration system for Quolar.

This package provides type-safe configuration management using Pydantic,
including settings for the capability providers and workflow behaviour.

Key Components:
    - QuolarSettings: Main configuration container with YAML loading support
    - TestFrameworkConfig, TicketsConfig, DocumentationConfig,
      AnalyticsConfig, VCSConfig: Provider sections
    - WorkflowConfig: Healing threshold, retries, concurrency

Example:
    >>> from quolar.config import QuolarSettings
    >>> settings = QuolarSettings.from_yaml("quolar.config.yaml")
    >>> settings.workflow.auto_healing_threshold
    70.0
"""

from quolar.config.settings import (
    CONFIG_FILE_NAMES,
    AnalyticsConfig,
    DocumentationConfig,
    QuolarSettings,
    TestFrameworkConfig,
    TicketsConfig,
    VCSConfig,
    WorkflowConfig,
    find_config_file,
)

__all__ = [
    "CONFIG_FILE_NAMES",
    "AnalyticsConfig",
    "DocumentationConfig",
    "QuolarSettings",
    "TestFrameworkConfig",
    "TicketsConfig",
    "VCSConfig",
    "WorkflowConfig",
    "find_config_file",
]
