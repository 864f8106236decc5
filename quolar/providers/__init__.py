"""Capability provider interfaces and the adapter registry."""

from quolar.providers.base import (
    AnalyticsProvider,
    DocsProvider,
    TestFrameworkProvider,
    TicketProvider,
    VCSProvider,
)
from quolar.providers.registry import load_providers

__all__ = [
    "AnalyticsProvider",
    "DocsProvider",
    "TestFrameworkProvider",
    "TicketProvider",
    "VCSProvider",
    "load_providers",
]
