"""Registry for creating capability providers from configuration.

Each configuration section names a provider (``linear``, ``playwright``,
``github``...). The adapter class for it is resolved in this order:

1. ``adapter: "package.module:ClassName"`` in the section, or
2. the ``quolar.providers`` entry-point group, under ``<kind>.<provider>``
   (e.g. ``tickets.linear``), so adapter packages can register themselves::

       [project.entry-points."quolar.providers"]
       "tickets.linear" = "quolar_linear:LinearTicketProvider"

The class is instantiated with its configuration section and must implement
the matching capability interface.
"""

import importlib
from importlib.metadata import entry_points
from typing import Any

import structlog

from quolar.config.settings import ProviderSectionConfig, QuolarSettings
from quolar.engine.types import WorkflowProviders
from quolar.exceptions import ProviderLoadError
from quolar.providers.base import (
    AnalyticsProvider,
    DocsProvider,
    TestFrameworkProvider,
    TicketProvider,
    VCSProvider,
)

log = structlog.get_logger(__name__)

ENTRY_POINT_GROUP = "quolar.providers"

# Capability kind -> interface every adapter of that kind must implement
PROVIDER_INTERFACES: dict[str, type] = {
    "tickets": TicketProvider,
    "documentation": DocsProvider,
    "test_framework": TestFrameworkProvider,
    "vcs": VCSProvider,
    "analytics": AnalyticsProvider,
}


def _import_adapter(path: str, kind: str, provider: str) -> Any:
    """Import ``package.module:ClassName``."""
    module_name, _, attr_path = path.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ProviderLoadError(
            f"Cannot import adapter module '{module_name}': {e}",
            kind=kind,
            provider=provider,
            suggestion="Check that the adapter package is installed in this environment",
        ) from e

    target: Any = module
    for attr in attr_path.split("."):
        try:
            target = getattr(target, attr)
        except AttributeError as e:
            raise ProviderLoadError(
                f"Adapter '{path}' not found",
                kind=kind,
                provider=provider,
                suggestion=f"Check the class name in module '{module_name}'",
            ) from e
    return target


def _lookup_entry_point(kind: str, provider: str) -> Any:
    name = f"{kind}.{provider}"
    matches = entry_points(group=ENTRY_POINT_GROUP, name=name)
    for entry_point in matches:
        try:
            return entry_point.load()
        except Exception as e:
            raise ProviderLoadError(
                f"Failed to load entry point '{name}': {e}",
                kind=kind,
                provider=provider,
            ) from e

    raise ProviderLoadError(
        f"No adapter registered for '{name}'",
        kind=kind,
        provider=provider,
        suggestion=(
            f"Install an adapter package that registers '{name}' in the "
            f"'{ENTRY_POINT_GROUP}' entry-point group, or set 'adapter' in the "
            "configuration section"
        ),
    )


def resolve_adapter(kind: str, section: ProviderSectionConfig) -> type:
    """Find the adapter class for a configuration section.

    Args:
        kind: Capability kind (key of ``PROVIDER_INTERFACES``)
        section: The section's configuration

    Returns:
        The adapter class

    Raises:
        ProviderLoadError: If the class cannot be found or does not
            implement the capability interface
    """
    provider = str(getattr(section, "provider", None) or "custom")

    if section.adapter:
        adapter_cls = _import_adapter(section.adapter, kind, provider)
    else:
        adapter_cls = _lookup_entry_point(kind, provider)

    interface = PROVIDER_INTERFACES[kind]
    if not isinstance(adapter_cls, type) or not issubclass(adapter_cls, interface):
        raise ProviderLoadError(
            f"Adapter {adapter_cls!r} does not implement {interface.__name__}",
            kind=kind,
            provider=provider,
        )
    return adapter_cls


def create_provider(kind: str, section: ProviderSectionConfig) -> Any:
    """Resolve and instantiate the adapter for one section.

    Raises:
        ProviderLoadError: If resolution or construction fails
    """
    adapter_cls = resolve_adapter(kind, section)
    provider = getattr(section, "provider", None)

    log.info("creating_provider", kind=kind, provider=provider, adapter=adapter_cls.__qualname__)
    try:
        return adapter_cls(section)
    except ProviderLoadError:
        raise
    except Exception as e:
        raise ProviderLoadError(
            f"Failed to initialize adapter {adapter_cls.__qualname__}: {e}",
            kind=kind,
            provider=provider,
        ) from e


def load_providers(settings: QuolarSettings) -> WorkflowProviders:
    """Create every configured provider.

    Documentation and analytics are optional: when their section is absent
    or has no provider, the handle is None and the workflow skips the
    matching step.

    Args:
        settings: Loaded settings

    Returns:
        WorkflowProviders ready for ``WorkflowOrchestrator``

    Raises:
        ProviderLoadError: If a configured provider cannot be created
    """
    docs = create_provider("documentation", settings.documentation) if settings.documentation_enabled else None
    analytics = create_provider("analytics", settings.analytics) if settings.analytics_enabled else None

    return WorkflowProviders(
        ticket=create_provider("tickets", settings.tickets),
        vcs=create_provider("vcs", settings.vcs),
        test_framework=create_provider("test_framework", settings.test_framework),
        docs=docs,
        analytics=analytics,
    )
