"""Tests for provider resolution and construction."""

import sys
import textwrap
from unittest.mock import MagicMock, patch

import pytest

from quolar.config.settings import QuolarSettings, TicketsConfig
from quolar.exceptions import ProviderLoadError
from quolar.providers.base import TicketProvider
from quolar.providers.registry import (
    ENTRY_POINT_GROUP,
    create_provider,
    load_providers,
    resolve_adapter,
)

ADAPTERS = textwrap.dedent(
    '''
    from quolar.providers.base import (
        AnalyticsProvider,
        DocsProvider,
        TestFrameworkProvider,
        TicketProvider,
        VCSProvider,
    )


    class _Configured:
        def __init__(self, config):
            self.config = config


    class Tickets(_Configured, TicketProvider):
        async def read(self, ticket_id):
            raise NotImplementedError

        async def get_acceptance_criteria(self, ticket_id):
            return []

        async def update(self, ticket_id, data):
            pass

        async def link_pr(self, ticket_id, pr_url):
            pass


    class Docs(_Configured, DocsProvider):
        async def search_patterns(self, query):
            return []

        async def read_document(self, doc_id):
            raise NotImplementedError


    class Framework(_Configured, TestFrameworkProvider):
        async def detect(self):
            raise NotImplementedError

        async def generate_test(self, plan):
            return ""

        async def execute(self, config):
            raise NotImplementedError

        async def heal(self, failure):
            raise NotImplementedError


    class Vcs(_Configured, VCSProvider):
        async def create_branch(self, name, base_branch=None):
            pass

        async def commit(self, message, files):
            pass

        async def push(self, branch=None):
            pass

        async def create_pr(self, options):
            raise NotImplementedError

        async def get_current_branch(self):
            return "main"

        async def has_changes(self):
            return False


    class Analytics(_Configured, AnalyticsProvider):
        async def report_results(self, results):
            pass

        async def classify_failure(self, failure):
            raise NotImplementedError

        async def find_similar_failures(self, error):
            return []

        async def get_flakiness(self, test_signature):
            raise NotImplementedError


    class Broken(Tickets):
        def __init__(self, config):
            raise RuntimeError("missing API key")


    class NotAProvider:
        def __init__(self, config):
            pass
    '''
)


@pytest.fixture
def adapters_module(tmp_path, monkeypatch) -> str:
    """Write an importable module of adapter classes and return its name."""
    (tmp_path / "quolar_test_adapters.py").write_text(ADAPTERS)
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.delitem(sys.modules, "quolar_test_adapters", raising=False)
    return "quolar_test_adapters"


def fake_entry_point(target):
    entry_point = MagicMock()
    entry_point.load.return_value = target
    return entry_point


class TestResolveAdapter:
    def test_from_adapter_path(self, adapters_module):
        section = TicketsConfig(provider="custom", adapter=f"{adapters_module}:Tickets")

        adapter_cls = resolve_adapter("tickets", section)

        assert adapter_cls.__name__ == "Tickets"
        assert issubclass(adapter_cls, TicketProvider)

    def test_missing_module(self):
        section = TicketsConfig(provider="custom", adapter="quolar_no_such_module:Tickets")

        with pytest.raises(ProviderLoadError) as exc_info:
            resolve_adapter("tickets", section)

        assert exc_info.value.kind == "tickets"
        assert exc_info.value.provider == "custom"
        assert exc_info.value.suggestion is not None

    def test_missing_class(self, adapters_module):
        section = TicketsConfig(provider="custom", adapter=f"{adapters_module}:Nope")

        with pytest.raises(ProviderLoadError, match="not found"):
            resolve_adapter("tickets", section)

    def test_wrong_interface(self, adapters_module):
        section = TicketsConfig(provider="custom", adapter=f"{adapters_module}:Docs")

        with pytest.raises(ProviderLoadError, match="does not implement TicketProvider"):
            resolve_adapter("tickets", section)

    def test_not_a_provider(self, adapters_module):
        section = TicketsConfig(provider="custom", adapter=f"{adapters_module}:NotAProvider")

        with pytest.raises(ProviderLoadError):
            resolve_adapter("tickets", section)

    def test_from_entry_point(self, adapters_module):
        import quolar_test_adapters

        section = TicketsConfig(provider="linear")

        with patch(
            "quolar.providers.registry.entry_points",
            return_value=[fake_entry_point(quolar_test_adapters.Tickets)],
        ) as mock_entry_points:
            adapter_cls = resolve_adapter("tickets", section)

        mock_entry_points.assert_called_once_with(group=ENTRY_POINT_GROUP, name="tickets.linear")
        assert adapter_cls is quolar_test_adapters.Tickets

    def test_no_entry_point(self):
        section = TicketsConfig(provider="jira")

        with patch("quolar.providers.registry.entry_points", return_value=[]):
            with pytest.raises(ProviderLoadError, match="No adapter registered for 'tickets.jira'"):
                resolve_adapter("tickets", section)

    def test_entry_point_load_error(self):
        entry_point = MagicMock()
        entry_point.load.side_effect = ImportError("broken package")

        with patch("quolar.providers.registry.entry_points", return_value=[entry_point]):
            with pytest.raises(ProviderLoadError, match="broken package"):
                resolve_adapter("tickets", TicketsConfig(provider="linear"))


class TestCreateProvider:
    def test_receives_section(self, adapters_module):
        section = TicketsConfig(provider="custom", adapter=f"{adapters_module}:Tickets", options={"apiKey": "k"})

        provider = create_provider("tickets", section)

        assert provider.config is section
        assert provider.config.options == {"apiKey": "k"}

    def test_constructor_error(self, adapters_module):
        section = TicketsConfig(provider="custom", adapter=f"{adapters_module}:Broken")

        with pytest.raises(ProviderLoadError, match="missing API key"):
            create_provider("tickets", section)


class TestLoadProviders:
    def make_settings(self, module: str, **extra) -> QuolarSettings:
        config = {
            "test_framework": {"provider": "custom", "adapter": f"{module}:Framework"},
            "tickets": {"provider": "custom", "adapter": f"{module}:Tickets"},
            "vcs": {"adapter": f"{module}:Vcs"},
        }
        config.update(extra)
        return QuolarSettings.from_dict(config)

    def test_required_only(self, adapters_module):
        providers = load_providers(self.make_settings(adapters_module))

        assert type(providers.ticket).__name__ == "Tickets"
        assert type(providers.test_framework).__name__ == "Framework"
        assert type(providers.vcs).__name__ == "Vcs"
        assert providers.docs is None
        assert providers.analytics is None

    def test_optional_sections(self, adapters_module):
        settings = self.make_settings(
            adapters_module,
            documentation={"provider": "custom", "adapter": f"{adapters_module}:Docs"},
            analytics={"provider": "custom", "adapter": f"{adapters_module}:Analytics"},
        )

        providers = load_providers(settings)

        assert type(providers.docs).__name__ == "Docs"
        assert type(providers.analytics).__name__ == "Analytics"

    def test_optional_section_without_provider(self, adapters_module):
        settings = self.make_settings(adapters_module, analytics={})

        assert load_providers(settings).analytics is None
