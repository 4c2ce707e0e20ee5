import asyncio

import pytest

from config.config import Config, EngineSettings, PageOpenBehavior, QueryPathBehavior
from models.suggestion import Suggestion, SuggestionType
from providers.http_provider import HttpSuggestionProvider
from providers.registry import ProviderRegistry
from providers.static_provider import StaticSuggestionProvider, highlight_match


def test_default_registry_loads():
    registry = ProviderRegistry.from_yaml()
    names = [p.name for p in registry.providers()]

    assert names == ["popular-queries", "quick-links", "people", "remote-suggest"]
    assert "remote-suggest" not in [p.name for p in registry.enabled_providers()]
    assert registry.get("popular-queries").supports_zero_term_suggestions
    assert registry.get("quick-links").supports_zero_term_suggestions is False
    assert registry.get("missing") is None


def test_registry_builds_person_and_link_suggestions():
    registry = ProviderRegistry.from_yaml()

    people = asyncio.run(registry.get("people").get_suggestions("ada"))
    links = asyncio.run(registry.get("quick-links").get_suggestions("help"))

    assert people[0].type == SuggestionType.PERSON
    assert people[0].display_text == "<B>Ada</B> Lovelace"
    assert links[0].target_url == "https://intranet.example.com/it-help"


def test_http_entries_expand_environment(monkeypatch):
    monkeypatch.setenv("SUGGEST_HOST", "https://suggest.example.com")
    registry = ProviderRegistry.from_dict(
        {"providers": [{"name": "remote", "type": "http", "url": "${SUGGEST_HOST}/api", "timeout_s": 2}]}
    )
    provider = registry.get("remote")

    assert isinstance(provider, HttpSuggestionProvider)
    assert provider.url == "https://suggest.example.com/api"
    assert provider.timeout_s == 2.0


@pytest.mark.parametrize(
    "data",
    [
        {"providers": "not-a-list"},
        {"providers": [{"type": "static"}]},
        {"providers": [{"name": "a"}, {"name": "a"}]},
        {"providers": [{"name": "a", "type": "graphql"}]},
    ],
)
def test_invalid_registry_is_rejected(data):
    with pytest.raises(ValueError):
        ProviderRegistry.from_dict(data)


def test_missing_registry_file(tmp_path):
    with pytest.raises(ValueError):
        ProviderRegistry.from_yaml(str(tmp_path / "nope.yaml"))


def test_static_provider_highlights_and_limits():
    provider = StaticSuggestionProvider(
        "docs",
        suggestions=[Suggestion("Cat food"), Suggestion("Wildcat"), Suggestion("Dog food")],
        max_results=1,
    )
    assert [s.display_text for s in asyncio.run(provider.get_suggestions("cat"))] == ["<B>Cat</B> food"]
    assert highlight_match("Wildcat", "CAT") == "Wild<B>cat</B>"
    assert highlight_match("Dog food", "cat") is None


def test_static_provider_signature_tracks_candidates():
    a = StaticSuggestionProvider("docs", suggestions=[Suggestion("Cat food")])
    b = StaticSuggestionProvider("docs", suggestions=[Suggestion("Cat food")])
    c = StaticSuggestionProvider("docs", suggestions=[Suggestion("Dog food")])
    assert a.signature() == b.signature()
    assert a.signature() != c.signature()


def test_config_builds_engine_settings(monkeypatch):
    monkeypatch.setenv("SUGGESTION_MIN_TRIGGER_LENGTH", "3")
    monkeypatch.setenv("SUGGESTION_DEBOUNCE_MS", "150")
    monkeypatch.setenv("SEARCH_IN_NEW_PAGE", "true")
    monkeypatch.setenv("SEARCH_PAGE_URL", "https://contoso.com/search.aspx")
    monkeypatch.setenv("OPEN_BEHAVIOR", "newTab")
    monkeypatch.setenv("QUERY_PATH_BEHAVIOR", "urlFragment")

    config = Config()
    assert config.validate() is True
    settings = config.engine_settings()

    assert settings.minimum_trigger_length == 3
    assert settings.debounce_window_s == pytest.approx(0.15)
    assert settings.search_in_new_page is True
    assert settings.open_behavior == PageOpenBehavior.NEW_TAB
    assert settings.query_path_behavior == QueryPathBehavior.URL_FRAGMENT


def test_config_validate_reports_bad_values(monkeypatch, capsys):
    monkeypatch.setenv("OPEN_BEHAVIOR", "popup")
    assert Config().validate() is False
    assert "OPEN_BEHAVIOR" in capsys.readouterr().out

    monkeypatch.setenv("OPEN_BEHAVIOR", "sameTab")
    monkeypatch.setenv("SEARCH_IN_NEW_PAGE", "true")
    monkeypatch.delenv("SEARCH_PAGE_URL", raising=False)
    assert Config().validate() is False


def test_engine_settings_validation():
    with pytest.raises(ValueError):
        EngineSettings(minimum_trigger_length=0)
    with pytest.raises(ValueError):
        EngineSettings(debounce_window_ms=-1)
    with pytest.raises(ValueError):
        EngineSettings(search_in_new_page=True)

    settings = EngineSettings(open_behavior="newTab", query_path_behavior="urlFragment")
    assert settings.open_behavior == PageOpenBehavior.NEW_TAB
    assert settings.query_path_behavior == QueryPathBehavior.URL_FRAGMENT
