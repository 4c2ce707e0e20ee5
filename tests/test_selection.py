import asyncio

import pytest

from models.suggestion import Suggestion
from orchestrator.engine import SearchBoxEngine
from orchestrator.navigation import RecordingNavigator

pytestmark = pytest.mark.unit


def _engine(settings, providers, sink, navigator=None):
    return SearchBoxEngine(settings, providers, on_search=sink, navigator=navigator or RecordingNavigator())


def test_selecting_suggestion_replaces_term_and_submits(fast_settings, fake_provider, search_sink):
    provider = fake_provider("catalog", answers={"ca": [Suggestion("<B>ca</B>t food")]})

    async def run():
        engine = _engine(fast_settings, [provider], search_sink)
        await engine.change_input_now("ca")
        await engine.select_index(0)
        return engine

    engine = asyncio.run(run())
    assert engine.state.search_input_value == "cat food"
    assert engine.state.proposed_suggestions == []
    assert [s.plain_text for s in engine.state.selected_suggestions] == ["cat food"]
    assert search_sink.raw_values == ["cat food"]


def test_replacement_keeps_text_before_the_suggested_term(fast_settings, search_sink):
    async def run():
        engine = _engine(fast_settings, [], search_sink)
        engine.state.search_input_value = "buy ca"
        engine.state.term_to_suggest_from = "ca"
        await engine.on_suggestion_selected(Suggestion("<B>ca</B>t toys"))
        return engine

    engine = asyncio.run(run())
    assert engine.state.search_input_value == "buy cat toys"
    assert search_sink.raw_values == ["buy cat toys"]


def test_link_suggestion_opens_once_and_resets_box(fast_settings, search_sink):
    navigator = RecordingNavigator()
    link = Suggestion("IT help desk", target_url="https://intranet.example.com/it-help")

    async def run():
        engine = _engine(fast_settings, [], search_sink, navigator)
        engine.state.search_input_value = "it h"
        engine.state.show_clear_button = True
        await engine.on_suggestion_selected(link)
        # the same selection event delivered twice
        await engine.on_suggestion_selected(link)
        return engine

    engine = asyncio.run(run())
    assert [(r.url, r.target) for r in navigator.requests] == [("https://intranet.example.com/it-help", "_blank")]
    assert engine.state.last_suggestion_clicked == link
    assert engine.state.search_input_value == ""
    assert engine.state.show_clear_button is False
    assert engine.state.selected_suggestions == []
    # resets only, never a real query
    assert all(value == "" for value in search_sink.raw_values)


def test_different_link_is_opened(fast_settings, search_sink):
    navigator = RecordingNavigator()
    first = Suggestion("IT help desk", target_url="https://intranet.example.com/it-help")
    second = Suggestion("Travel booking", target_url="https://intranet.example.com/travel")

    async def run():
        engine = _engine(fast_settings, [], search_sink, navigator)
        await engine.on_suggestion_selected(first)
        await engine.on_suggestion_selected(second)

    asyncio.run(run())
    assert [r.url for r in navigator.requests] == [
        "https://intranet.example.com/it-help",
        "https://intranet.example.com/travel",
    ]


def test_clicked_link_is_not_reopened_on_selection(fast_settings, search_sink):
    navigator = RecordingNavigator()
    link = Suggestion("IT help desk", target_url="https://intranet.example.com/it-help")

    async def run():
        engine = _engine(fast_settings, [], search_sink, navigator)
        engine.on_suggestion_clicked(link)
        await engine.on_suggestion_selected(link)

    asyncio.run(run())
    assert navigator.requests == []


def test_failing_selection_handler_is_only_logged(fast_settings, search_sink):
    def handler(suggestion):
        raise RuntimeError("analytics down")

    suggestion = Suggestion("cat food", on_suggestion_selected=handler)

    async def run():
        engine = _engine(fast_settings, [], search_sink)
        await engine.on_suggestion_selected(suggestion)
        return engine

    engine = asyncio.run(run())
    assert engine.state.error_message is None
    assert search_sink.raw_values == ["cat food"]


def test_async_selection_handler_is_awaited(fast_settings, search_sink):
    seen = []

    async def handler(suggestion):
        await asyncio.sleep(0)
        seen.append(suggestion.plain_text)

    async def run():
        engine = _engine(fast_settings, [], search_sink)
        await engine.on_suggestion_selected(Suggestion("cat food", on_suggestion_selected=handler))

    asyncio.run(run())
    assert seen == ["cat food"]


def test_select_index_out_of_range(fast_settings, search_sink):
    engine = _engine(fast_settings, [], search_sink)
    with pytest.raises(IndexError):
        asyncio.run(engine.select_index(0))
