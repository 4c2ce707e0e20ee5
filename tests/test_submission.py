import asyncio

import pytest

from config.config import EngineSettings, PageOpenBehavior, QueryPathBehavior
from models.engine_state import EngineState
from models.errors import EnhancementError
from models.search_query import QueryEnhancement, SearchQuery
from orchestrator.enhancement import QueryEnhancementAdapter
from orchestrator.navigation import RecordingNavigator
from orchestrator.submission import QuerySubmissionRouter

pytestmark = pytest.mark.unit


class FailingEnhancementService:
    def __init__(self):
        self.calls = []

    async def enhance_search_query(self, text, is_staging):
        self.calls.append((text, is_staging))
        raise EnhancementError("service unavailable")


class StubEnhancementService:
    def __init__(self, enhanced):
        self.enhanced = enhanced
        self.calls = []

    async def enhance_search_query(self, text, is_staging):
        self.calls.append((text, is_staging))
        return QueryEnhancement(enhanced_query=self.enhanced, entities=({"type": "product"},))


def test_empty_submission_is_a_noop(search_sink):
    router = QuerySubmissionRouter(EngineSettings(), on_search=search_sink)
    state = EngineState(search_input_value="ca", show_clear_button=True)

    result = asyncio.run(router.submit(state, ""))

    assert result is None
    assert search_sink.queries == []
    assert state.search_input_value == "ca"
    assert state.show_clear_button is True


def test_query_goes_to_callback_by_default(search_sink):
    navigator = RecordingNavigator()
    router = QuerySubmissionRouter(EngineSettings(), on_search=search_sink, navigator=navigator)
    state = EngineState()

    result = asyncio.run(router.submit(state, "red shoes"))

    assert result == SearchQuery(raw_input_value="red shoes", enhanced_query="")
    assert search_sink.queries == [result]
    assert navigator.requests == []
    assert state.search_input_value == "red shoes"
    assert state.show_clear_button is True


def test_reset_notifies_callback_and_hides_clear_button(search_sink):
    router = QuerySubmissionRouter(EngineSettings(), on_search=search_sink)
    state = EngineState(search_input_value="red shoes", show_clear_button=True)

    asyncio.run(router.submit(state, "", is_reset=True))

    assert search_sink.raw_values == [""]
    assert state.search_input_value == ""
    assert state.show_clear_button is False


def test_fragment_mode_navigates_instead_of_calling_back(search_sink):
    navigator = RecordingNavigator()
    settings = EngineSettings(
        search_in_new_page=True,
        page_url="https://contoso.com/search.aspx",
        query_path_behavior=QueryPathBehavior.URL_FRAGMENT,
    )
    router = QuerySubmissionRouter(settings, on_search=search_sink, navigator=navigator)

    asyncio.run(router.submit(EngineState(), "shoes"))

    assert [(r.url, r.target) for r in navigator.requests] == [("https://contoso.com/search.aspx#shoes", "_self")]
    assert search_sink.queries == []


def test_query_parameter_mode_in_new_tab(search_sink):
    navigator = RecordingNavigator()
    settings = EngineSettings(
        search_in_new_page=True,
        page_url="https://contoso.com/search.aspx?lang=en",
        query_string_parameter="k",
        open_behavior=PageOpenBehavior.NEW_TAB,
    )
    router = QuerySubmissionRouter(settings, on_search=search_sink, navigator=navigator)

    asyncio.run(router.submit(EngineState(), "red shoes"))

    assert [(r.url, r.target) for r in navigator.requests] == [
        ("https://contoso.com/search.aspx?lang=en&k=red+shoes", "_blank")
    ]
    assert search_sink.queries == []


def test_reset_in_search_page_mode_does_not_navigate(search_sink):
    navigator = RecordingNavigator()
    settings = EngineSettings(search_in_new_page=True, page_url="https://contoso.com/search.aspx")
    router = QuerySubmissionRouter(settings, on_search=search_sink, navigator=navigator)

    asyncio.run(router.submit(EngineState(), "", is_reset=True))

    assert navigator.requests == []
    assert search_sink.raw_values == [""]


def test_enhancement_failure_falls_back_to_raw_text(search_sink):
    service = FailingEnhancementService()
    settings = EngineSettings(enable_enhancement=True, is_staging=True)
    router = QuerySubmissionRouter(
        settings,
        on_search=search_sink,
        enhancer=QueryEnhancementAdapter(service, is_staging=settings.is_staging),
    )
    state = EngineState()

    result = asyncio.run(router.submit(state, "wifi"))

    assert result == SearchQuery(raw_input_value="wifi", enhanced_query="wifi")
    assert search_sink.queries == [result]
    assert service.calls == [("wifi", True)]
    assert state.error_message is None
    assert state.enhanced_query is None

    outcome = asyncio.run(QueryEnhancementAdapter(service).enhance("wifi"))
    assert outcome.used_fallback
    assert outcome.enhanced_query == "wifi"
    assert outcome.error == "service unavailable"


def test_enhanced_query_is_delivered(search_sink):
    service = StubEnhancementService("wifi guest access")
    router = QuerySubmissionRouter(
        EngineSettings(enable_enhancement=True, enable_debug_mode=True),
        on_search=search_sink,
        enhancer=QueryEnhancementAdapter(service),
    )
    state = EngineState()

    result = asyncio.run(router.submit(state, "wifi"))

    assert result.enhanced_query == "wifi guest access"
    assert result.effective_query == "wifi guest access"
    assert state.enhanced_query.entities == ({"type": "product"},)
    assert state.to_dict()["enhancement"] == {
        "enhanced_query": "wifi guest access",
        "entities": [{"type": "product"}],
        "raw": {},
    }


def test_enhancement_payload_is_not_kept_outside_debug_mode(search_sink):
    router = QuerySubmissionRouter(
        EngineSettings(enable_enhancement=True),
        on_search=search_sink,
        enhancer=QueryEnhancementAdapter(StubEnhancementService("wifi guest access")),
    )
    state = EngineState()

    result = asyncio.run(router.submit(state, "wifi"))

    assert result.enhanced_query == "wifi guest access"
    assert state.enhanced_query is None
    assert state.to_dict()["enhancement"] is None


def test_enhancement_disabled_skips_service(search_sink):
    service = StubEnhancementService("ignored")
    router = QuerySubmissionRouter(
        EngineSettings(enable_enhancement=False),
        on_search=search_sink,
        enhancer=QueryEnhancementAdapter(service),
    )

    result = asyncio.run(router.submit(EngineState(), "wifi"))

    assert service.calls == []
    assert result.enhanced_query == ""


def test_async_callback_is_awaited():
    received = []

    async def on_search(query):
        await asyncio.sleep(0)
        received.append(query.raw_input_value)

    router = QuerySubmissionRouter(EngineSettings(), on_search=on_search)
    asyncio.run(router.submit(EngineState(), "cat"))

    assert received == ["cat"]


def test_navigation_without_navigator_is_an_error():
    settings = EngineSettings(search_in_new_page=True, page_url="https://contoso.com/search.aspx")
    router = QuerySubmissionRouter(settings)

    with pytest.raises(RuntimeError):
        asyncio.run(router.submit(EngineState(), "shoes"))
