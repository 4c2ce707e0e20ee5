"""
QuerySubmissionRouter - Finalizes a committed query and sends it to exactly one sink.

Sinks:
- URL navigation to the configured search page (search_in_new_page)
- The local on_search callback
"""

import inspect
from typing import Any, Awaitable, Callable, Union

from config.config import EngineSettings
from models.engine_state import EngineState
from models.search_query import SearchQuery
from orchestrator.enhancement import QueryEnhancementAdapter
from orchestrator.navigation import Navigator
from utils.logger import get_logger
from utils.url_helper import browsing_target, build_search_url

logger = get_logger(__name__)

SearchCallback = Callable[[SearchQuery], Union[None, Awaitable[Any]]]


class QuerySubmissionRouter:
    def __init__(
        self,
        settings: EngineSettings,
        on_search: SearchCallback | None = None,
        navigator: Navigator | None = None,
        enhancer: QueryEnhancementAdapter | None = None,
    ):
        self.settings = settings
        self.on_search = on_search
        self.navigator = navigator
        self.enhancer = enhancer

    async def submit(self, state: EngineState, text: str, is_reset: bool = False) -> SearchQuery | None:
        """
        Submit a query.

        Args:
            state: Engine state (input value, clear button, enhancement payload)
            text: Raw query text
            is_reset: Clearing the box rather than searching

        Returns:
            The SearchQuery that was built, or None for an ignored empty submission
        """
        text = text or ""
        if not text and not is_reset:
            return None

        query = SearchQuery(raw_input_value=text, enhanced_query="")
        state.search_input_value = text
        state.show_clear_button = not is_reset

        if self.settings.enable_enhancement and self.enhancer is not None and text:
            outcome = await self.enhancer.enhance(text)
            query = SearchQuery(raw_input_value=text, enhanced_query=outcome.enhanced_query)
            if outcome.payload is not None and self.settings.enable_debug_mode:
                state.enhanced_query = outcome.payload

        if self.settings.search_in_new_page and not is_reset:
            self._navigate(text)
        else:
            await self._notify(query)

        return query

    def _navigate(self, text: str) -> None:
        if self.navigator is None:
            raise RuntimeError("search_in_new_page is enabled but no navigator is configured")

        url = build_search_url(
            self.settings.page_url,
            text,
            query_path_behavior=self.settings.query_path_behavior,
            query_string_parameter=self.settings.query_string_parameter,
        )
        target = browsing_target(self.settings.open_behavior)
        logger.info(
            "Routing query to search page",
            extra={"extra_fields": {"url": url, "target": target}},
        )
        self.navigator.open(url, target)

    async def _notify(self, query: SearchQuery) -> None:
        if self.on_search is None:
            logger.debug("No search callback configured; query dropped")
            return
        result = self.on_search(query)
        if inspect.isawaitable(result):
            await result
