"""
SearchBoxEngine - Suggestion orchestration for one search input.

Key guarantees:
- Only the latest batch for the current input term ever reaches proposed_suggestions
- One provider failing never aborts its siblings
- Zero-term suggestions are fetched once per provider set
- Each submission reaches exactly one sink (search page or on_search callback)
"""

import inspect
from collections.abc import Sequence
from typing import Any

from config.config import EngineSettings
from models.engine_state import EngineState
from models.errors import BatchError, SelectionHandlerError
from models.events import CommandType, EngineCommand
from models.search_query import SearchQuery
from models.suggestion import Suggestion, strip_highlight_markup
from orchestrator.debouncer import Debouncer
from orchestrator.enhancement import QueryEnhancementAdapter
from orchestrator.fan_out import FanOutResult, ProviderFetchResult, SuggestionFanOut
from orchestrator.navigation import Navigator, WebBrowserNavigator
from orchestrator.stale_guard import StaleGuard
from orchestrator.submission import QuerySubmissionRouter, SearchCallback
from orchestrator.suggestion_merger import SuggestionGroup, SuggestionMerger, flatten_groups, group_suggestions
from orchestrator.zero_term_cache import ZeroTermSuggestionCache
from providers.base import provider_set_signature
from providers.enhancement_client import QueryEnhancementService
from utils.logger import get_logger
from utils.url_helper import decode_uri_component

logger = get_logger(__name__)


class SearchBoxEngine:
    """
    Example usage:
        engine = SearchBoxEngine(EngineSettings(), providers, on_search=print)
        await engine.mount()
        engine.on_input_changed("ca")
        await engine.settle()
        for group in engine.suggestion_groups:
            print(group.group_name, [s.plain_text for s in group.suggestions])
    """

    def __init__(
        self,
        settings: EngineSettings | None = None,
        providers: Sequence[Any] | None = None,
        *,
        on_search: SearchCallback | None = None,
        navigator: Navigator | None = None,
        enhancement_service: QueryEnhancementService | None = None,
        fan_out: SuggestionFanOut | None = None,
        initial_input_value: str | None = None,
    ):
        self.settings = settings or EngineSettings()
        self._providers: list[Any] = list(providers or [])
        self._provider_signature = provider_set_signature(self._providers)

        initial_value = decode_uri_component(initial_input_value)
        self.state = EngineState(search_input_value=initial_value, show_clear_button=bool(initial_value))

        self.navigator: Navigator = navigator or WebBrowserNavigator()
        self._fan_out = fan_out or SuggestionFanOut(default_timeout_s=self.settings.provider_timeout_s)
        self._guard = StaleGuard(lambda: self.state.search_input_value)
        self.zero_term_cache = ZeroTermSuggestionCache(self._fan_out)
        self._debouncer: Debouncer[str] = Debouncer(self.settings.debounce_window_s, self.dispatch)

        enhancer = (
            QueryEnhancementAdapter(enhancement_service, is_staging=self.settings.is_staging)
            if enhancement_service is not None
            else None
        )
        self._router = QuerySubmissionRouter(
            self.settings, on_search=on_search, navigator=self.navigator, enhancer=enhancer
        )
        self.mounted = False

    # ── Lifecycle ────────────────────────────────────────────────────────────

    @property
    def providers(self) -> list[Any]:
        return list(self._providers)

    async def mount(self) -> None:
        """Pre-warm the zero-term cache."""
        self.mounted = True
        await self.ensure_zero_term_suggestions()

    async def unmount(self) -> None:
        """Stop pending work; results still in flight are discarded when they land."""
        self._debouncer.cancel()
        self._guard.invalidate()
        self.zero_term_cache.invalidate()
        self.state.is_retrieving_suggestions = False
        self.state.is_retrieving_zero_term_suggestions = False
        self.mounted = False

    async def settle(self) -> None:
        """Wait for the debounce window and any started suggestion batch."""
        await self._debouncer.drain()

    async def update_providers(self, providers: Sequence[Any] | None) -> bool:
        """
        Swap the provider set. A structural change forces a zero-term refresh.

        Returns:
            True if the provider set changed
        """
        signature = provider_set_signature(providers)
        self._providers = list(providers or [])
        if signature == self._provider_signature:
            return False

        self._provider_signature = signature
        logger.info(
            "Suggestion providers changed, refreshing zero-term suggestions",
            extra={"extra_fields": {"provider_count": len(self._providers)}},
        )
        await self.ensure_zero_term_suggestions(force_refresh=True)
        return True

    # ── Input ────────────────────────────────────────────────────────────────

    def on_input_changed(self, text: str) -> None:
        """
        Keystroke handler. Display state updates now; fetching is debounced.
        """
        text = text or ""
        self.state.search_input_value = text
        self.state.show_clear_button = True
        self.state.is_retrieving_suggestions = self.settings.enable_suggestions
        self._debouncer(text)

    async def change_input_now(self, text: str) -> None:
        """Apply an input change without waiting for the quiet window."""
        self._debouncer.cancel()
        text = text or ""
        self.state.search_input_value = text
        self.state.show_clear_button = True
        self.state.is_retrieving_suggestions = self.settings.enable_suggestions
        await self.dispatch(text)

    def receive_input_value(self, value: str | None) -> None:
        """Externally supplied (URL-encoded) input value, e.g. from the page query string."""
        self.state.search_input_value = decode_uri_component(value)

    async def _show_zero_term_suggestions(self) -> None:
        self.state.is_retrieving_suggestions = False
        if self.state.has_retrieved_zero_term_suggestions:
            self.state.proposed_suggestions = list(self.state.zero_term_suggestions)
            return
        # The cache publishes itself once the fetch in flight lands
        self.state.clear_proposed()
        await self.ensure_zero_term_suggestions()

    # ── Suggestions ──────────────────────────────────────────────────────────

    async def dispatch(self, term: str) -> FanOutResult | None:
        """
        Fetch term suggestions from every eligible provider.

        Results are merged as they arrive, but only while this batch is the
        latest one and its term is still the current input.

        An empty term shows the zero-term suggestions instead.

        Returns:
            FanOutResult, or None when no fetch was issued or the batch failed
        """
        state = self.state
        term = term or ""
        if self.settings.enable_suggestions and not term:
            await self._show_zero_term_suggestions()
            return None

        if not self.settings.enable_suggestions or len(term) < self.settings.minimum_trigger_length:
            state.clear_proposed()
            state.is_retrieving_suggestions = False
            return None

        tag = self._guard.issue(term)
        state.is_retrieving_suggestions = True
        state.error_message = None
        state.clear_proposed()

        try:
            eligible = self._fan_out.eligible_term_providers(self._providers)
            merger = SuggestionMerger(len(eligible))

            def apply(result: ProviderFetchResult) -> None:
                if not self._guard.is_live(tag):
                    logger.debug(
                        f"Discarding stale suggestions for '{term}'",
                        extra={
                            "extra_fields": {
                                "provider": result.provider,
                                "batch_id": tag.batch_id,
                                "current_term": state.search_input_value,
                            }
                        },
                    )
                    return
                state.proposed_suggestions = merger.add(result.index, result.suggestions)
                state.term_to_suggest_from = term

            result = await self._fan_out.fetch_suggestions(term, eligible, on_result=apply)
        except Exception as e:
            if self._guard.is_latest(tag):
                self._fail_batch(BatchError(str(e) or type(e).__name__))
            else:
                logger.warning(
                    f"Stale suggestion batch for '{term}' failed: {e}",
                    extra={"extra_fields": {"batch_id": tag.batch_id, "error_type": type(e).__name__}},
                )
            return None

        if self._guard.is_latest(tag):
            state.is_retrieving_suggestions = False
        return result

    async def ensure_zero_term_suggestions(self, force_refresh: bool = False) -> bool:
        """
        Populate the zero-term cache if needed.

        Returns:
            True if a fetch was performed
        """
        try:
            return await self.zero_term_cache.ensure(
                self.state,
                self._providers,
                force_refresh=force_refresh,
                publish=self.settings.enable_suggestions,
            )
        except Exception as e:
            self._fail_batch(BatchError(str(e) or type(e).__name__))
            return False

    def _fail_batch(self, error: BatchError) -> None:
        logger.error(
            f"Suggestion batch failed: {error}",
            extra={"extra_fields": {"term": self.state.search_input_value}},
        )
        self.state.error_message = str(error)
        self.state.clear_proposed()
        self.state.is_retrieving_suggestions = False

    def dismiss_error(self) -> None:
        self.state.error_message = None

    @property
    def suggestion_groups(self) -> list[SuggestionGroup]:
        return group_suggestions(self.state.proposed_suggestions, self.settings.default_group_name)

    # ── Selection & submission ───────────────────────────────────────────────

    async def submit(self, text: str, is_reset: bool = False) -> SearchQuery | None:
        """Submit a query (Enter, search button) or reset the box (is_reset=True)."""
        return await self._router.submit(self.state, text, is_reset=is_reset)

    def on_suggestion_clicked(self, suggestion: Suggestion) -> None:
        """A link suggestion was opened by the caller itself."""
        self.state.last_suggestion_clicked = suggestion

    async def on_suggestion_selected(self, suggestion: Suggestion) -> SearchQuery | None:
        """
        Apply a selected suggestion.

        Non-link suggestions replace the suggested-from term in the input and
        are submitted. Link suggestions open their target (once) and reset
        the box without submitting.
        """
        state = self.state
        term = state.term_to_suggest_from
        start = state.search_input_value.find(term) if term else -1
        replaced_value = strip_highlight_markup(state.search_input_value[: max(start, 0)] + suggestion.display_text)

        if suggestion.on_suggestion_selected is not None:
            await self._run_selection_handler(suggestion)

        if not suggestion.target_url:
            state.search_input_value = replaced_value
            state.clear_proposed()
            state.show_clear_button = True
            state.selected_suggestions.append(suggestion)
            return await self.submit(replaced_value)

        last = state.last_suggestion_clicked
        if last is None or (last.target_url != suggestion.target_url and last.display_text != suggestion.display_text):
            self.navigator.open(suggestion.target_url, "_blank")
        else:
            logger.debug(
                "Suggestion link already opened",
                extra={"extra_fields": {"target_url": suggestion.target_url}},
            )
        state.last_suggestion_clicked = suggestion
        state.clear_proposed()
        await self.submit("", is_reset=True)
        return None

    async def select_index(self, index: int) -> SearchQuery | None:
        """Select a suggestion by its presentation index."""
        suggestions = flatten_groups(self.suggestion_groups)
        if index < 0 or index >= len(suggestions):
            raise IndexError(f"No suggestion at index {index}")
        return await self.on_suggestion_selected(suggestions[index])

    async def _run_selection_handler(self, suggestion: Suggestion) -> None:
        try:
            result = suggestion.on_suggestion_selected(suggestion)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            error = SelectionHandlerError(f"Error occurred while executing custom selection handler: {e}")
            logger.error(
                str(error),
                exc_info=e,
                extra={"extra_fields": {"suggestion": suggestion.plain_text}},
            )

    # ── Command dispatch ─────────────────────────────────────────────────────

    async def handle(self, command: EngineCommand) -> Any:
        """Route a UI command to its handler."""
        kind = command.type

        if kind == CommandType.MOUNT:
            return await self.mount()
        if kind == CommandType.UNMOUNT:
            return await self.unmount()
        if kind == CommandType.INPUT_CHANGED:
            return self.on_input_changed(command.text or "")
        if kind == CommandType.INPUT_VALUE_RECEIVED:
            return self.receive_input_value(command.text)
        if kind in (CommandType.KEY_ENTER, CommandType.SEARCH_BUTTON):
            if kind == CommandType.KEY_ENTER and command.suggestion_highlighted:
                return None
            return await self.submit(self.state.search_input_value)
        if kind == CommandType.KEY_ESCAPE:
            return await self.submit("", is_reset=True)
        if kind == CommandType.CLEAR:
            await self.change_input_now("")
            return await self.submit("", is_reset=True)
        if kind == CommandType.SUGGESTION_SELECTED:
            if command.suggestion is None:
                raise ValueError("SUGGESTION_SELECTED requires a suggestion")
            return await self.on_suggestion_selected(command.suggestion)
        if kind == CommandType.SUGGESTION_CLICKED:
            if command.suggestion is None:
                raise ValueError("SUGGESTION_CLICKED requires a suggestion")
            return self.on_suggestion_clicked(command.suggestion)
        if kind == CommandType.PROVIDERS_CHANGED:
            return await self.update_providers(command.providers)
        if kind == CommandType.DISMISS_ERROR:
            return self.dismiss_error()

        raise ValueError(f"Unsupported command: {kind}")
