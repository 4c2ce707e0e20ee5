"""
ZeroTermSuggestionCache - Memoizes the suggestions shown for an empty query.

Populated once per provider-set lifetime; only a forced refresh (provider set
changed) fetches again.
"""

from collections.abc import Sequence
from typing import Any

from models.engine_state import EngineState
from orchestrator.fan_out import SuggestionFanOut
from utils.logger import get_logger

logger = get_logger(__name__)


class ZeroTermSuggestionCache:
    def __init__(self, fan_out: SuggestionFanOut):
        self._fan_out = fan_out
        self._generation = 0
        self.fetch_count = 0

    async def ensure(
        self,
        state: EngineState,
        providers: Sequence[Any] | None,
        force_refresh: bool = False,
        publish: bool = True,
    ) -> bool:
        """
        Make sure the zero-term cache in `state` is populated.

        A forced refresh supersedes a fetch that is still in flight; the older
        fetch's result is dropped when it lands.

        Args:
            state: Engine state holding the cache and its flags
            providers: Current provider set
            force_refresh: Fetch even if already populated
            publish: Show the result as proposed suggestions while the input is empty

        Returns:
            True if a fetch was performed
        """
        if not force_refresh and (
            state.has_retrieved_zero_term_suggestions or state.is_retrieving_zero_term_suggestions
        ):
            return False

        self._generation += 1
        generation = self._generation

        eligible = self._fan_out.eligible_zero_term_providers(providers)
        if not eligible:
            # Nothing can provide zero-term suggestions; remember that instead of probing again
            state.zero_term_suggestions = []
            state.has_retrieved_zero_term_suggestions = True
            state.is_retrieving_zero_term_suggestions = False
            return False

        state.zero_term_suggestions = []
        state.is_retrieving_zero_term_suggestions = True
        self.fetch_count += 1

        try:
            result = await self._fan_out.fetch_zero_term_suggestions(eligible)
        except Exception:
            if generation == self._generation:
                state.is_retrieving_zero_term_suggestions = False
            raise

        if generation != self._generation:
            logger.debug(
                "Discarding superseded zero-term suggestions",
                extra={"extra_fields": {"generation": generation, "current": self._generation}},
            )
            return True

        merged = result.suggestions
        state.zero_term_suggestions = merged
        state.has_retrieved_zero_term_suggestions = True
        state.is_retrieving_zero_term_suggestions = False
        if publish and not state.search_input_value:
            state.proposed_suggestions = list(merged)

        logger.info(
            f"Zero-term suggestions cached ({len(merged)})",
            extra={
                "extra_fields": {
                    "suggestion_count": len(merged),
                    "provider_count": len(eligible),
                    "error_count": result.error_count,
                }
            },
        )
        return True

    def invalidate(self) -> None:
        """Drop any fetch in flight."""
        self._generation += 1
