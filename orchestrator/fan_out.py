"""
SuggestionFanOut - Concurrent suggestion requests across providers.

Issues the same request to every eligible provider at once, isolates
per-provider failures and timeouts, and reports each result as soon as it
arrives as well as the full set once all calls have settled.
"""

import asyncio
import uuid
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from models.errors import ProviderFailure, ProviderFetchError
from models.suggestion import Suggestion
from utils.logger import get_logger

logger = get_logger(__name__)

ZERO_TERM = "<zero-term>"


@dataclass(frozen=True)
class ProviderFetchResult:
    """
    Outcome of one provider call.

    Attributes:
        index: Position of the provider in the eligible list (merge slot)
        provider: Provider name
        suggestions: Returned suggestions, empty on failure
        latency_ms: Wall time of the call
        error: Set when the call failed or timed out
    """

    index: int
    provider: str
    suggestions: tuple[Suggestion, ...] = field(default_factory=tuple)
    latency_ms: int = 0
    error: ProviderFailure | None = None

    @property
    def is_success(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class FanOutResult:
    """All provider results of one batch, in provider order."""

    batch_id: str
    term: str
    results: tuple[ProviderFetchResult, ...] = field(default_factory=tuple)

    @property
    def suggestions(self) -> list[Suggestion]:
        merged: list[Suggestion] = []
        for result in self.results:
            merged.extend(result.suggestions)
        return merged

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.is_success)

    @property
    def error_count(self) -> int:
        return sum(1 for r in self.results if not r.is_success)

    def __len__(self) -> int:
        return len(self.results)


def _provider_name(provider: Any) -> str:
    return str(getattr(provider, "name", None) or type(provider).__name__)


class SuggestionFanOut:
    """
    Provider-agnostic dispatcher, written against the provider interface only.

    Example usage:
        fan_out = SuggestionFanOut(default_timeout_s=5)
        result = await fan_out.fetch_suggestions("cat", providers)
        for r in result.results:
            print(r.provider, len(r.suggestions), r.error)
    """

    def __init__(self, default_timeout_s: float = 10.0):
        """
        Args:
            default_timeout_s: Timeout in seconds applied to each provider call
        """
        self.default_timeout_s = default_timeout_s

    @staticmethod
    def eligible_term_providers(providers: Sequence[Any] | None) -> list[Any]:
        return [
            p for p in (providers or ())
            if p is not None and p.enabled and p.supports_term_suggestions
        ]

    @staticmethod
    def eligible_zero_term_providers(providers: Sequence[Any] | None) -> list[Any]:
        return [
            p for p in (providers or ())
            if p is not None and p.enabled and p.supports_zero_term_suggestions
        ]

    def _failure(self, provider: str, code: str, message: str, **details) -> ProviderFailure:
        return ProviderFailure(
            code=code,
            message=message,
            provider=provider,
            retryable=code == "timeout",
            details=details,
        )

    async def _safe_fetch(
        self,
        index: int,
        provider: Any,
        fetch: Callable[[], Awaitable[Any]],
        term: str,
        timeout_s: float,
    ) -> ProviderFetchResult:
        """
        Run one provider call with timeout handling.
        Never raises for provider-side problems; they become a ProviderFailure.
        """
        name = _provider_name(provider)
        loop = asyncio.get_running_loop()
        start_time = loop.time()

        def elapsed_ms() -> int:
            return int((loop.time() - start_time) * 1000)

        try:
            suggestions = await asyncio.wait_for(fetch(), timeout=timeout_s)
            if suggestions is None:
                suggestions = []
            if not isinstance(suggestions, (list, tuple)):
                raise ProviderFetchError(name, f"expected a list, got {type(suggestions).__name__}")
            return ProviderFetchResult(
                index=index, provider=name, suggestions=tuple(suggestions), latency_ms=elapsed_ms()
            )

        except asyncio.TimeoutError:
            logger.warning(
                f"Suggestion provider {name} timed out",
                extra={"extra_fields": {"provider": name, "term": term, "timeout_s": timeout_s}},
            )
            return ProviderFetchResult(
                index=index,
                provider=name,
                latency_ms=elapsed_ms(),
                error=self._failure(
                    name, "timeout", f"Request timed out after {timeout_s}s", timeout_seconds=timeout_s
                ),
            )

        except ProviderFetchError as e:
            logger.warning(
                f"Suggestion provider {name} returned an invalid response: {e}",
                extra={"extra_fields": {"provider": name, "term": term}},
            )
            return ProviderFetchResult(
                index=index,
                provider=name,
                latency_ms=elapsed_ms(),
                error=self._failure(name, "invalid_response", str(e)),
            )

        except Exception as e:
            logger.warning(
                f"Suggestion provider {name} failed: {e}",
                extra={
                    "extra_fields": {
                        "provider": name,
                        "term": term,
                        "error": str(e),
                        "error_type": type(e).__name__,
                    }
                },
            )
            return ProviderFetchResult(
                index=index,
                provider=name,
                latency_ms=elapsed_ms(),
                error=self._failure(
                    name, "provider_error", f"Unexpected error: {e!s}", exception_type=type(e).__name__
                ),
            )

    async def _fan_out(
        self,
        term: str,
        calls: list[tuple[Any, Callable[[], Awaitable[Any]]]],
        on_result: Callable[[ProviderFetchResult], None] | None,
        timeout_s: float | None,
    ) -> FanOutResult:
        timeout = timeout_s or self.default_timeout_s
        batch_id = str(uuid.uuid4())

        logger.debug(
            f"Fanning out '{term}' to {len(calls)} providers",
            extra={"extra_fields": {"batch_id": batch_id, "provider_count": len(calls)}},
        )

        tasks = [
            asyncio.ensure_future(self._safe_fetch(index, provider, fetch, term, timeout))
            for index, (provider, fetch) in enumerate(calls)
        ]

        results: list[ProviderFetchResult | None] = [None] * len(tasks)
        try:
            for next_done in asyncio.as_completed(tasks):
                result = await next_done
                results[result.index] = result
                if on_result is not None:
                    on_result(result)
        except BaseException:
            # on_result failed: let sibling calls finish on their own, results are dropped
            for task in tasks:
                if not task.done():
                    task.add_done_callback(_consume_result)
            raise

        fan_out_result = FanOutResult(
            batch_id=batch_id, term=term, results=tuple(r for r in results if r is not None)
        )

        logger.debug(
            f"Fan-out complete: {fan_out_result.success_count} success, {fan_out_result.error_count} errors",
            extra={
                "extra_fields": {
                    "batch_id": batch_id,
                    "success_count": fan_out_result.success_count,
                    "error_count": fan_out_result.error_count,
                    "suggestion_count": len(fan_out_result.suggestions),
                }
            },
        )
        return fan_out_result

    async def fetch_suggestions(
        self,
        term: str,
        providers: Sequence[Any] | None,
        on_result: Callable[[ProviderFetchResult], None] | None = None,
        timeout_s: float | None = None,
    ) -> FanOutResult:
        """
        Ask every enabled, term-capable provider for suggestions.

        Args:
            term: Input term
            providers: Candidate providers; ineligible ones are skipped
            on_result: Called with each result as soon as it arrives
            timeout_s: Per-call timeout (defaults to self.default_timeout_s)

        Returns:
            FanOutResult with results in provider order
        """
        eligible = self.eligible_term_providers(providers)
        calls = [(p, (lambda p=p: p.get_suggestions(term))) for p in eligible]
        return await self._fan_out(term, calls, on_result, timeout_s)

    async def fetch_zero_term_suggestions(
        self,
        providers: Sequence[Any] | None,
        timeout_s: float | None = None,
    ) -> FanOutResult:
        """Ask every enabled, zero-term-capable provider for its empty-query suggestions."""
        eligible = self.eligible_zero_term_providers(providers)
        calls = [(p, p.get_zero_term_suggestions) for p in eligible]
        return await self._fan_out(ZERO_TERM, calls, None, timeout_s)


def _consume_result(task: "asyncio.Future[Any]") -> None:
    if not task.cancelled():
        task.exception()
