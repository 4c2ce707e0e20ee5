import asyncio

import pytest
from dotenv import load_dotenv

from config.config import EngineSettings
from models.suggestion import Suggestion
from providers.base import BaseSuggestionProvider

# Load environment variables from .env file for tests
load_dotenv()


class FakeProvider(BaseSuggestionProvider):
    """
    In-memory provider with per-term answers and delays.

    Answers may be plain strings (turned into Suggestion) or Suggestion objects.
    """

    def __init__(
        self,
        name,
        answers=None,
        delays=None,
        zero_term=None,
        zero_term_delay=0.0,
        error=None,
        enabled=True,
    ):
        super().__init__(name=name, enabled=enabled)
        self.answers = answers or {}
        self.delays = delays or {}
        self.zero_term = zero_term
        self.zero_term_delay = zero_term_delay
        self.error = error
        self.calls = []
        self.zero_term_calls = 0
        self.supports_term_suggestions = answers is not None or error is not None
        self.supports_zero_term_suggestions = zero_term is not None

    @staticmethod
    def _build(items):
        return [s if isinstance(s, Suggestion) else Suggestion(display_text=s) for s in items]

    async def get_suggestions(self, term):
        self.calls.append(term)
        delay = self.delays.get(term, 0.0) if isinstance(self.delays, dict) else self.delays
        if delay:
            await asyncio.sleep(delay)
        if self.error is not None:
            raise self.error
        return self._build(self.answers.get(term, []))

    async def get_zero_term_suggestions(self):
        self.zero_term_calls += 1
        if self.zero_term_delay:
            await asyncio.sleep(self.zero_term_delay)
        return self._build(self.zero_term or [])


class RecordingSearchSink:
    """on_search callback that keeps every query it receives."""

    def __init__(self):
        self.queries = []

    def __call__(self, query):
        self.queries.append(query)

    @property
    def raw_values(self):
        return [q.raw_input_value for q in self.queries]


@pytest.fixture
def fake_provider():
    return FakeProvider


@pytest.fixture
def search_sink():
    return RecordingSearchSink()


@pytest.fixture
def fast_settings():
    """Engine settings with a short debounce window so tests stay quick."""
    return EngineSettings(debounce_window_ms=20, provider_timeout_s=2.0)
