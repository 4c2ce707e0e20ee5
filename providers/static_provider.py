"""In-memory suggestion provider backed by a fixed list of candidates."""

import re
from dataclasses import replace
from typing import Iterable

from models.suggestion import Suggestion
from providers.base import BaseSuggestionProvider


def highlight_match(text: str, term: str) -> str | None:
    """
    Wrap the first case-insensitive occurrence of term in <B></B>.

    Returns:
        Highlighted text, or None when term does not occur in text
    """
    if not term:
        return None
    match = re.search(re.escape(term), text, flags=re.IGNORECASE)
    if not match:
        return None
    start, end = match.span()
    return f"{text[:start]}<B>{text[start:end]}</B>{text[end:]}"


class StaticSuggestionProvider(BaseSuggestionProvider):
    """
    Suggests from a fixed candidate list.

    Example:
        provider = StaticSuggestionProvider(
            "docs",
            suggestions=[Suggestion("Travel policy", group_name="Documents")],
            zero_term_suggestions=[Suggestion("Holidays", group_name="Trending")],
        )
    """

    def __init__(
        self,
        name: str,
        suggestions: Iterable[Suggestion] = (),
        zero_term_suggestions: Iterable[Suggestion] | None = None,
        max_results: int = 10,
        enabled: bool = True,
        **kwargs,
    ):
        super().__init__(name=name, enabled=enabled, **kwargs)
        self._suggestions = tuple(suggestions)
        self._zero_term_suggestions = tuple(zero_term_suggestions or ())
        self.max_results = max_results
        self.supports_term_suggestions = bool(self._suggestions)
        self.supports_zero_term_suggestions = zero_term_suggestions is not None

    async def get_suggestions(self, term: str) -> list[Suggestion]:
        matches: list[Suggestion] = []
        for candidate in self._suggestions:
            highlighted = highlight_match(candidate.plain_text, term.strip())
            if highlighted is None:
                continue
            matches.append(replace(candidate, display_text=highlighted))
            if len(matches) >= self.max_results:
                break
        return matches

    async def get_zero_term_suggestions(self) -> list[Suggestion]:
        return list(self._zero_term_suggestions[: self.max_results])

    def signature(self):
        return super().signature() + (self._suggestions, self._zero_term_suggestions, self.max_results)
