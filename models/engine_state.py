"""
EngineState - Mutable state owned by a single SearchBoxEngine.

All suggestion, cache and submission state of one search box lives here.
The engine creates it on construction and is the only writer.
"""

from dataclasses import dataclass, field
from typing import Any

from models.search_query import QueryEnhancement
from models.suggestion import Suggestion


@dataclass
class EngineState:
    """
    Attributes:
        search_input_value: Text currently shown in the input (authoritative term)
        term_to_suggest_from: Term the current proposed batch was computed from
        proposed_suggestions: Flat list of suggestions currently proposed
        selected_suggestions: History of selected (non-link) suggestions
        zero_term_suggestions: Cached suggestions for the empty query
        has_retrieved_zero_term_suggestions: Zero-term cache populated flag
        is_retrieving_suggestions: Term-suggestion batch in flight
        is_retrieving_zero_term_suggestions: Zero-term fetch in flight
        error_message: Last user-visible error, dismissible
        show_clear_button: Whether the clear button is visible
        last_suggestion_clicked: Last link suggestion opened
        enhanced_query: Last enhancement payload, kept only in debug mode
    """

    search_input_value: str = ""
    term_to_suggest_from: str | None = None
    proposed_suggestions: list[Suggestion] = field(default_factory=list)
    selected_suggestions: list[Suggestion] = field(default_factory=list)
    zero_term_suggestions: list[Suggestion] = field(default_factory=list)
    has_retrieved_zero_term_suggestions: bool = False
    is_retrieving_suggestions: bool = False
    is_retrieving_zero_term_suggestions: bool = False
    error_message: str | None = None
    show_clear_button: bool = False
    last_suggestion_clicked: Suggestion | None = None
    enhanced_query: QueryEnhancement | None = None

    @property
    def show_spinner(self) -> bool:
        """Loading indicator: a batch is running with nothing proposed yet, or zero-term loading on an empty box."""
        return (self.is_retrieving_suggestions and not self.proposed_suggestions) or (
            self.is_retrieving_zero_term_suggestions and not self.search_input_value
        )

    def clear_proposed(self) -> None:
        self.proposed_suggestions = []

    def to_dict(self) -> dict[str, Any]:
        return {
            "search_input_value": self.search_input_value,
            "term_to_suggest_from": self.term_to_suggest_from,
            "proposed_suggestions": [s.to_dict() for s in self.proposed_suggestions],
            "selected_suggestions": [s.to_dict() for s in self.selected_suggestions],
            "has_retrieved_zero_term_suggestions": self.has_retrieved_zero_term_suggestions,
            "is_retrieving_suggestions": self.is_retrieving_suggestions,
            "is_retrieving_zero_term_suggestions": self.is_retrieving_zero_term_suggestions,
            "error_message": self.error_message,
            "show_clear_button": self.show_clear_button,
            "show_spinner": self.show_spinner,
            "enhancement": self.enhanced_query.to_dict() if self.enhanced_query else None,
        }
