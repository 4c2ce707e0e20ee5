"""
Models package for suggestion engine value objects and state.
"""

from .engine_state import EngineState
from .errors import (
    BatchError,
    EnhancementError,
    NavigationError,
    ProviderFailure,
    ProviderFetchError,
    SelectionHandlerError,
    SuggestBoxError,
)
from .events import CommandType, EngineCommand
from .search_query import QueryEnhancement, SearchQuery
from .suggestion import DEFAULT_SUGGESTION_GROUP_NAME, Suggestion, SuggestionType

__all__ = [
    "BatchError",
    "CommandType",
    "DEFAULT_SUGGESTION_GROUP_NAME",
    "EngineCommand",
    "EngineState",
    "EnhancementError",
    "NavigationError",
    "ProviderFailure",
    "ProviderFetchError",
    "QueryEnhancement",
    "SearchQuery",
    "SelectionHandlerError",
    "SuggestBoxError",
    "Suggestion",
    "SuggestionType",
]
