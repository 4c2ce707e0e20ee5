from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SearchQuery:
    """Query handed to the search sink."""

    raw_input_value: str
    enhanced_query: str = ""

    @property
    def effective_query(self) -> str:
        return self.enhanced_query or self.raw_input_value

    def to_dict(self) -> dict[str, Any]:
        return {"raw_input_value": self.raw_input_value, "enhanced_query": self.enhanced_query}


@dataclass(frozen=True)
class QueryEnhancement:
    """
    Payload returned by a query enhancement service.

    `raw` keeps the service response untouched for the debug panel.
    """

    enhanced_query: str
    entities: tuple[dict[str, Any], ...] = field(default_factory=tuple)
    raw: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"enhanced_query": self.enhanced_query, "entities": list(self.entities), "raw": self.raw}
