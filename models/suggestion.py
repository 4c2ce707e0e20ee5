"""
Suggestion - Immutable value object produced by suggestion providers.

A suggestion is what a provider proposes for a term (or for an empty query).
Once produced it is never mutated by the engine.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

DEFAULT_SUGGESTION_GROUP_NAME = "Suggestions"

_HIGHLIGHT_MARKUP = re.compile(r"</?b>", re.IGNORECASE)


class SuggestionType(str, Enum):
    """Variant kind of a suggestion."""

    GENERIC = "generic"
    PERSON = "person"


def strip_highlight_markup(text: str) -> str:
    """Remove <B>...</B> highlight tags added by providers."""
    return _HIGHLIGHT_MARKUP.sub("", text or "")


@dataclass(frozen=True)
class Suggestion:
    """
    A single proposed suggestion.

    Attributes:
        display_text: Label shown to the user, may contain <B> highlight markup
        group_name: Group heading; missing or blank names fall into the default group
        type: Generic text or person suggestion
        job_title: Person suggestions only
        email_address: Person suggestions only
        icon: Optional icon reference (URL or icon name)
        target_url: When set the suggestion is a link and never submits a query
        on_suggestion_selected: Optional custom handler called on selection
        metadata: Free-form provider data
    """

    display_text: str
    group_name: str | None = None
    type: SuggestionType = SuggestionType.GENERIC
    job_title: str | None = None
    email_address: str | None = None
    icon: str | None = None
    target_url: str | None = None
    on_suggestion_selected: Optional[Callable[["Suggestion"], Any]] = field(
        default=None, compare=False, repr=False
    )
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def plain_text(self) -> str:
        return strip_highlight_markup(self.display_text)

    @property
    def is_link(self) -> bool:
        return bool(self.target_url)

    @property
    def is_person(self) -> bool:
        return self.type == SuggestionType.PERSON

    @property
    def person_fields(self) -> str:
        """Secondary line for person suggestions ("job title | email")."""
        if not self.is_person:
            return ""
        parts = [p for p in (self.job_title, self.email_address) if p]
        return " | ".join(parts)

    def resolved_group_name(self, default_group_name: str = DEFAULT_SUGGESTION_GROUP_NAME) -> str:
        name = (self.group_name or "").strip()
        return name or default_group_name

    def to_dict(self) -> dict[str, Any]:
        return {
            "display_text": self.display_text,
            "plain_text": self.plain_text,
            "group_name": self.group_name,
            "type": self.type.value,
            "job_title": self.job_title,
            "email_address": self.email_address,
            "icon": self.icon,
            "target_url": self.target_url,
        }
