"""Merging per-provider suggestion lists and grouping them for presentation."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from models.suggestion import DEFAULT_SUGGESTION_GROUP_NAME, Suggestion


class SuggestionMerger:
    """
    Accumulates provider results of one batch into provider-indexed slots.

    Results may arrive in any order; `merged()` always lists them in provider
    order. Duplicates across providers are kept.
    """

    def __init__(self, provider_count: int):
        self._slots: list[list[Suggestion] | None] = [None] * provider_count

    def add(self, index: int, suggestions: Iterable[Suggestion]) -> list[Suggestion]:
        self._slots[index] = list(suggestions)
        return self.merged()

    def merged(self) -> list[Suggestion]:
        merged: list[Suggestion] = []
        for slot in self._slots:
            if slot:
                merged.extend(slot)
        return merged

    @property
    def received_count(self) -> int:
        return sum(1 for slot in self._slots if slot is not None)


@dataclass(frozen=True)
class IndexedSuggestion:
    """A suggestion together with its position in the flattened presentation list."""

    suggestion: Suggestion
    index: int


@dataclass(frozen=True)
class SuggestionGroup:
    group_name: str
    items: tuple[IndexedSuggestion, ...] = field(default_factory=tuple)

    @property
    def suggestions(self) -> list[Suggestion]:
        return [item.suggestion for item in self.items]


def group_suggestions(
    suggestions: Sequence[Suggestion],
    default_group_name: str = DEFAULT_SUGGESTION_GROUP_NAME,
) -> list[SuggestionGroup]:
    """
    Partition suggestions by group name.

    Groups appear in first-seen order and keep arrival order inside a group.
    Item indexes number the suggestions in the order they are presented
    (group by group), which is what keyboard highlighting walks through.

    Args:
        suggestions: Flat list of proposed suggestions
        default_group_name: Group for missing or blank group names

    Returns:
        Ordered list of SuggestionGroup
    """
    buckets: dict[str, list[Suggestion]] = {}
    for suggestion in suggestions:
        if suggestion is None:
            continue
        name = suggestion.resolved_group_name(default_group_name)
        buckets.setdefault(name, []).append(suggestion)

    groups: list[SuggestionGroup] = []
    position = 0
    for name, members in buckets.items():
        items = []
        for suggestion in members:
            items.append(IndexedSuggestion(suggestion=suggestion, index=position))
            position += 1
        groups.append(SuggestionGroup(group_name=name, items=tuple(items)))
    return groups


def flatten_groups(groups: Iterable[SuggestionGroup]) -> list[Suggestion]:
    """Presentation-ordered suggestions (the order item indexes refer to)."""
    return [item.suggestion for group in groups for item in group.items]
