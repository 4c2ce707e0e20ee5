from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class BatchTag:
    """Identifies one fetch batch and the term it was issued for."""

    batch_id: int
    term: str


class StaleGuard:
    """
    Decides whether a completed batch may still be applied.

    A batch is live when it is the most recently issued one and its term still
    equals the current authoritative term. Completion order does not matter.
    """

    def __init__(self, current_term: Callable[[], str]):
        self._current_term = current_term
        self._latest_batch_id = 0

    @property
    def latest_batch_id(self) -> int:
        return self._latest_batch_id

    def issue(self, term: str) -> BatchTag:
        self._latest_batch_id += 1
        return BatchTag(batch_id=self._latest_batch_id, term=term)

    def is_latest(self, tag: BatchTag) -> bool:
        return tag.batch_id == self._latest_batch_id

    def is_live(self, tag: BatchTag) -> bool:
        return self.is_latest(tag) and tag.term == self._current_term()

    def invalidate(self) -> None:
        """Make every outstanding batch stale."""
        self._latest_batch_id += 1
