from abc import ABC, abstractmethod
from typing import Any, Hashable, Iterable

from models.suggestion import Suggestion


class BaseSuggestionProvider(ABC):
    """
    Abstract base class for suggestion providers.
    All providers should inherit from this class and implement its methods.

    The engine reads `enabled` and the two capability flags and calls the
    fetch methods. It never changes any of them; `enabled` belongs to the owner
    of the provider.
    """

    supports_term_suggestions: bool = True
    supports_zero_term_suggestions: bool = False

    def __init__(self, name: str, enabled: bool = True, **kwargs):
        """
        Initialize the provider.

        Args:
            name: Identity of the provider, used in logs and equality checks
            enabled: Initial enabled flag
            **kwargs: Provider-specific parameters
        """
        self.name = name
        self.enabled = enabled

    @abstractmethod
    async def get_suggestions(self, term: str) -> list[Suggestion]:
        """
        Get suggestions for a term.

        Args:
            term: The text typed by the user

        Returns:
            Suggestions in the order they should be shown
        """

    async def get_zero_term_suggestions(self) -> list[Suggestion]:
        """
        Get suggestions to show while the input is empty.
        Only called when supports_zero_term_suggestions is True.
        """
        return []

    def signature(self) -> tuple[Hashable, ...]:
        """
        Structural snapshot of this provider.
        Subclasses with extra configuration should extend it.
        """
        return (
            type(self).__name__,
            self.name,
            bool(self.enabled),
            bool(self.supports_term_suggestions),
            bool(self.supports_zero_term_suggestions),
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, enabled={self.enabled!r})"


def provider_signature(provider: Any) -> tuple[Hashable, ...]:
    """Structural snapshot used to detect provider-set changes; tolerates duck-typed providers."""
    if provider is None:
        return (None,)
    if isinstance(provider, BaseSuggestionProvider):
        return provider.signature()
    return (
        type(provider).__name__,
        getattr(provider, "name", None),
        bool(getattr(provider, "enabled", False)),
        bool(getattr(provider, "supports_term_suggestions", False)),
        bool(getattr(provider, "supports_zero_term_suggestions", False)),
    )


def provider_set_signature(providers: Iterable[Any] | None) -> tuple[tuple[Hashable, ...], ...]:
    return tuple(provider_signature(p) for p in (providers or ()))
