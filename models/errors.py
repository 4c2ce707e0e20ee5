"""Error taxonomy for the suggestion engine."""

from dataclasses import dataclass, field
from typing import Any


class SuggestBoxError(Exception):
    """Base class for engine errors."""


class ProviderFetchError(SuggestBoxError):
    """A single provider's fetch failed. Isolated from sibling providers."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class BatchError(SuggestBoxError):
    """Unexpected failure while running a suggestion batch. Shown to the user."""


class EnhancementError(SuggestBoxError):
    """The enhancement service failed. Never shown to the user."""


class SelectionHandlerError(SuggestBoxError):
    """A suggestion's custom selection handler raised. Logged only."""


class NavigationError(SuggestBoxError):
    """Opening a destination URL failed."""


@dataclass(frozen=True)
class ProviderFailure:
    code: str
    message: str
    provider: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        valid_codes = {"timeout", "provider_error", "invalid_response", "unknown"}
        if self.code not in valid_codes:
            object.__setattr__(self, "code", "unknown")
