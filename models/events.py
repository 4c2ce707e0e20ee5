"""Commands consumed by SearchBoxEngine.handle()."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence

from models.suggestion import Suggestion


class CommandType(str, Enum):
    MOUNT = "mount"
    INPUT_CHANGED = "input_changed"
    INPUT_VALUE_RECEIVED = "input_value_received"
    KEY_ENTER = "key_enter"
    KEY_ESCAPE = "key_escape"
    CLEAR = "clear"
    SEARCH_BUTTON = "search_button"
    SUGGESTION_SELECTED = "suggestion_selected"
    SUGGESTION_CLICKED = "suggestion_clicked"
    PROVIDERS_CHANGED = "providers_changed"
    DISMISS_ERROR = "dismiss_error"
    UNMOUNT = "unmount"


@dataclass(frozen=True)
class EngineCommand:
    """
    A UI event translated into an engine command.

    Attributes:
        type: Command kind
        text: Input text (INPUT_CHANGED, INPUT_VALUE_RECEIVED)
        suggestion: Target suggestion (SUGGESTION_SELECTED, SUGGESTION_CLICKED)
        providers: New provider list (PROVIDERS_CHANGED)
        suggestion_highlighted: KEY_ENTER while a suggestion is highlighted is left to selection
    """

    type: CommandType
    text: str | None = None
    suggestion: Suggestion | None = None
    providers: Sequence[Any] | None = None
    suggestion_highlighted: bool = False
