"""Navigation sinks: where destination URLs get opened."""

import webbrowser
from dataclasses import dataclass
from typing import Protocol

from models.errors import NavigationError
from utils.logger import get_logger

logger = get_logger(__name__)


class Navigator(Protocol):
    def open(self, url: str, target: str) -> None:
        """Open url in target "_self" (current tab) or "_blank" (new browsing context)."""
        ...


@dataclass(frozen=True)
class NavigationRequest:
    url: str
    target: str


class RecordingNavigator:
    """Keeps navigation requests for a caller that performs them itself (HTTP clients, tests)."""

    def __init__(self):
        self.requests: list[NavigationRequest] = []

    def open(self, url: str, target: str) -> None:
        self.requests.append(NavigationRequest(url=url, target=target))

    def drain(self) -> list[NavigationRequest]:
        requests, self.requests = self.requests, []
        return requests


class WebBrowserNavigator:
    """Opens URLs in the local web browser."""

    def open(self, url: str, target: str) -> None:
        new = 2 if target == "_blank" else 0
        logger.info(f"Opening {url}", extra={"extra_fields": {"target": target}})
        if not webbrowser.open(url, new=new):
            raise NavigationError(f"No browser available to open {url}")
