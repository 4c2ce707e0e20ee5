"""Suggestion provider backed by a JSON HTTP endpoint."""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import BaseModel, Field, ValidationError

from models.errors import ProviderFetchError
from models.suggestion import Suggestion, SuggestionType
from providers.base import BaseSuggestionProvider
from utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT_S = 5.0


class SuggestionPayload(BaseModel):
    """One suggestion as returned by the endpoint."""

    display_text: str = Field(..., min_length=1, alias="displayText")
    group_name: str | None = Field(None, alias="groupName")
    type: SuggestionType = SuggestionType.GENERIC
    job_title: str | None = Field(None, alias="jobTitle")
    email_address: str | None = Field(None, alias="emailAddress")
    icon: str | None = None
    target_url: str | None = Field(None, alias="targetUrl")

    model_config = {"populate_by_name": True, "extra": "ignore"}

    def to_suggestion(self) -> Suggestion:
        return Suggestion(
            display_text=self.display_text,
            group_name=self.group_name,
            type=self.type,
            job_title=self.job_title,
            email_address=self.email_address,
            icon=self.icon,
            target_url=self.target_url,
        )


def parse_suggestions(provider: str, payload: Any) -> list[Suggestion]:
    """
    Accept either a bare JSON list or {"suggestions": [...]}.

    Raises:
        ProviderFetchError: If the payload shape is not recognized
    """
    items = payload.get("suggestions") if isinstance(payload, dict) else payload
    if not isinstance(items, list):
        raise ProviderFetchError(provider, "response is not a list of suggestions")
    try:
        return [SuggestionPayload.model_validate(item).to_suggestion() for item in items]
    except ValidationError as e:
        raise ProviderFetchError(provider, f"invalid suggestion payload: {e.error_count()} error(s)") from e


class HttpSuggestionProvider(BaseSuggestionProvider):
    """
    Calls `GET {url}?{term_parameter}=<term>` for term suggestions and
    `GET {zero_term_url}` for zero-term suggestions.
    """

    def __init__(
        self,
        name: str,
        url: str,
        zero_term_url: str | None = None,
        term_parameter: str = "q",
        headers: dict[str, str] | None = None,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        enabled: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
        **kwargs,
    ):
        super().__init__(name=name, enabled=enabled, **kwargs)
        if not url:
            raise ValueError(f"url is required for HTTP provider '{name}'")
        self.url = url
        self.zero_term_url = zero_term_url
        self.term_parameter = term_parameter
        self.headers = dict(headers or {})
        self.timeout_s = timeout_s
        self._transport = transport
        self.supports_term_suggestions = True
        self.supports_zero_term_suggestions = bool(zero_term_url)

    async def _get_json(self, url: str, params: dict[str, str] | None = None) -> Any:
        async with httpx.AsyncClient(
            timeout=self.timeout_s, headers=self.headers, transport=self._transport
        ) as client:
            response = await client.get(url, params=params)
            response.raise_for_status()
            return response.json() if response.content else []

    async def get_suggestions(self, term: str) -> list[Suggestion]:
        logger.debug(
            f"HTTP suggestion lookup for '{term}'",
            extra={"extra_fields": {"provider": self.name, "url": self.url}},
        )
        payload = await self._get_json(self.url, params={self.term_parameter: term})
        return parse_suggestions(self.name, payload)

    async def get_zero_term_suggestions(self) -> list[Suggestion]:
        if not self.zero_term_url:
            return []
        payload = await self._get_json(self.zero_term_url)
        return parse_suggestions(self.name, payload)

    def signature(self):
        return super().signature() + (self.url, self.zero_term_url, self.term_parameter)
