"""HTTP client for the query enhancement (NLP) service."""

from __future__ import annotations

from typing import Any, Protocol

import httpx
from pydantic import BaseModel, Field, ValidationError

from models.errors import EnhancementError
from models.search_query import QueryEnhancement
from utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT_S = 5.0


class QueryEnhancementService(Protocol):
    """Anything able to rewrite a raw query."""

    async def enhance_search_query(self, text: str, is_staging: bool) -> QueryEnhancement: ...


class EnhancementResponse(BaseModel):
    enhanced_query: str = Field(..., alias="enhancedQuery")
    entities: list[dict[str, Any]] = Field(default_factory=list)

    model_config = {"populate_by_name": True, "extra": "allow"}


class HttpQueryEnhancementService:
    """
    Posts {"query": ..., "isStaging": ...} to the enhancement endpoint.

    Every failure (transport, HTTP status, malformed body) is raised as
    EnhancementError so callers only have one exception type to degrade on.
    """

    def __init__(
        self,
        url: str,
        api_key: str | None = None,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not url:
            raise ValueError("Enhancement service url is required")
        self.url = url
        self.api_key = api_key
        self.timeout_s = timeout_s
        self._transport = transport

    async def enhance_search_query(self, text: str, is_staging: bool) -> QueryEnhancement:
        headers = {"x-api-key": self.api_key} if self.api_key else {}
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_s, headers=headers, transport=self._transport
            ) as client:
                response = await client.post(self.url, json={"query": text, "isStaging": is_staging})
                response.raise_for_status()
                body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise EnhancementError(f"Enhancement request failed: {e}") from e

        try:
            parsed = EnhancementResponse.model_validate(body)
        except ValidationError as e:
            raise EnhancementError(f"Invalid enhancement response: {e.error_count()} error(s)") from e

        return QueryEnhancement(
            enhanced_query=parsed.enhanced_query,
            entities=tuple(parsed.entities),
            raw=body if isinstance(body, dict) else {},
        )
