"""
QueryEnhancementAdapter - Best-effort query rewriting with raw fallback.
"""

from dataclasses import dataclass

from models.search_query import QueryEnhancement
from providers.enhancement_client import QueryEnhancementService
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class EnhancementOutcome:
    """
    Attributes:
        enhanced_query: Text to use as the enhanced query (raw text on failure)
        payload: Full service payload when enhancement succeeded
        error: Failure message when the service call failed
    """

    enhanced_query: str
    payload: QueryEnhancement | None = None
    error: str | None = None

    @property
    def used_fallback(self) -> bool:
        return self.payload is None


class QueryEnhancementAdapter:
    def __init__(self, service: QueryEnhancementService, is_staging: bool = False):
        self.service = service
        self.is_staging = is_staging

    async def enhance(self, text: str) -> EnhancementOutcome:
        """
        Enhance text through the service. Never raises: any failure falls back
        to the raw text.
        """
        try:
            payload = await self.service.enhance_search_query(text, self.is_staging)
            if payload is None or not isinstance(payload.enhanced_query, str):
                raise ValueError("enhancement service returned no enhanced query")
        except Exception as e:
            logger.warning(
                f"Query enhancement failed, using raw query: {e}",
                extra={"extra_fields": {"error": str(e), "error_type": type(e).__name__}},
            )
            return EnhancementOutcome(enhanced_query=text, error=str(e))

        logger.debug(
            "Query enhanced",
            extra={
                "extra_fields": {
                    "raw_query": text,
                    "enhanced_query": payload.enhanced_query,
                    "entity_count": len(payload.entities),
                }
            },
        )
        return EnhancementOutcome(enhanced_query=payload.enhanced_query, payload=payload)
