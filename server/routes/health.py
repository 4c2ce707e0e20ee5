"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from orchestrator.factory import EngineFactory
from server.dependencies import get_engine_factory
from server.schemas.responses import HealthResponseDTO

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponseDTO)
async def health_check(factory: EngineFactory = Depends(get_engine_factory)):
    """Health check endpoint."""
    return HealthResponseDTO(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        version="1.0.0",
        provider_count=len(factory.providers),
    )
