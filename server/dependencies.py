"""FastAPI dependencies for authentication and session access."""

import os

from fastapi import Depends, Header, HTTPException, Path, Request, status

from orchestrator.factory import EngineFactory
from server.sessions import SearchSession, SearchSessionStore
from server.utils import redact_sensitive_headers
from utils.logger import get_logger

logger = get_logger(__name__)


async def get_api_key(request: Request, x_api_key: str | None = Header(None)):
    """Validate API key from X-API-Key header."""
    valid_keys_str = os.getenv("API_KEYS", "")
    request_id = getattr(request.state, "request_id", "unknown")
    redacted_headers = redact_sensitive_headers(dict(request.headers))

    if not valid_keys_str:
        logger.error(
            "API authentication not configured",
            extra={"extra_fields": {"request_id": request_id, "headers": redacted_headers}},
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="API authentication not configured",
        )

    valid_keys = [k.strip() for k in valid_keys_str.split(",") if k.strip()]

    if not x_api_key or x_api_key not in valid_keys:
        logger.warning(
            "API authentication failed",
            extra={"extra_fields": {"request_id": request_id, "headers": redacted_headers}},
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or missing API key"
        )

    return x_api_key


def get_engine_factory() -> EngineFactory:
    """Dependency to get the engine factory (singleton pattern)."""
    if not hasattr(get_engine_factory, "_instance"):
        get_engine_factory._instance = EngineFactory.from_config()
    return get_engine_factory._instance


def get_session_store(factory: EngineFactory = Depends(get_engine_factory)) -> SearchSessionStore:
    """Dependency to get the session store (singleton pattern)."""
    if not hasattr(get_session_store, "_instance"):
        get_session_store._instance = SearchSessionStore(
            lambda navigator, on_search, initial: factory.create(
                navigator=navigator, on_search=on_search, initial_input_value=initial
            )
        )
    return get_session_store._instance


def get_session(
    session_id: str = Path(...),
    store: SearchSessionStore = Depends(get_session_store),
) -> SearchSession:
    session = store.get(session_id)
    if session is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Session {session_id} not found")
    return session
