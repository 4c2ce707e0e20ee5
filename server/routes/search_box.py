"""Search box session endpoints.

Each session wraps one SearchBoxEngine. Input changes are applied without
the debounce window: the HTTP client is expected to debounce keystrokes
itself, so every request returns the settled state for its term.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from server.dependencies import get_api_key, get_session, get_session_store
from server.schemas.requests import (
    CreateSessionRequest,
    InputChangeRequest,
    SelectSuggestionRequest,
    SubmitRequest,
)
from server.schemas.responses import SessionStateDTO
from server.sessions import SearchSession, SearchSessionStore
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/v1/sessions", tags=["Search Box"], dependencies=[Depends(get_api_key)])


def _request_id(http_request: Request) -> str:
    return getattr(http_request.state, "request_id", "unknown")


@router.post("", response_model=SessionStateDTO, status_code=status.HTTP_201_CREATED)
async def create_session(
    http_request: Request,
    request: CreateSessionRequest | None = None,
    store: SearchSessionStore = Depends(get_session_store),
):
    """Create a search box session and pre-warm its zero-term suggestions."""
    initial = request.initial_input_value if request else None
    session = store.create(initial_input_value=initial)
    await session.engine.mount()

    logger.info(
        "Search session created",
        extra={"extra_fields": {"request_id": _request_id(http_request), "session_id": session.session_id}},
    )
    return SessionStateDTO.from_session(session)


@router.get("/{session_id}", response_model=SessionStateDTO)
async def get_session_state(session: SearchSession = Depends(get_session)):
    return SessionStateDTO.from_session(session)


@router.post("/{session_id}/input", response_model=SessionStateDTO)
async def change_input(
    request: InputChangeRequest,
    session: SearchSession = Depends(get_session),
):
    """Apply a new input value and return the suggestions for it."""
    await session.engine.change_input_now(request.text)
    return SessionStateDTO.from_session(session)


@router.post("/{session_id}/select", response_model=SessionStateDTO)
async def select_suggestion(
    http_request: Request,
    request: SelectSuggestionRequest,
    session: SearchSession = Depends(get_session),
):
    """Select a suggestion by its presentation index."""
    try:
        await session.engine.select_index(request.index)
    except IndexError as e:
        logger.warning(
            str(e),
            extra={"extra_fields": {"request_id": _request_id(http_request), "session_id": session.session_id}},
        )
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return SessionStateDTO.from_session(session)


@router.post("/{session_id}/submit", response_model=SessionStateDTO)
async def submit_query(
    request: SubmitRequest,
    session: SearchSession = Depends(get_session),
):
    """Submit the given text (or the current input value), or reset the box."""
    engine = session.engine
    text = request.text if request.text is not None else engine.state.search_input_value
    if request.is_reset:
        await engine.change_input_now("")
        text = ""
    await engine.submit(text, is_reset=request.is_reset)
    return SessionStateDTO.from_session(session)


@router.post("/{session_id}/dismiss-error", response_model=SessionStateDTO)
async def dismiss_error(session: SearchSession = Depends(get_session)):
    session.engine.dismiss_error()
    return SessionStateDTO.from_session(session)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(
    session: SearchSession = Depends(get_session),
    store: SearchSessionStore = Depends(get_session_store),
):
    await session.engine.unmount()
    store.remove(session.session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
