"""Pydantic response models (DTOs) for FastAPI endpoints."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class SuggestionDTO(BaseModel):
    index: int
    display_text: str
    plain_text: str
    group_name: Optional[str] = None
    type: str
    job_title: Optional[str] = None
    email_address: Optional[str] = None
    icon: Optional[str] = None
    target_url: Optional[str] = None

    @classmethod
    def from_indexed(cls, item):
        s = item.suggestion
        return cls(
            index=item.index,
            display_text=s.display_text,
            plain_text=s.plain_text,
            group_name=s.group_name,
            type=s.type.value,
            job_title=s.job_title,
            email_address=s.email_address,
            icon=s.icon,
            target_url=s.target_url,
        )


class SuggestionGroupDTO(BaseModel):
    group_name: str
    suggestions: list[SuggestionDTO]


class NavigationDTO(BaseModel):
    url: str
    target: str


class SearchQueryDTO(BaseModel):
    raw_input_value: str
    enhanced_query: str


class SessionStateDTO(BaseModel):
    session_id: str
    search_input_value: str
    term_to_suggest_from: Optional[str] = None
    groups: list[SuggestionGroupDTO] = Field(default_factory=list)
    has_retrieved_zero_term_suggestions: bool
    is_retrieving_suggestions: bool
    is_retrieving_zero_term_suggestions: bool
    show_spinner: bool
    show_clear_button: bool
    error_message: Optional[str] = None
    navigations: list[NavigationDTO] = Field(default_factory=list)
    submitted_queries: list[SearchQueryDTO] = Field(default_factory=list)
    enhancement: Optional[dict[str, Any]] = None

    @classmethod
    def from_session(cls, session):
        """
        Snapshot a SearchSession.

        Pending navigations and submitted queries are handed over once and
        then cleared, so the client acts on each exactly once.
        """
        engine = session.engine
        state = engine.state
        submitted = list(session.submitted_queries)
        session.submitted_queries.clear()

        return cls(
            session_id=session.session_id,
            search_input_value=state.search_input_value,
            term_to_suggest_from=state.term_to_suggest_from,
            groups=[
                SuggestionGroupDTO(
                    group_name=group.group_name,
                    suggestions=[SuggestionDTO.from_indexed(item) for item in group.items],
                )
                for group in engine.suggestion_groups
            ],
            has_retrieved_zero_term_suggestions=state.has_retrieved_zero_term_suggestions,
            is_retrieving_suggestions=state.is_retrieving_suggestions,
            is_retrieving_zero_term_suggestions=state.is_retrieving_zero_term_suggestions,
            show_spinner=state.show_spinner,
            show_clear_button=state.show_clear_button,
            error_message=state.error_message,
            navigations=[NavigationDTO(url=r.url, target=r.target) for r in session.navigator.drain()],
            submitted_queries=[
                SearchQueryDTO(raw_input_value=q.raw_input_value, enhanced_query=q.enhanced_query)
                for q in submitted
            ],
            enhancement=state.enhanced_query.to_dict() if state.enhanced_query else None,
        )


class HealthResponseDTO(BaseModel):
    status: str
    timestamp: str
    version: str = "1.0.0"
    provider_count: int = 0
