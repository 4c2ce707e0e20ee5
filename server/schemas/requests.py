"""Pydantic request models for FastAPI endpoints."""

from typing import Optional

from pydantic import BaseModel, Field


class CreateSessionRequest(BaseModel):
    initial_input_value: Optional[str] = Field(None, max_length=2048)


class InputChangeRequest(BaseModel):
    text: str = Field("", max_length=2048)


class SelectSuggestionRequest(BaseModel):
    index: int = Field(..., ge=0)


class SubmitRequest(BaseModel):
    # None submits the current input value
    text: Optional[str] = Field(None, max_length=2048)
    is_reset: bool = False
