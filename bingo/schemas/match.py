from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class MatchRequestCreate(BaseModel):
    coach_id: str = Field(min_length=1)
    seeker_id: str = Field(min_length=1)
    match_score: float = Field(default=0, ge=0, le=100)
    match_reason: str | None = Field(default=None, max_length=2000)


class MatchRespond(BaseModel):
    match_id: str = Field(min_length=1)
    status: Literal["matched", "declined"]


class MatchResponse(BaseModel):
    id: str
    coach_id: str
    seeker_id: str
    status: str
    match_score: float
    match_reason: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class ConversationResponse(BaseModel):
    id: str
    coach_id: str
    seeker_id: str
    match_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class MatchCreatedResponse(BaseModel):
    match: MatchResponse
    conversation: ConversationResponse


class MatchUpdatedResponse(BaseModel):
    match: MatchResponse
    message: str
