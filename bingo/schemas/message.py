from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from bingo.schemas.match import ConversationResponse

# "system" is reserved for messages the platform writes itself
UserMessageType = Literal["text", "document_ref", "assessment_ref"]


class MessageCreate(BaseModel):
    type: UserMessageType = "text"
    content: str = Field(default="", max_length=10000)
    document_id: str | None = None
    assessment_id: str | None = None


class DirectMessageCreate(MessageCreate):
    """Body of POST /messages, where the conversation is named in the payload."""

    conversation_id: str = Field(min_length=1)


class MessageResponse(BaseModel):
    id: str
    conversation_id: str
    sender_id: str
    receiver_id: str
    type: str
    content: str
    document_id: str | None = None
    assessment_id: str | None = None
    created_at: datetime | None = None


class ConversationSummary(ConversationResponse):
    other_user_id: str
    match_status: str | None = None
    last_message_at: datetime | None = None


class ConversationDetail(ConversationResponse):
    match_status: str | None = None
    messages: list[MessageResponse] = []
