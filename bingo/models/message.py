from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from bingo.database import Base

TYPE_TEXT = "text"
TYPE_DOCUMENT_REF = "document_ref"
TYPE_ASSESSMENT_REF = "assessment_ref"
TYPE_SYSTEM = "system"
MESSAGE_TYPES = (TYPE_TEXT, TYPE_DOCUMENT_REF, TYPE_ASSESSMENT_REF, TYPE_SYSTEM)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Message(Base):
    """One entry in a conversation. Content holds ciphertext only."""

    __tablename__ = "messages"

    id = Column(String, primary_key=True, index=True)
    conversation_id = Column(String, ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False, index=True)
    sender_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    receiver_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    type = Column(String, nullable=False, default=TYPE_TEXT)
    content = Column(Text, nullable=False)
    document_id = Column(String, ForeignKey("documents.id", ondelete="SET NULL"), nullable=True)
    assessment_id = Column(String, ForeignKey("assessments.id", ondelete="SET NULL"), nullable=True)
    # Assigned in Python for sub-second ordering on every backend
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)

    conversation = relationship("Conversation", back_populates="messages")
    sender = relationship("User", foreign_keys=[sender_id])
