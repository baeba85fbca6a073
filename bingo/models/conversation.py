from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from bingo.database import Base


class Conversation(Base):
    __tablename__ = "conversations"

    id = Column(String, primary_key=True, index=True)
    coach_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    seeker_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # Unique so get-or-create by match cannot produce two rows
    match_id = Column(String, ForeignKey("coach_matches.id", ondelete="SET NULL"), unique=True, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    match = relationship("CoachMatch", back_populates="conversation")
    coach = relationship("User", foreign_keys=[coach_id])
    seeker = relationship("User", foreign_keys=[seeker_id])
    messages = relationship("Message", back_populates="conversation", order_by="Message.created_at")

    def has_participant(self, user_id: str) -> bool:
        return user_id in (self.coach_id, self.seeker_id)

    def other_participant(self, user_id: str) -> str:
        return self.seeker_id if user_id == self.coach_id else self.coach_id
