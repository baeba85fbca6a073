from sqlalchemy import Column, String, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from bingo.database import Base

STATUS_PENDING = "pending"
STATUS_MATCHED = "matched"
STATUS_DECLINED = "declined"
MATCH_STATUSES = (STATUS_PENDING, STATUS_MATCHED, STATUS_DECLINED)


class CoachMatch(Base):
    """Coaching proposal between a coach user and a seeker user."""

    __tablename__ = "coach_matches"

    id = Column(String, primary_key=True, index=True)
    coach_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    seeker_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String, nullable=False, default=STATUS_PENDING)  # pending | matched | declined
    match_score = Column(Float, nullable=False, default=0)  # 0-100
    match_reason = Column(String)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    coach = relationship("User", foreign_keys=[coach_id])
    seeker = relationship("User", foreign_keys=[seeker_id])
    conversation = relationship("Conversation", back_populates="match", uselist=False)

    def other_party(self, user_id: str) -> str:
        return self.seeker_id if user_id == self.coach_id else self.coach_id
