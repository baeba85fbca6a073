from sqlalchemy import Column, String, Text, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from bingo.database import Base


class Assessment(Base):
    """Seeker self-assessment, optionally extended with coach-authored sections."""

    __tablename__ = "assessments"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    disabilities = Column(JSON, nullable=False, default=list)
    disability_details = Column(Text)
    job_preferences = Column(JSON, nullable=False, default=list)
    job_types = Column(JSON, nullable=False, default=list)
    job_industry = Column(String)
    timeframe = Column(String)
    learning_styles = Column(JSON, nullable=False, default=list)
    communication_styles = Column(JSON, nullable=False, default=list)
    assistance_needed = Column(JSON, nullable=False, default=list)
    additional_info = Column(Text)
    # [{"title", "description", "questions": [{"question", "answer"}]}]
    sections = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="assessments")
