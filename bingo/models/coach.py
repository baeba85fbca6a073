from sqlalchemy import Column, String, Float, Integer, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from bingo.database import Base


class Coach(Base):
    """Coaching profile; one per coach user."""

    __tablename__ = "coaches"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    name = Column(String)
    email = Column(String)
    bio = Column(String)
    # String sets, stored as JSON lists
    expertise = Column(JSON, nullable=False, default=list)
    specialties = Column(JSON, nullable=False, default=list)
    industries = Column(JSON, nullable=False, default=list)
    availability = Column(JSON, nullable=False, default=list)
    languages = Column(JSON, nullable=False, default=list)
    certifications = Column(JSON, nullable=False, default=list)
    years_experience = Column(Integer)
    coaching_style = Column(String)
    hourly_rate = Column(Float)
    rating = Column(Float)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="coach_profile")
