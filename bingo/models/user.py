from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from bingo.database import Base

ROLE_SEEKER = "seeker"
ROLE_COACH = "coach"


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    name = Column(String)
    first_name = Column(String)
    last_name = Column(String)
    role = Column(String, nullable=False, default=ROLE_SEEKER)  # seeker | coach
    is_coach = Column(Boolean, nullable=False, default=False)
    bio = Column(String)
    location = Column(String)
    phone = Column(String)
    assessment_completed = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    coach_profile = relationship("Coach", back_populates="user", uselist=False)
    documents = relationship("Document", back_populates="user")
    assessments = relationship("Assessment", back_populates="user")
