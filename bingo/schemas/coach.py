from pydantic import BaseModel, Field

from bingo.schemas.assessment import AssessmentResponse


class CoachProfileResponse(BaseModel):
    id: str
    user_id: str
    name: str | None = None
    email: str | None = None
    bio: str | None = None
    expertise: list[str] = []
    specialties: list[str] = []
    industries: list[str] = []
    availability: list[str] = []
    languages: list[str] = []
    certifications: list[str] = []
    years_experience: int | None = None
    coaching_style: str | None = None
    hourly_rate: float | None = None
    rating: float | None = None
    location: str | None = None

    class Config:
        from_attributes = True


class CoachProfileUpdate(BaseModel):
    bio: str | None = None
    expertise: list[str] | None = None
    specialties: list[str] | None = None
    industries: list[str] | None = None
    availability: list[str] | None = None
    languages: list[str] | None = None
    certifications: list[str] | None = None
    years_experience: int | None = Field(default=None, ge=0)
    coaching_style: str | None = None
    hourly_rate: float | None = Field(default=None, ge=0)


class SeekerResponse(BaseModel):
    id: str
    name: str | None = None
    email: str
    bio: str | None = None
    location: str | None = None
    assessment_completed: bool = False

    class Config:
        from_attributes = True


class SeekerDetailResponse(SeekerResponse):
    assessment: AssessmentResponse | None = None
