from typing import Literal

from pydantic import BaseModel, EmailStr, Field, field_validator


class UserRegister(BaseModel):
    email: EmailStr
    password: str
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    role: Literal["seeker", "coach"] = "seeker"
    bio: str | None = None
    location: str | None = None
    phone: str | None = None

    # Coach-only profile fields; ignored for seekers
    expertise: list[str] = Field(default_factory=list)
    specialties: list[str] = Field(default_factory=list)
    industries: list[str] = Field(default_factory=list)
    availability: list[str] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)
    years_experience: int | None = Field(default=None, ge=0)
    coaching_style: str | None = None
    hourly_rate: float | None = Field(default=None, ge=0)

    @field_validator("password")
    @classmethod
    def password_min_length(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters")
        return v


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    id: str
    email: str
    name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    role: str
    is_coach: bool = False
    bio: str | None = None
    location: str | None = None
    phone: str | None = None
    assessment_completed: bool = False

    class Config:
        from_attributes = True


class UserProfileUpdate(BaseModel):
    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    bio: str | None = None
    location: str | None = None
    phone: str | None = None


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
