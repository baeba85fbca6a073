from datetime import datetime

from pydantic import BaseModel, Field


class AssessmentQuestion(BaseModel):
    question: str = Field(min_length=1)
    answer: str | None = None


class AssessmentSection(BaseModel):
    title: str = Field(min_length=1)
    description: str | None = None
    questions: list[AssessmentQuestion] = Field(default_factory=list)


class AssessmentCreate(BaseModel):
    disabilities: list[str]
    disability_details: str | None = None
    job_preferences: list[str]
    job_types: list[str]
    job_industry: str | None = None
    timeframe: str | None = None
    learning_styles: list[str]
    communication_styles: list[str]
    assistance_needed: list[str]
    additional_info: str | None = None
    sections: list[AssessmentSection] = Field(default_factory=list)


class AssessmentResponse(BaseModel):
    id: str
    user_id: str
    disabilities: list[str] = []
    disability_details: str | None = None
    job_preferences: list[str] = []
    job_types: list[str] = []
    job_industry: str | None = None
    timeframe: str | None = None
    learning_styles: list[str] = []
    communication_styles: list[str] = []
    assistance_needed: list[str] = []
    additional_info: str | None = None
    sections: list[AssessmentSection] = []
    created_at: datetime | None = None

    class Config:
        from_attributes = True
