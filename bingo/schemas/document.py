from datetime import datetime

from pydantic import BaseModel


class DocumentResponse(BaseModel):
    id: str
    user_id: str
    title: str
    file_name: str
    file_type: str | None = None
    file_size: int | None = None
    analyze_status: str
    created_at: datetime | None = None

    class Config:
        from_attributes = True
