from pydantic import BaseModel, ConfigDict
from typing import Optional, List
from datetime import datetime


class EmployeeProfileUpdate(BaseModel):
    photo_url: Optional[str] = None
    cover_url: Optional[str] = None
    position: Optional[str] = None
    bio: Optional[str] = None
    skills: Optional[List[str]] = None


class EmployeeProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    employee_id: str
    photo_url: Optional[str] = None
    cover_url: Optional[str] = None
    position: Optional[str] = None
    bio: Optional[str] = None
    skills: List[str] = []
    updated_at: Optional[datetime] = None
