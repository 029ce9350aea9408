from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime


class TeamBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    leader_ids: List[str] = []
    oversight_executive_id: Optional[str] = None


class TeamCreate(TeamBase):
    pass


class TeamUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    leader_ids: Optional[List[str]] = None
    oversight_executive_id: Optional[str] = None


class TeamResponse(TeamBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: Optional[datetime] = None
    member_count: Optional[int] = None
