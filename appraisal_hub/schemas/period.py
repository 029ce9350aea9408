from pydantic import BaseModel, Field, ConfigDict, model_validator
from typing import Optional
from datetime import date, datetime
from appraisal_hub.models.review_period import PeriodType, PeriodStatus


class ReviewPeriodBase(BaseModel):
    name: Optional[str] = Field(None, max_length=100)  # generated from type/year when omitted
    type: PeriodType = PeriodType.CUSTOM
    year: int = Field(..., ge=2000, le=2100)
    start_date: Optional[date] = None  # derived for quarter/half/annual when omitted
    end_date: Optional[date] = None
    status: PeriodStatus = PeriodStatus.PLANNING
    description: Optional[str] = None

    @model_validator(mode="after")
    def check_range(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class ReviewPeriodCreate(ReviewPeriodBase):
    pass


class ReviewPeriodUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[PeriodStatus] = None
    description: Optional[str] = None


class ReviewPeriodResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    type: PeriodType
    year: int
    start_date: date
    end_date: date
    status: PeriodStatus
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    is_active: Optional[bool] = None
    days_remaining: Optional[int] = None
