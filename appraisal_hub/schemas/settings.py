from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, Dict, Literal


class CompanySettingsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    accent_color: str
    theme: str
    hr_score_weight: int
    require_hr_for_ranking: bool
    employee_of_period_overrides: Dict[str, str] = {}


class CompanySettingsUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    accent_color: Optional[str] = Field(None, pattern="^#[0-9A-Fa-f]{6}$")
    theme: Optional[Literal["light", "dark", "system"]] = None
    hr_score_weight: Optional[int] = Field(None, ge=0, le=100)
    require_hr_for_ranking: Optional[bool] = None


class EmployeeOfPeriodOverride(BaseModel):
    employee_id: Optional[str] = None  # None clears the override
