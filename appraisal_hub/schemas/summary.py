from pydantic import BaseModel, ConfigDict
from typing import List, Optional
from datetime import datetime


class BreakdownEntry(BaseModel):
    type: str
    score: float
    max_score: float


class PerformanceSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    employee_id: str
    period: str
    total_score: float
    max_score: float
    percentage: float
    strengths: List[str]
    improvements: List[str]
    narrative: str
    breakdown: List[BreakdownEntry]
    generated_at: Optional[datetime] = None
