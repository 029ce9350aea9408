from pydantic import BaseModel, ConfigDict
from typing import Optional, List, Union
from datetime import datetime


class AppraisalResponse(BaseModel):
    """One answer on a submitted form."""
    question_id: str
    value: Union[int, float, str, None] = None
    text_feedback: Optional[str] = None


class AppraisalSubmission(BaseModel):
    responses: List[AppraisalResponse]


class ScoreDetail(BaseModel):
    question_id: str
    weight_score: float
    percentage_score: float


class ScoreResult(BaseModel):
    score: float
    max_score: float
    details: List[ScoreDetail] = []

    @property
    def percentage(self) -> float:
        return (self.score / self.max_score) * 100 if self.max_score > 0 else 0.0


class AppraisalOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    template_id: str
    employee_id: str
    appraiser_id: str
    review_period_id: str
    review_period_name: str
    relationship_type: Optional[str] = None
    responses: List[AppraisalResponse]
    score: float
    max_score: float
    percentage: float
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
