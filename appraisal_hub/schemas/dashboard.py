from pydantic import BaseModel
from typing import Optional, List, Dict
from datetime import date, datetime


class TemplateScore(BaseModel):
    template_id: str
    name: str
    score: int  # average percentage, rounded
    count: int


class RecentCompletion(BaseModel):
    appraisal_id: str
    employee_id: str
    employee_name: str
    appraiser_id: str
    appraiser_name: str
    review_period_name: str
    percentage: float
    completed_at: Optional[datetime] = None


class DashboardStats(BaseModel):
    total_templates: int
    total_employees: int
    pending_appraisals: int
    completed_appraisals: int
    active_links: int
    hr_total: int
    hr_complete: int
    template_scores: List[TemplateScore]
    recent_completions: List[RecentCompletion]


class RankingEntry(BaseModel):
    rank: int
    employee_id: str
    employee_name: str
    hierarchy: str
    team_id: Optional[str] = None
    total_score: float
    total_max_score: float
    percentage: float
    appraisal_count: int
    hr_percentage: Optional[float] = None


class ScoreBucket(BaseModel):
    name: str
    range: str
    value: int


class RankingsResponse(BaseModel):
    review_period_id: Optional[str] = None
    rankings: List[RankingEntry]
    distribution: List[ScoreBucket]
    average: float
    top_performer: Optional[RankingEntry] = None


class TrackerRow(BaseModel):
    assignment_id: str
    appraiser_id: str
    appraiser_name: str
    employee_id: str
    employee_name: str
    relationship_type: str
    status: str
    appraisal_id: Optional[str] = None
    due_date: Optional[date] = None


class TrackerResponse(BaseModel):
    review_period_id: str
    rows: List[TrackerRow]
    total: int
    completed: int
    completion_rate: float
    by_relationship: Dict[str, Dict[str, int]]


class EmployeeOfPeriod(BaseModel):
    review_period_id: str
    employee_id: Optional[str] = None
    employee_name: Optional[str] = None
    percentage: Optional[float] = None
    overridden: bool = False
