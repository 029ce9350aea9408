from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional

from appraisal_hub.database import get_db
from appraisal_hub.schemas.summary import PerformanceSummaryResponse
from appraisal_hub.services.summary_service import SummaryService

router = APIRouter(prefix="/summaries", tags=["Performance Summaries"])


@router.get("/{employee_id}", response_model=PerformanceSummaryResponse)
def get_summary(employee_id: str, review_period_id: Optional[str] = None, db: Session = Depends(get_db)):
    """Last generated summary."""
    return SummaryService(db).get(employee_id, review_period_id)


@router.post("/{employee_id}", response_model=PerformanceSummaryResponse)
def generate_summary(employee_id: str, review_period_id: Optional[str] = None, db: Session = Depends(get_db)):
    return SummaryService(db).generate(employee_id, review_period_id)
