from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional

from appraisal_hub.database import get_db
from appraisal_hub.schemas.dashboard import DashboardStats, EmployeeOfPeriod, RankingsResponse, TrackerResponse
from appraisal_hub.services.dashboard_service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/stats", response_model=DashboardStats)
def get_stats(db: Session = Depends(get_db)):
    return DashboardService(db).stats()


@router.get("/rankings", response_model=RankingsResponse)
def get_rankings(review_period_id: Optional[str] = None, db: Session = Depends(get_db)):
    """Ranked employees for one period, or across all periods when no period is given."""
    return DashboardService(db).rankings(review_period_id)


@router.get("/tracker/{period_id}", response_model=TrackerResponse)
def get_tracker(period_id: str, db: Session = Depends(get_db)):
    return DashboardService(db).tracker(period_id)


@router.get("/employee-of-period/{period_id}", response_model=EmployeeOfPeriod)
def get_employee_of_period(period_id: str, db: Session = Depends(get_db)):
    return DashboardService(db).employee_of_period(period_id)
