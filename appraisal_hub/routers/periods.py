from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from appraisal_hub.core.state import AppState, get_app_state
from appraisal_hub.database import get_db
from appraisal_hub.models.review_period import PeriodStatus
from appraisal_hub.schemas.period import ReviewPeriodCreate, ReviewPeriodResponse, ReviewPeriodUpdate
from appraisal_hub.services.period_service import (
    PeriodService,
    current_half,
    current_quarter,
    generate_period_name,
    period_dates,
)

router = APIRouter(prefix="/periods", tags=["Review Periods"])


@router.get("/", response_model=List[ReviewPeriodResponse])
def list_periods(
    status_filter: Optional[PeriodStatus] = Query(None, alias="status"),
    year: Optional[int] = None,
    db: Session = Depends(get_db),
):
    service = PeriodService(db)
    return [service.describe(p) for p in service.list_periods(status=status_filter, year=year)]


@router.get("/suggestion")
def suggest_period(half_year: bool = False):
    """Defaults for a new period covering today: the current quarter, or half when ``half_year``."""
    today = date.today()
    period_type = current_half(today) if half_year else current_quarter(today)
    start, end = period_dates(period_type, today.year)
    return {
        "type": period_type.value,
        "year": today.year,
        "name": generate_period_name(period_type, today.year),
        "start_date": start,
        "end_date": end,
    }


@router.get("/active", response_model=List[ReviewPeriodResponse])
def list_active_periods(db: Session = Depends(get_db)):
    """Periods with status active whose date range covers today."""
    service = PeriodService(db)
    return [service.describe(p) for p in service.active_periods()]


@router.post("/", response_model=ReviewPeriodResponse, status_code=status.HTTP_201_CREATED)
def create_period(
    data: ReviewPeriodCreate,
    db: Session = Depends(get_db),
    state: AppState = Depends(get_app_state),
):
    service = PeriodService(db, state)
    return service.describe(service.create(data))


@router.get("/{period_id}", response_model=ReviewPeriodResponse)
def get_period(period_id: str, db: Session = Depends(get_db)):
    service = PeriodService(db)
    return service.describe(service.get(period_id))


@router.patch("/{period_id}", response_model=ReviewPeriodResponse)
def update_period(
    period_id: str,
    data: ReviewPeriodUpdate,
    db: Session = Depends(get_db),
    state: AppState = Depends(get_app_state),
):
    service = PeriodService(db, state)
    return service.describe(service.update(period_id, data))


@router.delete("/{period_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_period(period_id: str, db: Session = Depends(get_db), state: AppState = Depends(get_app_state)):
    PeriodService(db, state).delete(period_id)
