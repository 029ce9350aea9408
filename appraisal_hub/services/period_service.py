import calendar
from datetime import date
from typing import List, Optional, Tuple

from appraisal_hub.core.exceptions import AppraisalValidationError, NotFoundError
from appraisal_hub.models.assignment import AppraisalAssignment
from appraisal_hub.models.link import AppraisalLink
from appraisal_hub.models.review_period import PeriodStatus, PeriodType, ReviewPeriod
from appraisal_hub.schemas.period import ReviewPeriodCreate, ReviewPeriodResponse, ReviewPeriodUpdate
from appraisal_hub.services.base import BaseService

QUARTER_MONTHS = {
    PeriodType.Q1: (1, 3),
    PeriodType.Q2: (4, 6),
    PeriodType.Q3: (7, 9),
    PeriodType.Q4: (10, 12),
}
HALF_MONTHS = {
    PeriodType.H1: (1, 6),
    PeriodType.H2: (7, 12),
}


def current_quarter(today: Optional[date] = None) -> PeriodType:
    month = (today or date.today()).month
    return (PeriodType.Q1, PeriodType.Q2, PeriodType.Q3, PeriodType.Q4)[(month - 1) // 3]


def current_half(today: Optional[date] = None) -> PeriodType:
    return PeriodType.H1 if (today or date.today()).month <= 6 else PeriodType.H2


def period_dates(period_type: PeriodType, year: int) -> Optional[Tuple[date, date]]:
    """Calendar range for quarter/half/annual periods; None for custom ones."""
    months = QUARTER_MONTHS.get(period_type) or HALF_MONTHS.get(period_type)
    if period_type == PeriodType.ANNUAL:
        months = (1, 12)
    if months is None:
        return None
    first, last = months
    return date(year, first, 1), date(year, last, calendar.monthrange(year, last)[1])


def generate_period_name(period_type: PeriodType, year: int) -> str:
    if period_type == PeriodType.ANNUAL:
        return f"Annual {year}"
    if period_type == PeriodType.CUSTOM:
        return f"Custom {year}"
    return f"{period_type.value} {year}"


def days_remaining(end_date: date, today: Optional[date] = None) -> int:
    return (end_date - (today or date.today())).days


def is_period_active(period, today: Optional[date] = None) -> bool:
    status = getattr(period.status, "value", period.status)
    if status != PeriodStatus.ACTIVE.value:
        return False
    today = today or date.today()
    return period.start_date <= today <= period.end_date


class PeriodService(BaseService):
    def describe(self, period: ReviewPeriod) -> ReviewPeriodResponse:
        return ReviewPeriodResponse.model_validate(period).model_copy(update={
            "is_active": is_period_active(period),
            "days_remaining": days_remaining(period.end_date),
        })

    def list_periods(self, status: Optional[PeriodStatus] = None, year: Optional[int] = None) -> List[ReviewPeriod]:
        query = self.db.query(ReviewPeriod)
        if status:
            query = query.filter(ReviewPeriod.status == status.value)
        if year:
            query = query.filter(ReviewPeriod.year == year)
        return query.order_by(ReviewPeriod.start_date.desc()).all()

    def active_periods(self) -> List[ReviewPeriod]:
        return [p for p in self.list_periods(status=PeriodStatus.ACTIVE) if is_period_active(p)]

    def get(self, period_id: str) -> ReviewPeriod:
        period = self.db.get(ReviewPeriod, period_id)
        if period is None:
            raise NotFoundError("Review period", period_id)
        return period

    def create(self, data: ReviewPeriodCreate) -> ReviewPeriod:
        start, end = data.start_date, data.end_date
        if start is None or end is None:
            derived = period_dates(data.type, data.year)
            if derived is None:
                raise AppraisalValidationError("Custom review periods need a start and end date.")
            start, end = start or derived[0], end or derived[1]
        if end < start:
            raise AppraisalValidationError("end_date must not be before start_date")

        period = ReviewPeriod(
            name=data.name or generate_period_name(data.type, data.year),
            type=data.type.value,
            year=data.year,
            start_date=start,
            end_date=end,
            status=data.status.value,
            description=data.description,
        )
        self.db.add(period)
        self.commit("periods")
        self.db.refresh(period)
        self.log_info(f"Created review period {period.name}")
        return period

    def update(self, period_id: str, data: ReviewPeriodUpdate) -> ReviewPeriod:
        period = self.get(period_id)
        changes = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or field == "description"
        }
        if "status" in changes:
            changes["status"] = changes["status"].value
        start = changes.get("start_date", period.start_date)
        end = changes.get("end_date", period.end_date)
        if end < start:
            raise AppraisalValidationError("end_date must not be before start_date")
        for field, value in changes.items():
            setattr(period, field, value)
        self.commit("periods")
        self.db.refresh(period)
        return period

    def delete(self, period_id: str) -> None:
        period = self.get(period_id)
        removed = self.db.query(AppraisalAssignment).filter(
            AppraisalAssignment.review_period_id == period_id
        ).delete(synchronize_session=False)
        self.db.query(AppraisalLink).filter(AppraisalLink.review_period_id == period_id).delete(
            synchronize_session=False
        )
        self.db.delete(period)
        self.commit("periods")
        self.log_info(f"Deleted review period {period_id}", assignments_removed=removed)
