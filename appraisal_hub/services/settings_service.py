from typing import Optional

from appraisal_hub.core.config import settings
from appraisal_hub.core.exceptions import NotFoundError
from appraisal_hub.models.company_settings import CompanySettings, SETTINGS_ROW_ID
from appraisal_hub.models.employee import Employee
from appraisal_hub.models.review_period import ReviewPeriod
from appraisal_hub.schemas.settings import CompanySettingsUpdate
from appraisal_hub.services.base import BaseService


class SettingsService(BaseService):
    """Company-wide settings live in a single row."""

    def get(self) -> CompanySettings:
        row = self.db.get(CompanySettings, SETTINGS_ROW_ID)
        if row is None:
            row = CompanySettings(
                id=SETTINGS_ROW_ID,
                hr_score_weight=settings.scoring.default_hr_score_weight,
                employee_of_period_overrides={},
            )
            self.db.add(row)
            self.commit()
            self.db.refresh(row)
            self.log_info("Created default company settings")
        return row

    def update(self, data: CompanySettingsUpdate) -> CompanySettings:
        row = self.get()
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(row, field, value)
        self.commit()
        self.db.refresh(row)
        return row

    def set_employee_of_period(self, review_period_id: str, employee_id: Optional[str]) -> CompanySettings:
        if self.db.get(ReviewPeriod, review_period_id) is None:
            raise NotFoundError("Review period", review_period_id)
        if employee_id and self.db.get(Employee, employee_id) is None:
            raise NotFoundError("Employee", employee_id)
        row = self.get()
        # Reassign so the JSON column registers the change
        overrides = dict(row.employee_of_period_overrides or {})
        if employee_id:
            overrides[review_period_id] = employee_id
        else:
            overrides.pop(review_period_id, None)
        row.employee_of_period_overrides = overrides
        self.commit()
        self.db.refresh(row)
        self.log_info(f"Employee of period override for {review_period_id}: {employee_id or 'cleared'}")
        return row
