from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from appraisal_hub.database import get_db
from appraisal_hub.schemas.settings import CompanySettingsResponse, CompanySettingsUpdate, EmployeeOfPeriodOverride
from appraisal_hub.services.settings_service import SettingsService

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("/", response_model=CompanySettingsResponse)
def get_settings(db: Session = Depends(get_db)):
    return SettingsService(db).get()


@router.patch("/", response_model=CompanySettingsResponse)
def update_settings(data: CompanySettingsUpdate, db: Session = Depends(get_db)):
    return SettingsService(db).update(data)


@router.put("/employee-of-period/{period_id}", response_model=CompanySettingsResponse)
def set_employee_of_period(period_id: str, data: EmployeeOfPeriodOverride, db: Session = Depends(get_db)):
    return SettingsService(db).set_employee_of_period(period_id, data.employee_id)
