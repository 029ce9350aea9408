from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from appraisal_hub.database import get_db
from appraisal_hub.schemas.profile import EmployeeProfileResponse, EmployeeProfileUpdate
from appraisal_hub.services.profile_service import ProfileService

router = APIRouter(prefix="/profiles", tags=["Profiles"])


@router.get("/{employee_id}", response_model=EmployeeProfileResponse)
def get_profile(employee_id: str, db: Session = Depends(get_db)):
    return ProfileService(db).get(employee_id)


@router.put("/{employee_id}", response_model=EmployeeProfileResponse)
def update_profile(employee_id: str, data: EmployeeProfileUpdate, db: Session = Depends(get_db)):
    return ProfileService(db).upsert(employee_id, data)
