from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional

from appraisal_hub.database import get_db
from appraisal_hub.schemas.appraisal import AppraisalOut
from appraisal_hub.services.appraisal_service import AppraisalService

router = APIRouter(prefix="/appraisals", tags=["Appraisals"])


@router.get("/", response_model=List[AppraisalOut])
def list_appraisals(
    employee_id: Optional[str] = None,
    appraiser_id: Optional[str] = None,
    review_period_id: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return AppraisalService(db).list_appraisals(
        employee_id=employee_id, appraiser_id=appraiser_id, review_period_id=review_period_id
    )


@router.get("/{appraisal_id}", response_model=AppraisalOut)
def get_appraisal(appraisal_id: str, db: Session = Depends(get_db)):
    return AppraisalService(db).get(appraisal_id)
