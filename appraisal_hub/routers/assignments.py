from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from appraisal_hub.core.state import AppState, get_app_state
from appraisal_hub.database import get_db
from appraisal_hub.models.assignment import AssignmentStatus
from appraisal_hub.schemas.appraisal import AppraisalOut, AppraisalSubmission
from appraisal_hub.schemas.assignment import (
    AssignmentResponse,
    AssignmentStatusUpdate,
    AutoBuildRequest,
    AutoBuildResponse,
    AutoPreviewRequest,
    AutoPreviewResponse,
)
from appraisal_hub.services.appraisal_service import AppraisalService
from appraisal_hub.services.assignment_service import AssignmentService

router = APIRouter(prefix="/assignments", tags=["Assignments"])


@router.get("/", response_model=List[AssignmentResponse])
def list_assignments(
    review_period_id: Optional[str] = None,
    appraiser_id: Optional[str] = None,
    employee_id: Optional[str] = None,
    status_filter: Optional[AssignmentStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
):
    return AssignmentService(db).list_assignments(
        review_period_id=review_period_id,
        appraiser_id=appraiser_id,
        employee_id=employee_id,
        status=status_filter,
    )


@router.post("/auto/preview", response_model=AutoPreviewResponse)
def preview_auto_assignments(
    data: AutoPreviewRequest,
    db: Session = Depends(get_db),
    state: AppState = Depends(get_app_state),
):
    """Derive appraiser/appraisee pairs from the active roster without saving anything."""
    service = AssignmentService(db, state)
    preview = service.preview(data.review_period_id, data.options)
    return AutoPreviewResponse(
        preview=preview,
        total=preview.total,
        existing_count=service.existing_count(data.review_period_id),
    )


@router.post("/auto/build", response_model=AutoBuildResponse, status_code=status.HTTP_201_CREATED)
def build_auto_assignments(
    data: AutoBuildRequest,
    db: Session = Depends(get_db),
    state: AppState = Depends(get_app_state),
):
    preview, rows = AssignmentService(db, state).build(
        data.review_period_id, data.options, data.template_mapping, data.due_date
    )
    return AutoBuildResponse(
        created=len(rows),
        warnings=preview.warnings,
        assignments=[AssignmentResponse.model_validate(row) for row in rows],
    )


@router.delete("/period/{period_id}")
def delete_period_assignments(period_id: str, db: Session = Depends(get_db)):
    return {"removed": AssignmentService(db).delete_by_period(period_id)}


@router.get("/{assignment_id}", response_model=AssignmentResponse)
def get_assignment(assignment_id: str, db: Session = Depends(get_db)):
    return AssignmentService(db).get(assignment_id)


@router.post("/{assignment_id}/start", response_model=AssignmentResponse)
def start_assignment(assignment_id: str, db: Session = Depends(get_db)):
    return AssignmentService(db).start(assignment_id)


@router.patch("/{assignment_id}/status", response_model=AssignmentResponse)
def update_assignment_status(
    assignment_id: str,
    data: AssignmentStatusUpdate,
    db: Session = Depends(get_db),
):
    return AssignmentService(db).set_status(assignment_id, data.status)


@router.post("/{assignment_id}/submit", response_model=AppraisalOut, status_code=status.HTTP_201_CREATED)
def submit_assignment(
    assignment_id: str,
    data: AppraisalSubmission,
    db: Session = Depends(get_db),
    state: AppState = Depends(get_app_state),
):
    return AppraisalService(db, state).submit_for_assignment(assignment_id, data.responses)


@router.delete("/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_assignment(assignment_id: str, db: Session = Depends(get_db)):
    AssignmentService(db).delete(assignment_id)
