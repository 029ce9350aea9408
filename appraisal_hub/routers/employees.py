from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional

from appraisal_hub.core.state import AppState, get_app_state
from appraisal_hub.database import get_db
from appraisal_hub.schemas.employee import (
    EmployeeCreate,
    EmployeeResponse,
    EmployeeUpdate,
    ReportingChainResponse,
    SpanOfControl,
)
from appraisal_hub.services.employee_service import EmployeeService

router = APIRouter(prefix="/employees", tags=["Employees"])


@router.get("/", response_model=List[EmployeeResponse])
def list_employees(
    active_only: bool = False,
    team_id: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return EmployeeService(db).list_employees(active_only=active_only, team_id=team_id)


@router.get("/span-of-control", response_model=SpanOfControl)
def span_of_control(db: Session = Depends(get_db)):
    """Direct-report counts across leaders and executives with at least one report."""
    return EmployeeService(db).org_index().span_of_control()


@router.post("/", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
def create_employee(
    data: EmployeeCreate,
    db: Session = Depends(get_db),
    state: AppState = Depends(get_app_state),
):
    return EmployeeService(db, state).create(data)


@router.get("/{employee_id}", response_model=EmployeeResponse)
def get_employee(employee_id: str, db: Session = Depends(get_db)):
    return EmployeeService(db).get(employee_id)


@router.get("/{employee_id}/reporting-chain", response_model=ReportingChainResponse)
def get_reporting_chain(employee_id: str, db: Session = Depends(get_db)):
    service = EmployeeService(db)
    service.get(employee_id)
    index = service.org_index(active_only=False)
    return ReportingChainResponse(
        employee_id=employee_id,
        chain=[EmployeeResponse.model_validate(e) for e in index.reporting_chain(employee_id)],
        direct_reports=[EmployeeResponse.model_validate(e) for e in index.reports_of(employee_id)],
    )


@router.patch("/{employee_id}", response_model=EmployeeResponse)
def update_employee(
    employee_id: str,
    data: EmployeeUpdate,
    db: Session = Depends(get_db),
    state: AppState = Depends(get_app_state),
):
    return EmployeeService(db, state).update(employee_id, data)


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_employee(
    employee_id: str,
    db: Session = Depends(get_db),
    state: AppState = Depends(get_app_state),
):
    EmployeeService(db, state).delete(employee_id)
