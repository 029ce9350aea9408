from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from appraisal_hub.core.state import AppState, get_app_state
from appraisal_hub.database import get_db
from appraisal_hub.schemas.employee import EmployeeResponse
from appraisal_hub.schemas.team import TeamCreate, TeamResponse, TeamUpdate
from appraisal_hub.services.employee_service import EmployeeService
from appraisal_hub.services.team_service import TeamService

router = APIRouter(prefix="/teams", tags=["Teams"])


@router.get("/", response_model=List[TeamResponse])
def list_teams(db: Session = Depends(get_db)):
    return TeamService(db).list_teams()


@router.post("/", response_model=TeamResponse, status_code=status.HTTP_201_CREATED)
def create_team(data: TeamCreate, db: Session = Depends(get_db), state: AppState = Depends(get_app_state)):
    return TeamService(db, state).create(data)


@router.get("/{team_id}", response_model=TeamResponse)
def get_team(team_id: str, db: Session = Depends(get_db)):
    return TeamService(db).get(team_id)


@router.get("/{team_id}/members", response_model=List[EmployeeResponse])
def list_team_members(team_id: str, active_only: bool = True, db: Session = Depends(get_db)):
    TeamService(db).get(team_id)
    return EmployeeService(db).list_employees(active_only=active_only, team_id=team_id)


@router.patch("/{team_id}", response_model=TeamResponse)
def update_team(
    team_id: str,
    data: TeamUpdate,
    db: Session = Depends(get_db),
    state: AppState = Depends(get_app_state),
):
    return TeamService(db, state).update(team_id, data)


@router.delete("/{team_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_team(team_id: str, db: Session = Depends(get_db), state: AppState = Depends(get_app_state)):
    TeamService(db, state).delete(team_id)
