from typing import List
from sqlalchemy import func

from appraisal_hub.core.exceptions import NotFoundError
from appraisal_hub.models.employee import Employee
from appraisal_hub.models.team import Team
from appraisal_hub.schemas.team import TeamCreate, TeamResponse, TeamUpdate
from appraisal_hub.services.base import BaseService


class TeamService(BaseService):
    def list_teams(self) -> List[TeamResponse]:
        counts = dict(
            self.db.query(Employee.team_id, func.count(Employee.id))
            .filter(Employee.team_id.isnot(None))
            .group_by(Employee.team_id)
            .all()
        )
        teams = self.db.query(Team).order_by(Team.name).all()
        return [
            TeamResponse.model_validate(team).model_copy(update={"member_count": counts.get(team.id, 0)})
            for team in teams
        ]

    def get(self, team_id: str) -> Team:
        team = self.db.get(Team, team_id)
        if team is None:
            raise NotFoundError("Team", team_id)
        return team

    def create(self, data: TeamCreate) -> Team:
        team = Team(**data.model_dump())
        self.db.add(team)
        self.commit("teams")
        self.db.refresh(team)
        return team

    def update(self, team_id: str, data: TeamUpdate) -> Team:
        team = self.get(team_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(team, field, value)
        self.commit("teams")
        self.db.refresh(team)
        return team

    def delete(self, team_id: str) -> None:
        team = self.get(team_id)
        self.db.query(Employee).filter(Employee.team_id == team_id).update(
            {Employee.team_id: None}, synchronize_session=False
        )
        self.db.delete(team)
        self.commit("teams", "employees")
