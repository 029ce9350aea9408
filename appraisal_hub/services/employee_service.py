from typing import List, Optional

from appraisal_hub.core.exceptions import AppraisalValidationError, NotFoundError
from appraisal_hub.models.appraisal import Appraisal
from appraisal_hub.models.assignment import AppraisalAssignment
from appraisal_hub.models.employee import Employee, INACTIVE_STATUSES
from appraisal_hub.models.link import AppraisalLink
from appraisal_hub.models.profile import EmployeeProfile
from appraisal_hub.models.summary import PerformanceSummary
from appraisal_hub.models.team import Team
from appraisal_hub.schemas.employee import EmployeeCreate, EmployeeUpdate
from appraisal_hub.services.auto_assignment import OrgIndex
from appraisal_hub.services.base import BaseService


REQUIRED_FIELDS = frozenset({"name", "role", "hierarchy", "employment_status"})


class EmployeeService(BaseService):
    """Roster management. Terminated/resigned employees stay stored but drop out of active views."""

    def list_employees(self, active_only: bool = False, team_id: Optional[str] = None) -> List[Employee]:
        query = self.db.query(Employee)
        if active_only:
            query = query.filter(Employee.employment_status.notin_(INACTIVE_STATUSES))
        if team_id:
            query = query.filter(Employee.team_id == team_id)
        return query.order_by(Employee.name).all()

    def active_roster(self) -> List[Employee]:
        return self.list_employees(active_only=True)

    def get(self, employee_id: str) -> Employee:
        employee = self.db.get(Employee, employee_id)
        if employee is None:
            raise NotFoundError("Employee", employee_id)
        return employee

    def _check_references(self, employee_id: Optional[str], reports_to: Optional[str], team_id: Optional[str]):
        if reports_to:
            if reports_to == employee_id:
                raise AppraisalValidationError("An employee cannot report to themselves.")
            if self.db.get(Employee, reports_to) is None:
                raise AppraisalValidationError("Reports To employee does not exist.", {"reports_to": reports_to})
            if employee_id:
                # Walking up from the new manager must not reach this employee
                index = OrgIndex(self.db.query(Employee).all())
                if any(m.id == employee_id for m in index.reporting_chain(reports_to)):
                    raise AppraisalValidationError("Reporting line would form a cycle.", {"reports_to": reports_to})
        if team_id and self.db.get(Team, team_id) is None:
            raise AppraisalValidationError("Team does not exist.", {"team_id": team_id})

    def create(self, data: EmployeeCreate) -> Employee:
        self._check_references(None, data.reports_to, data.team_id)
        employee = Employee(**data.model_dump(mode="json"))
        self.db.add(employee)
        self.commit("employees")
        self.db.refresh(employee)
        self.log_info(f"Created employee {employee.id}", hierarchy=employee.hierarchy)
        return employee

    def update(self, employee_id: str, data: EmployeeUpdate) -> Employee:
        employee = self.get(employee_id)
        changes = {
            field: value
            for field, value in data.model_dump(mode="json", exclude_unset=True).items()
            if value is not None or field not in REQUIRED_FIELDS
        }
        self._check_references(employee_id, changes.get("reports_to"), changes.get("team_id"))
        for field, value in changes.items():
            setattr(employee, field, value)
        self.commit("employees")
        self.db.refresh(employee)
        return employee

    def delete(self, employee_id: str) -> None:
        """Delete the employee and everything that references them."""
        employee = self.get(employee_id)
        counts = self.cascade_delete(employee_id)
        # Direct reports lose their manager rather than being deleted
        self.db.query(Employee).filter(Employee.reports_to == employee_id).update(
            {Employee.reports_to: None}, synchronize_session=False
        )
        self.db.delete(employee)
        self.commit("employees")
        self.log_info(f"Deleted employee {employee_id}", **counts)

    def cascade_delete(self, employee_id: str) -> dict:
        """Remove appraisals, assignments, links, profile and summaries for ``employee_id`` (no commit)."""
        counts = {}
        for label, model in (
            ("appraisals", Appraisal),
            ("assignments", AppraisalAssignment),
            ("links", AppraisalLink),
        ):
            counts[label] = self.db.query(model).filter(
                (model.employee_id == employee_id) | (model.appraiser_id == employee_id)
            ).delete(synchronize_session=False)
        counts["summaries"] = self.db.query(PerformanceSummary).filter(
            PerformanceSummary.employee_id == employee_id
        ).delete(synchronize_session=False)
        self.db.query(EmployeeProfile).filter(EmployeeProfile.employee_id == employee_id).delete(
            synchronize_session=False
        )
        return counts

    def org_index(self, active_only: bool = True) -> OrgIndex:
        return OrgIndex(self.list_employees(active_only=active_only))
