from datetime import date
from typing import Any, List, Optional, Tuple

from appraisal_hub.core.config import settings
from appraisal_hub.core.exceptions import AppraisalValidationError, ConflictError, FeatureDisabledError, NotFoundError
from appraisal_hub.models.assignment import AppraisalAssignment, AssignmentStatus
from appraisal_hub.models.employee import INACTIVE_STATUSES
from appraisal_hub.models.template import Template
from appraisal_hub.schemas.assignment import (
    AssignmentDraft,
    AutoAssignmentOptions,
    AutoAssignmentPreview,
    TemplateMapping,
)
from appraisal_hub.services.auto_assignment import (
    CATEGORIES,
    build_assignments_from_preview,
    preview_auto_assignments,
)
from appraisal_hub.services.base import BaseService
from appraisal_hub.services.employee_service import EmployeeService
from appraisal_hub.services.period_service import PeriodService

# Manual status changes only; an assignment is completed by submitting its form
ALLOWED_TRANSITIONS = {
    AssignmentStatus.PENDING.value: {AssignmentStatus.IN_PROGRESS.value},
    AssignmentStatus.IN_PROGRESS.value: {AssignmentStatus.PENDING.value},
    AssignmentStatus.COMPLETED.value: set(),
}


class AssignmentService(BaseService):
    """Wraps the auto-assignment engine with roster loading and persistence."""

    def _require_enabled(self):
        if not settings.enable_auto_assignment:
            raise FeatureDisabledError("Auto-assignment")

    def preview(self, review_period_id: str, options: AutoAssignmentOptions) -> AutoAssignmentPreview:
        self._require_enabled()
        PeriodService(self.db).get(review_period_id)
        roster = self.active_roster()
        return preview_auto_assignments(roster, review_period_id, options)

    def active_roster(self) -> List[Any]:
        """Active employees ordered by name, from the state store when one is attached."""
        if self.state is None:
            return EmployeeService(self.db).active_roster()
        return [
            e for e in self.state.get("employees", self.db)
            if e.employment_status.value not in INACTIVE_STATUSES
        ]

    def existing_count(self, review_period_id: str) -> int:
        return self.db.query(AppraisalAssignment).filter(
            AppraisalAssignment.review_period_id == review_period_id
        ).count()

    def _check_templates(self, preview: AutoAssignmentPreview, mapping: TemplateMapping):
        """Selected templates must exist; a mismatched template type is only logged."""
        for category in CATEGORIES:
            template_id = (getattr(mapping, category.field) or "").strip()
            if not template_id or not getattr(preview, category.field):
                continue
            template = self.db.get(Template, template_id)
            if template is None:
                raise AppraisalValidationError(
                    f"Template for {category.label} does not exist.",
                    {"category": category.relationship.value, "template_id": template_id},
                )
            if template.type != category.relationship.value:
                self.log_warning(
                    f"Template {template_id} ({template.type}) used for {category.relationship.value}"
                )

    def build(
        self,
        review_period_id: str,
        options: AutoAssignmentOptions,
        mapping: TemplateMapping,
        due_date: Optional[date] = None,
    ) -> Tuple[AutoAssignmentPreview, List[AppraisalAssignment]]:
        """Preview, build and persist. Additive: earlier runs for the period are left alone."""
        period = PeriodService(self.db).get(review_period_id)
        preview = self.preview(review_period_id, options)
        self._check_templates(preview, mapping)
        drafts = build_assignments_from_preview(preview, mapping, period.id, period.name, due_date)

        existing = self.existing_count(review_period_id)
        if existing:
            self.log_warning(
                f"Period {period.name} already has {existing} assignment(s); adding {len(drafts)} more"
            )
        rows = self.save_assignments(drafts)
        self.log_info(f"Auto-assigned {len(rows)} appraisal(s) for {period.name}")
        return preview, rows

    def save_assignments(self, drafts: List[AssignmentDraft]) -> List[AppraisalAssignment]:
        rows = [AppraisalAssignment(**draft.model_dump(mode="python")) for draft in drafts]
        for row in rows:
            row.relationship_type = getattr(row.relationship_type, "value", row.relationship_type)
            row.status = getattr(row.status, "value", row.status)
            row.assignment_type = getattr(row.assignment_type, "value", row.assignment_type)
        self.db.add_all(rows)
        self.commit()
        return rows

    def list_assignments(
        self,
        review_period_id: Optional[str] = None,
        appraiser_id: Optional[str] = None,
        employee_id: Optional[str] = None,
        status: Optional[AssignmentStatus] = None,
    ) -> List[AppraisalAssignment]:
        query = self.db.query(AppraisalAssignment)
        if review_period_id:
            query = query.filter(AppraisalAssignment.review_period_id == review_period_id)
        if appraiser_id:
            query = query.filter(AppraisalAssignment.appraiser_id == appraiser_id)
        if employee_id:
            query = query.filter(AppraisalAssignment.employee_id == employee_id)
        if status:
            query = query.filter(AppraisalAssignment.status == status.value)
        return query.order_by(AppraisalAssignment.created_at, AppraisalAssignment.id).all()

    def get(self, assignment_id: str) -> AppraisalAssignment:
        assignment = self.db.get(AppraisalAssignment, assignment_id)
        if assignment is None:
            raise NotFoundError("Assignment", assignment_id)
        return assignment

    def set_status(self, assignment_id: str, status: AssignmentStatus) -> AppraisalAssignment:
        assignment = self.get(assignment_id)
        if status.value == assignment.status:
            return assignment
        if status.value not in ALLOWED_TRANSITIONS.get(assignment.status, set()):
            raise ConflictError(
                f"Cannot move assignment from {assignment.status} to {status.value}.",
                details={"from": assignment.status, "to": status.value},
            )
        assignment.status = status.value
        self.commit()
        self.db.refresh(assignment)
        return assignment

    def start(self, assignment_id: str) -> AppraisalAssignment:
        return self.set_status(assignment_id, AssignmentStatus.IN_PROGRESS)

    def delete(self, assignment_id: str) -> None:
        self.db.delete(self.get(assignment_id))
        self.commit()

    def delete_by_period(self, review_period_id: str) -> int:
        removed = self.db.query(AppraisalAssignment).filter(
            AppraisalAssignment.review_period_id == review_period_id
        ).delete(synchronize_session=False)
        self.commit()
        self.log_info(f"Removed {removed} assignment(s) from period {review_period_id}")
        return removed
