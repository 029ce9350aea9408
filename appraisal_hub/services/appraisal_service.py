from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from appraisal_hub.core.exceptions import AppraisalValidationError, ConflictError, NotFoundError
from appraisal_hub.models.appraisal import Appraisal
from appraisal_hub.models.assignment import AssignmentStatus
from appraisal_hub.models.employee import Employee
from appraisal_hub.models.template import QuestionType
from appraisal_hub.schemas.appraisal import AppraisalResponse
from appraisal_hub.services.assignment_service import AssignmentService
from appraisal_hub.services.base import BaseService
from appraisal_hub.services.link_service import LinkService
from appraisal_hub.services.period_service import PeriodService
from appraisal_hub.services.scoring import calculate_score, is_answered, parse_rating
from appraisal_hub.services.template_service import TemplateService


def validate_responses(responses: List[AppraisalResponse], items: List[Dict[str, Any]]) -> None:
    """Raise AppraisalValidationError listing every problem found in ``responses``."""
    by_id = {item["id"]: item for item in items}
    problems = []
    seen = set()
    for response in responses:
        item = by_id.get(response.question_id)
        if item is None:
            problems.append({"question_id": response.question_id, "msg": "Unknown question"})
            continue
        if response.question_id in seen:
            problems.append({"question_id": response.question_id, "msg": "Answered more than once"})
            continue
        seen.add(response.question_id)
        if not is_answered(response.value):
            continue
        if item["type"] == QuestionType.RATING.value and parse_rating(response.value) is None:
            problems.append({"question_id": item["id"], "msg": "Rating must be a whole number from 1 to 5"})
        elif item["type"] == QuestionType.MULTIPLE_CHOICE.value and str(response.value) not in (item["options"] or []):
            problems.append({"question_id": item["id"], "msg": "Answer is not one of the options"})

    answered = {r.question_id for r in responses if is_answered(r.value)}
    for item in items:
        if item["required"] and item["id"] not in answered:
            problems.append({"question_id": item["id"], "msg": "This question is required"})

    if problems:
        raise AppraisalValidationError("Please fix the highlighted answers.", {"questions": problems})


class AppraisalService(BaseService):
    """Validates, scores and records submitted appraisal forms."""

    def _record(
        self,
        *,
        template_id: str,
        employee_id: str,
        appraiser_id: str,
        review_period_id: str,
        review_period_name: str,
        relationship_type: Optional[str],
        responses: List[AppraisalResponse],
    ) -> Appraisal:
        items = TemplateService(self.db, self.state).items(template_id)
        validate_responses(responses, items)
        result = calculate_score(responses, items)
        appraisal = Appraisal(
            template_id=template_id,
            employee_id=employee_id,
            appraiser_id=appraiser_id,
            review_period_id=review_period_id,
            review_period_name=review_period_name,
            relationship_type=relationship_type,
            responses=[r.model_dump(mode="json") for r in responses],
            score=result.score,
            max_score=result.max_score,
            completed_at=datetime.now(timezone.utc),
        )
        self.db.add(appraisal)
        return appraisal

    def submit_by_token(self, token: str, responses: List[AppraisalResponse]) -> Appraisal:
        links = LinkService(self.db, self.state)
        link = links.resolve(token)
        assignment = links.assignment_for(link)
        if assignment is not None and assignment.status == AssignmentStatus.COMPLETED.value:
            raise ConflictError("This appraisal has already been submitted.", details={"assignment_id": assignment.id})
        appraisal = self._record(
            template_id=link.template_id,
            employee_id=link.employee_id,
            appraiser_id=link.appraiser_id,
            review_period_id=link.review_period_id,
            review_period_name=link.review_period_name,
            relationship_type=assignment.relationship_type if assignment else None,
            responses=responses,
        )
        link.used = True
        if assignment is not None:
            assignment.status = AssignmentStatus.COMPLETED.value
        self.commit()
        self.db.refresh(appraisal)
        self.log_info(f"Recorded appraisal {appraisal.id} via link {link.id}", percentage=round(appraisal.percentage, 2))
        return appraisal

    def submit_for_assignment(self, assignment_id: str, responses: List[AppraisalResponse]) -> Appraisal:
        assignment = AssignmentService(self.db, self.state).get(assignment_id)
        if assignment.status == AssignmentStatus.COMPLETED.value:
            raise ConflictError("This appraisal has already been submitted.", details={"assignment_id": assignment_id})
        # Link-backed assignments are closed once their link is used or expired
        link = LinkService(self.db, self.state).resolve(assignment.link_token) if assignment.link_token else None
        period = PeriodService(self.db).get(assignment.review_period_id)
        appraisal = self._record(
            template_id=assignment.template_id,
            employee_id=assignment.employee_id,
            appraiser_id=assignment.appraiser_id,
            review_period_id=period.id,
            review_period_name=period.name,
            relationship_type=assignment.relationship_type,
            responses=responses,
        )
        assignment.status = AssignmentStatus.COMPLETED.value
        if link is not None:
            link.used = True
        self.commit()
        self.db.refresh(appraisal)
        self.log_info(f"Recorded appraisal {appraisal.id} for assignment {assignment.id}")
        return appraisal

    def list_appraisals(
        self,
        employee_id: Optional[str] = None,
        appraiser_id: Optional[str] = None,
        review_period_id: Optional[str] = None,
    ) -> List[Appraisal]:
        query = self.db.query(Appraisal)
        if employee_id:
            query = query.filter(Appraisal.employee_id == employee_id)
        if appraiser_id:
            query = query.filter(Appraisal.appraiser_id == appraiser_id)
        if review_period_id:
            query = query.filter(Appraisal.review_period_id == review_period_id)
        return query.order_by(Appraisal.completed_at.desc()).all()

    def completed(self, review_period_id: Optional[str] = None) -> List[Appraisal]:
        """Completed appraisals whose appraiser and appraisee are both still on file."""
        known = {row.id for row in self.db.query(Employee.id).all()}
        return [
            a for a in self.list_appraisals(review_period_id=review_period_id)
            if a.completed_at is not None and a.employee_id in known and a.appraiser_id in known
        ]

    def get(self, appraisal_id: str) -> Appraisal:
        appraisal = self.db.get(Appraisal, appraisal_id)
        if appraisal is None:
            raise NotFoundError("Appraisal", appraisal_id)
        return appraisal
