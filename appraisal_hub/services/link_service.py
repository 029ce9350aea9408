from datetime import datetime, timedelta, timezone
from typing import List, Optional

from appraisal_hub.core.config import settings
from appraisal_hub.core.exceptions import (
    AppraisalValidationError,
    LinkAlreadyUsedError,
    LinkExpiredError,
    NotFoundError,
)
from appraisal_hub.core.ids import generate_token
from appraisal_hub.models.assignment import AppraisalAssignment, AssignmentStatus, AssignmentType
from appraisal_hub.models.link import AppraisalLink
from appraisal_hub.schemas.link import LinkCreate
from appraisal_hub.services.base import BaseService
from appraisal_hub.services.employee_service import EmployeeService
from appraisal_hub.services.period_service import PeriodService
from appraisal_hub.services.template_service import TemplateService


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes; everything is stored as UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_link_expired(link: AppraisalLink, now: Optional[datetime] = None) -> bool:
    expires_at = _aware(link.expires_at)
    return expires_at is not None and expires_at <= (now or datetime.now(timezone.utc))


def is_link_active(link: AppraisalLink, now: Optional[datetime] = None) -> bool:
    return not link.used and not is_link_expired(link, now)


class LinkService(BaseService):
    """Single-use manual appraisal links. Each link also creates a matching manual assignment."""

    def create(self, data: LinkCreate) -> AppraisalLink:
        employees = EmployeeService(self.db)
        employee = employees.get(data.employee_id)
        appraiser = employees.get(data.appraiser_id)
        for person in (employee, appraiser):
            if not person.is_active:
                raise AppraisalValidationError(
                    f"{person.name} is no longer active.", {"employee_id": person.id}
                )
        template = TemplateService(self.db, self.state).get(data.template_id)
        period = PeriodService(self.db).get(data.review_period_id)

        expiration_days = data.expiration_days or settings.link_default_expiry_days
        expires_at = (
            datetime.now(timezone.utc) + timedelta(days=expiration_days) if expiration_days else None
        )
        link = AppraisalLink(
            employee_id=employee.id,
            appraiser_id=appraiser.id,
            template_id=template.id,
            review_period_id=period.id,
            review_period_name=period.name,
            token=generate_token(settings.link_token_bytes),
            expires_at=expires_at,
            used=False,
        )
        assignment = AppraisalAssignment(
            review_period_id=period.id,
            appraiser_id=appraiser.id,
            appraiser_name=appraiser.name,
            employee_id=employee.id,
            employee_name=employee.name,
            relationship_type=data.relationship_type.value,
            template_id=template.id,
            status=AssignmentStatus.PENDING.value,
            assignment_type=AssignmentType.MANUAL.value,
            link_token=link.token,
            due_date=expires_at.date() if expires_at else None,
        )
        self.db.add_all([link, assignment])
        self.commit()
        self.db.refresh(link)
        self.log_info(f"Generated appraisal link {link.id} for period {period.name}")
        return link

    def list_links(self, active_only: bool = False, review_period_id: Optional[str] = None) -> List[AppraisalLink]:
        query = self.db.query(AppraisalLink)
        if review_period_id:
            query = query.filter(AppraisalLink.review_period_id == review_period_id)
        links = query.order_by(AppraisalLink.created_at.desc()).all()
        if active_only:
            now = datetime.now(timezone.utc)
            links = [link for link in links if is_link_active(link, now)]
        return links

    def get_by_token(self, token: str) -> AppraisalLink:
        link = self.db.query(AppraisalLink).filter(AppraisalLink.token == token).first()
        if link is None:
            raise NotFoundError("Appraisal link", token)
        return link

    def resolve(self, token: str) -> AppraisalLink:
        """Link behind ``token`` if it can still be submitted."""
        link = self.get_by_token(token)
        if link.used:
            raise LinkAlreadyUsedError()
        if is_link_expired(link):
            raise LinkExpiredError()
        return link

    def assignment_for(self, link: AppraisalLink) -> Optional[AppraisalAssignment]:
        return self.db.query(AppraisalAssignment).filter(
            AppraisalAssignment.link_token == link.token
        ).first()

    def delete(self, link_id: str) -> None:
        link = self.db.get(AppraisalLink, link_id)
        if link is None:
            raise NotFoundError("Appraisal link", link_id)
        self.db.query(AppraisalAssignment).filter(
            AppraisalAssignment.link_token == link.token,
            AppraisalAssignment.status != AssignmentStatus.COMPLETED.value,
        ).delete(synchronize_session=False)
        self.db.delete(link)
        self.commit()
