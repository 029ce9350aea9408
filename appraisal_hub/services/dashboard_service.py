"""
Dashboard aggregates: headline stats, rankings with the HR blend, score
distribution, employee of the period and the per-period submission tracker.

Only completed appraisals whose appraiser and appraisee still exist are
counted anywhere on the dashboard.
"""
from collections import OrderedDict, defaultdict
from datetime import datetime, timezone
from typing import Dict, List, Optional

from appraisal_hub.models.appraisal import Appraisal
from appraisal_hub.models.assignment import AppraisalAssignment, AssignmentStatus, RelationshipType
from appraisal_hub.models.employee import Employee, HierarchyLevel
from appraisal_hub.models.link import AppraisalLink
from appraisal_hub.models.template import Template
from appraisal_hub.schemas.dashboard import (
    DashboardStats,
    EmployeeOfPeriod,
    RankingEntry,
    RankingsResponse,
    RecentCompletion,
    ScoreBucket,
    TemplateScore,
    TrackerResponse,
    TrackerRow,
)
from appraisal_hub.services.appraisal_service import AppraisalService
from appraisal_hub.services.base import BaseService
from appraisal_hub.services.link_service import is_link_active
from appraisal_hub.services.period_service import PeriodService
from appraisal_hub.services.scoring import score_percentage
from appraisal_hub.services.settings_service import SettingsService

# (name, label, lower bound inclusive); first match wins
SCORE_BUCKETS = (
    ("Excellent", "90-100%", 90),
    ("Good", "75-89%", 75),
    ("Satisfactory", "60-74%", 60),
    ("Needs Improvement", "<60%", 0),
)

RECENT_COMPLETIONS = 5


def bucket_for(percentage: float) -> str:
    for name, _, lower in SCORE_BUCKETS:
        if percentage >= lower:
            return name
    return SCORE_BUCKETS[-1][0]


def score_distribution(percentages: List[float]) -> List[ScoreBucket]:
    counts = OrderedDict((name, 0) for name, _, _ in SCORE_BUCKETS)
    for percentage in percentages:
        counts[bucket_for(percentage)] += 1
    return [ScoreBucket(name=name, range=label, value=counts[name]) for name, label, _ in SCORE_BUCKETS]


def blend_hr(hr_percentage: float, other_percentage: float, hr_weight: int) -> float:
    return (hr_weight / 100) * hr_percentage + ((100 - hr_weight) / 100) * other_percentage


class DashboardService(BaseService):
    def _employees(self) -> Dict[str, Employee]:
        return {e.id: e for e in self.db.query(Employee).all()}

    @staticmethod
    def _is_hr_appraisal(appraisal: Appraisal, employees: Dict[str, Employee]) -> bool:
        if appraisal.relationship_type == RelationshipType.HR_TO_ALL.value:
            return True
        appraiser = employees.get(appraisal.appraiser_id)
        return appraiser is not None and appraiser.hierarchy == HierarchyLevel.HR.value

    def stats(self) -> DashboardStats:
        employees = self._employees()
        completed = AppraisalService(self.db).completed()
        assignments = self.db.query(AppraisalAssignment).all()
        templates = {t.id: t for t in self.db.query(Template).all()}
        now = datetime.now(timezone.utc)

        pending = sum(
            1 for a in assignments
            if a.status in (AssignmentStatus.PENDING.value, AssignmentStatus.IN_PROGRESS.value)
        )
        hr_assignments = [a for a in assignments if a.relationship_type == RelationshipType.HR_TO_ALL.value]

        by_template: Dict[str, List[float]] = defaultdict(list)
        for appraisal in completed:
            by_template[appraisal.template_id].append(appraisal.percentage)
        template_scores = [
            TemplateScore(
                template_id=template_id,
                name=templates[template_id].name if template_id in templates else "Deleted template",
                score=round(sum(values) / len(values)),
                count=len(values),
            )
            for template_id, values in by_template.items()
        ]
        template_scores.sort(key=lambda s: (-s.score, s.name))

        recent = sorted(completed, key=lambda a: a.completed_at, reverse=True)[:RECENT_COMPLETIONS]
        return DashboardStats(
            total_templates=len(templates),
            total_employees=sum(1 for e in employees.values() if e.is_active),
            pending_appraisals=pending,
            completed_appraisals=len(completed),
            active_links=sum(1 for link in self.db.query(AppraisalLink).all() if is_link_active(link, now)),
            hr_total=len(hr_assignments),
            hr_complete=sum(1 for a in hr_assignments if a.status == AssignmentStatus.COMPLETED.value),
            template_scores=template_scores,
            recent_completions=[
                RecentCompletion(
                    appraisal_id=a.id,
                    employee_id=a.employee_id,
                    employee_name=employees[a.employee_id].name,
                    appraiser_id=a.appraiser_id,
                    appraiser_name=employees[a.appraiser_id].name,
                    review_period_name=a.review_period_name,
                    percentage=round(a.percentage, 2),
                    completed_at=a.completed_at,
                )
                for a in recent
            ],
        )

    def rankings(self, review_period_id: Optional[str] = None) -> RankingsResponse:
        company = SettingsService(self.db).get()
        hr_weight = company.hr_score_weight or 0
        employees = self._employees()

        grouped: Dict[str, List[Appraisal]] = defaultdict(list)
        for appraisal in AppraisalService(self.db).completed(review_period_id):
            grouped[appraisal.employee_id].append(appraisal)

        entries: List[RankingEntry] = []
        for employee_id, appraisals in grouped.items():
            employee = employees[employee_id]
            if not employee.is_active:
                continue
            total_score = sum(a.score for a in appraisals)
            total_max = sum(a.max_score for a in appraisals)
            if total_max <= 0:
                continue

            hr = [a for a in appraisals if self._is_hr_appraisal(a, employees)]
            others = [a for a in appraisals if not self._is_hr_appraisal(a, employees)]
            hr_max = sum(a.max_score for a in hr)
            other_max = sum(a.max_score for a in others)
            if company.require_hr_for_ranking and hr_max <= 0:
                continue

            hr_percentage = score_percentage(sum(a.score for a in hr), hr_max) if hr_max > 0 else None
            percentage = score_percentage(total_score, total_max)
            if hr_weight > 0 and hr_max > 0 and other_max > 0:
                percentage = blend_hr(
                    hr_percentage, score_percentage(sum(a.score for a in others), other_max), hr_weight
                )

            entries.append(RankingEntry(
                rank=0,
                employee_id=employee.id,
                employee_name=employee.name,
                hierarchy=employee.hierarchy,
                team_id=employee.team_id,
                total_score=round(total_score, 2),
                total_max_score=round(total_max, 2),
                percentage=round(percentage, 2),
                appraisal_count=len(appraisals),
                hr_percentage=round(hr_percentage, 2) if hr_percentage is not None else None,
            ))

        entries.sort(key=lambda e: (-e.percentage, e.employee_name))
        for position, entry in enumerate(entries, start=1):
            entry.rank = position

        percentages = [e.percentage for e in entries]
        return RankingsResponse(
            review_period_id=review_period_id,
            rankings=entries,
            distribution=score_distribution(percentages),
            average=round(sum(percentages) / len(percentages), 2) if percentages else 0.0,
            top_performer=entries[0] if entries else None,
        )

    def employee_of_period(self, review_period_id: str) -> EmployeeOfPeriod:
        PeriodService(self.db).get(review_period_id)
        company = SettingsService(self.db).get()
        rankings = self.rankings(review_period_id).rankings
        by_id = {entry.employee_id: entry for entry in rankings}

        override_id = (company.employee_of_period_overrides or {}).get(review_period_id)
        if override_id:
            employee = self.db.get(Employee, override_id)
            if employee is not None:
                ranked = by_id.get(override_id)
                return EmployeeOfPeriod(
                    review_period_id=review_period_id,
                    employee_id=employee.id,
                    employee_name=employee.name,
                    percentage=ranked.percentage if ranked else None,
                    overridden=True,
                )
            self.log_warning(f"Employee of period override {override_id} no longer exists")

        if not rankings:
            return EmployeeOfPeriod(review_period_id=review_period_id)
        top = rankings[0]
        return EmployeeOfPeriod(
            review_period_id=review_period_id,
            employee_id=top.employee_id,
            employee_name=top.employee_name,
            percentage=top.percentage,
        )

    def tracker(self, review_period_id: str) -> TrackerResponse:
        PeriodService(self.db).get(review_period_id)
        assignments = self.db.query(AppraisalAssignment).filter(
            AppraisalAssignment.review_period_id == review_period_id
        ).order_by(AppraisalAssignment.appraiser_name, AppraisalAssignment.employee_name).all()

        submitted = {
            (a.appraiser_id, a.employee_id, a.template_id): a.id
            for a in AppraisalService(self.db).completed(review_period_id)
        }

        rows: List[TrackerRow] = []
        by_relationship: Dict[str, Dict[str, int]] = defaultdict(lambda: {"total": 0, "completed": 0})
        for assignment in assignments:
            appraisal_id = submitted.get((assignment.appraiser_id, assignment.employee_id, assignment.template_id))
            status = AssignmentStatus.COMPLETED.value if appraisal_id else assignment.status
            rows.append(TrackerRow(
                assignment_id=assignment.id,
                appraiser_id=assignment.appraiser_id,
                appraiser_name=assignment.appraiser_name,
                employee_id=assignment.employee_id,
                employee_name=assignment.employee_name,
                relationship_type=assignment.relationship_type,
                status=status,
                appraisal_id=appraisal_id,
                due_date=assignment.due_date,
            ))
            counts = by_relationship[assignment.relationship_type]
            counts["total"] += 1
            if status == AssignmentStatus.COMPLETED.value:
                counts["completed"] += 1

        completed = sum(1 for row in rows if row.status == AssignmentStatus.COMPLETED.value)
        return TrackerResponse(
            review_period_id=review_period_id,
            rows=rows,
            total=len(rows),
            completed=completed,
            completion_rate=round(completed / len(rows) * 100, 1) if rows else 0.0,
            by_relationship=dict(by_relationship),
        )
