"""
Auto-assignment engine.

Derives appraiser -> appraisee pairs for a review period from the roster's
hierarchy levels, reporting lines and team membership, then turns a
preview into assignment drafts. Both steps are pure: callers load the
roster and persist the drafts.
"""
import logging
from collections import OrderedDict
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from appraisal_hub.core.exceptions import MissingTemplateMappingError
from appraisal_hub.core.ids import generate_id
from appraisal_hub.models.assignment import AssignmentStatus, AssignmentType, RelationshipType
from appraisal_hub.models.employee import HierarchyLevel, LEADER_LEVELS, MANAGER_LEVELS
from appraisal_hub.schemas.assignment import (
    AssignmentDraft,
    AutoAssignmentOptions,
    AutoAssignmentPreview,
    PreviewRow,
    TemplateMapping,
)

logger = logging.getLogger(__name__)

MAX_CHAIN_DEPTH = 50


@dataclass(frozen=True)
class Category:
    field: str
    relationship: RelationshipType
    option: str
    label: str


CATEGORIES = (
    Category("leader_to_member", RelationshipType.LEADER_TO_MEMBER, "include_leader_to_member", "Leader → Member"),
    Category("member_to_leader", RelationshipType.MEMBER_TO_LEADER, "include_member_to_leader", "Member → Leader"),
    Category("leader_to_leader", RelationshipType.LEADER_TO_LEADER, "include_leader_to_leader", "Leader → Leader"),
    Category("member_to_member", RelationshipType.MEMBER_TO_MEMBER, "include_member_to_member", "Member → Member"),
    Category("exec_to_leader", RelationshipType.EXEC_TO_LEADER, "include_exec_to_leader", "Executive → Leader"),
    Category("hr_to_all", RelationshipType.HR_TO_ALL, "include_hr_to_all", "HR → All"),
)


def _level(employee: Any) -> str:
    hierarchy = getattr(employee, "hierarchy", None)
    return getattr(hierarchy, "value", hierarchy) or HierarchyLevel.MEMBER.value


def _row(appraiser: Any, appraisee: Any) -> PreviewRow:
    return PreviewRow(
        appraiser_id=appraiser.id,
        appraiser_name=appraiser.name,
        employee_id=appraisee.id,
        employee_name=appraisee.name,
    )


class OrgIndex:
    """
    Lookup tables over one roster, built once per engine call:
    id -> employee, id -> direct reports, team id -> members.
    Roster order is preserved in every list.
    """

    def __init__(self, employees: Iterable[Any]):
        self.employees: List[Any] = list(employees)
        self.by_id: Dict[str, Any] = {}
        self.direct_reports: Dict[str, List[Any]] = {}
        self.team_members: "OrderedDict[str, List[Any]]" = OrderedDict()

        for employee in self.employees:
            self.by_id[employee.id] = employee
            if employee.team_id:
                self.team_members.setdefault(employee.team_id, []).append(employee)
        for employee in self.employees:
            if employee.reports_to and employee.reports_to != employee.id:
                self.direct_reports.setdefault(employee.reports_to, []).append(employee)

    def get(self, employee_id: Optional[str]) -> Optional[Any]:
        return self.by_id.get(employee_id) if employee_id else None

    def at_levels(self, *levels: str) -> List[Any]:
        wanted = set(levels)
        return [e for e in self.employees if _level(e) in wanted]

    def reports_of(self, employee_id: str) -> List[Any]:
        return self.direct_reports.get(employee_id, [])

    def members_of(self, team_id: str) -> List[Any]:
        return self.team_members.get(team_id, [])

    def reporting_chain(self, employee_id: str) -> List[Any]:
        """Managers above ``employee_id``, nearest first. Stops on cycles and dangling references."""
        chain: List[Any] = []
        visited = {employee_id}
        current = self.get(employee_id)
        while current is not None and current.reports_to and len(chain) < MAX_CHAIN_DEPTH:
            if current.reports_to in visited:
                break
            visited.add(current.reports_to)
            manager = self.get(current.reports_to)
            if manager is None:
                break
            chain.append(manager)
            current = manager
        return chain

    def department_leader(self, team_id: Optional[str], exclude_id: Optional[str] = None) -> Optional[Any]:
        """First leader/department-leader/executive/HR employee in the team."""
        if not team_id:
            return None
        for employee in self.members_of(team_id):
            if employee.id != exclude_id and _level(employee) in MANAGER_LEVELS:
                return employee
        return None

    def resolve_manager(self, member: Any) -> Optional[Any]:
        manager = self.get(member.reports_to)
        if manager is not None and manager.id != member.id:
            return manager
        return self.department_leader(member.team_id, exclude_id=member.id)

    def span_of_control(self) -> Dict[str, Any]:
        managers = self.at_levels(HierarchyLevel.EXECUTIVE.value, *LEADER_LEVELS)
        counts = [len(self.reports_of(m.id)) for m in managers]
        counts = [c for c in counts if c > 0]
        avg = sum(counts) / len(counts) if counts else 0.0
        return {
            "avg": round(avg, 1),
            "max": max(counts) if counts else 0,
            "min": min(counts) if counts else 0,
            "counts": counts,
        }


def _coerce_options(options: Union[AutoAssignmentOptions, Mapping[str, bool], None]) -> AutoAssignmentOptions:
    if options is None:
        return AutoAssignmentOptions()
    if isinstance(options, AutoAssignmentOptions):
        return options
    return AutoAssignmentOptions(**dict(options))


def preview_auto_assignments(
    employees: Iterable[Any],
    review_period_id: str,
    options: Union[AutoAssignmentOptions, Mapping[str, bool], None] = None,
) -> AutoAssignmentPreview:
    """
    Candidate pairs per relationship category plus advisory warnings.

    ``employees`` are objects exposing ``id, name, hierarchy, reports_to,
    team_id`` (ORM rows or schemas). ``review_period_id`` scopes the result
    but does not affect pairing.
    """
    opts = _coerce_options(options)
    index = OrgIndex(employees)
    warnings: List[str] = []
    result: Dict[str, List[PreviewRow]] = {c.field: [] for c in CATEGORIES}

    members = index.at_levels(HierarchyLevel.MEMBER.value)
    leaders = index.at_levels(*LEADER_LEVELS)
    executives = index.at_levels(HierarchyLevel.EXECUTIVE.value)
    hr_staff = index.at_levels(HierarchyLevel.HR.value)

    # Rules 1 and 2: leader <-> member along the resolved reporting line
    if opts.include_leader_to_member or opts.include_member_to_leader:
        dangling = [m for m in members if m.reports_to and index.get(m.reports_to) is None]
        if dangling:
            warnings.append(
                f"{len(dangling)} member(s) report to an employee who is not on the active roster; "
                f"their team leader is used instead where one exists."
            )

        unmanaged = 0
        managed_ids = set()
        for member in members:
            manager = index.resolve_manager(member)
            if manager is None:
                unmanaged += 1
                continue
            managed_ids.add(manager.id)
            if opts.include_leader_to_member:
                result["leader_to_member"].append(_row(manager, member))
            if opts.include_member_to_leader:
                result["member_to_leader"].append(_row(member, manager))

        if unmanaged:
            warnings.append(
                f"{unmanaged} member(s) have no \"Reports To\" and no team leader; "
                f"skipped for Leader→Member and Member→Leader."
            )
        idle_leaders = [leader for leader in leaders if leader.id not in managed_ids and not index.reports_of(leader.id)]
        if idle_leaders:
            warnings.append(f"{len(idle_leaders)} leader(s) have no members reporting to them.")

    # Rule 3: every leader appraises every other leader, company-wide
    if opts.include_leader_to_leader:
        if len(leaders) < 2:
            warnings.append("Leader→Leader is enabled but fewer than two leaders are on the roster.")
        for appraiser in leaders:
            for target in leaders:
                if appraiser.id != target.id:
                    result["leader_to_leader"].append(_row(appraiser, target))

    # Rule 4: members appraise each other inside their own team only
    if opts.include_member_to_member:
        teamless = [m for m in members if not m.team_id]
        if teamless:
            warnings.append(f"{len(teamless)} member(s) have no team; skipped for Member→Member.")
        for team in index.team_members.values():
            team_members = [e for e in team if _level(e) == HierarchyLevel.MEMBER.value]
            for appraiser in team_members:
                for target in team_members:
                    if appraiser.id != target.id:
                        result["member_to_member"].append(_row(appraiser, target))

    if opts.include_exec_to_leader:
        if not executives:
            warnings.append("Executive→Leader is enabled but no executives are on the roster.")
        for executive in executives:
            for leader in leaders:
                result["exec_to_leader"].append(_row(executive, leader))

    if opts.include_hr_to_all:
        if not hr_staff:
            warnings.append("HR→All is enabled but there is no active HR employee.")
        others = [e for e in index.employees if _level(e) != HierarchyLevel.HR.value]
        for hr in hr_staff:
            for target in others:
                result["hr_to_all"].append(_row(hr, target))

    return AutoAssignmentPreview(**result, warnings=warnings, options=opts)


def missing_template_categories(
    preview: AutoAssignmentPreview,
    template_mapping: Union[TemplateMapping, Mapping[str, str]],
) -> List[Category]:
    mapping = template_mapping if isinstance(template_mapping, TemplateMapping) else TemplateMapping(**dict(template_mapping))
    missing = []
    for category in CATEGORIES:
        enabled = getattr(preview.options, category.option)
        rows = getattr(preview, category.field)
        if enabled and rows and not (getattr(mapping, category.field) or "").strip():
            missing.append(category)
    return missing


def build_assignments_from_preview(
    preview: AutoAssignmentPreview,
    template_mapping: Union[TemplateMapping, Mapping[str, str]],
    review_period_id: str,
    review_period_name: str,
    due_date: Optional[date] = None,
) -> List[AssignmentDraft]:
    """
    One pending "auto" assignment per preview row.

    Raises MissingTemplateMappingError, and builds nothing, when any enabled
    category with candidate pairs has no template selected. Names are copied
    from the preview and never re-resolved. Not deduplicated against earlier
    runs.
    """
    mapping = template_mapping if isinstance(template_mapping, TemplateMapping) else TemplateMapping(**dict(template_mapping))
    missing = missing_template_categories(preview, mapping)
    if missing:
        raise MissingTemplateMappingError(
            [c.relationship.value for c in missing],
            labels=[c.label for c in missing],
        )

    now = datetime.now(timezone.utc)
    drafts: List[AssignmentDraft] = []
    for category in CATEGORIES:
        if not getattr(preview.options, category.option):
            continue
        template_id = getattr(mapping, category.field).strip()
        for row in getattr(preview, category.field):
            drafts.append(AssignmentDraft(
                id=generate_id(),
                review_period_id=review_period_id,
                appraiser_id=row.appraiser_id,
                appraiser_name=row.appraiser_name,
                employee_id=row.employee_id,
                employee_name=row.employee_name,
                relationship_type=category.relationship,
                template_id=template_id,
                status=AssignmentStatus.PENDING,
                assignment_type=AssignmentType.AUTO,
                due_date=due_date,
                created_at=now,
            ))
    logger.debug(f"Built {len(drafts)} assignment draft(s) for {review_period_name}")
    return drafts
