# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import (
    employee, team, review_period, template,
    assignment, link, appraisal,
    profile, company_settings, summary,
)

# Explicit class exports for cleaner imports
from .employee import Employee, HierarchyLevel, EmploymentStatus
from .team import Team
from .review_period import ReviewPeriod
from .template import Template
from .assignment import AppraisalAssignment, RelationshipType, AssignmentStatus, AssignmentType
from .link import AppraisalLink
from .appraisal import Appraisal
from .profile import EmployeeProfile
from .company_settings import CompanySettings
from .summary import PerformanceSummary

__all__ = [
    "Employee",
    "HierarchyLevel",
    "EmploymentStatus",
    "Team",
    "ReviewPeriod",
    "Template",
    "AppraisalAssignment",
    "RelationshipType",
    "AssignmentStatus",
    "AssignmentType",
    "AppraisalLink",
    "Appraisal",
    "EmployeeProfile",
    "CompanySettings",
    "PerformanceSummary",
]
