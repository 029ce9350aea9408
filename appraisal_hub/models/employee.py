"""
Employee Model with Hierarchy Support.
Hierarchy level and reporting line drive auto-assignment pairing.
"""
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
from appraisal_hub.core.ids import generate_id
from appraisal_hub.database import Base


class HierarchyLevel(str, enum.Enum):
    """
    Organizational rank, top to bottom:
    CHAIRMAN > EXECUTIVE > DEPARTMENT_LEADER / LEADER > MEMBER / HR
    """
    CHAIRMAN = "chairman"
    EXECUTIVE = "executive"
    DEPARTMENT_LEADER = "department-leader"
    LEADER = "leader"
    MEMBER = "member"
    HR = "hr"


LEADER_LEVELS = frozenset({HierarchyLevel.LEADER.value, HierarchyLevel.DEPARTMENT_LEADER.value})

# Levels that can act as a member's fallback manager inside a team
MANAGER_LEVELS = frozenset(LEADER_LEVELS | {HierarchyLevel.EXECUTIVE.value, HierarchyLevel.HR.value})


class ExecutiveType(str, enum.Enum):
    OPERATIONAL = "operational"  # manages a department
    ADVISORY = "advisory"


class EmploymentStatus(str, enum.Enum):
    PERMANENT = "permanent"
    TEMPORARY = "temporary"
    CONTRACTOR = "contractor"
    PROBATION = "probation"
    INTERN = "intern"
    ON_LEAVE = "on-leave"
    TERMINATED = "terminated"
    RESIGNED = "resigned"


INACTIVE_STATUSES = frozenset({EmploymentStatus.TERMINATED.value, EmploymentStatus.RESIGNED.value})


class Employee(Base):
    __tablename__ = "employees"

    id = Column(String(32), primary_key=True, default=generate_id)
    name = Column(String, nullable=False, index=True)
    email = Column(String, nullable=True)
    role = Column(String, nullable=False, default="")  # job title
    hierarchy = Column(String, nullable=False, default=HierarchyLevel.MEMBER.value, index=True)
    executive_type = Column(String, nullable=True)

    reports_to = Column(String(32), ForeignKey("employees.id", ondelete="SET NULL"), nullable=True)
    team_id = Column(String(32), ForeignKey("teams.id", ondelete="SET NULL"), nullable=True, index=True)
    employment_status = Column(String, nullable=False, default=EmploymentStatus.PERMANENT.value)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    team = relationship("Team", back_populates="members")
    manager = relationship("Employee", remote_side=[id])
    profile = relationship("EmployeeProfile", back_populates="employee", uselist=False, cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Employee {self.name} ({self.hierarchy})>"

    @property
    def is_active(self) -> bool:
        return self.employment_status not in INACTIVE_STATUSES
