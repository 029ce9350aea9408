from sqlalchemy import Column, String, Date, DateTime, ForeignKey
from sqlalchemy.sql import func
import enum
from appraisal_hub.core.ids import generate_id
from appraisal_hub.database import Base


class RelationshipType(str, enum.Enum):
    LEADER_TO_MEMBER = "leader-to-member"
    MEMBER_TO_LEADER = "member-to-leader"
    LEADER_TO_LEADER = "leader-to-leader"
    MEMBER_TO_MEMBER = "member-to-member"
    EXEC_TO_LEADER = "exec-to-leader"
    HR_TO_ALL = "hr-to-all"
    CUSTOM = "custom"


class AssignmentStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class AssignmentType(str, enum.Enum):
    AUTO = "auto"
    MANUAL = "manual"


class AppraisalAssignment(Base):
    __tablename__ = "appraisal_assignments"

    id = Column(String(32), primary_key=True, default=generate_id)
    review_period_id = Column(String(32), ForeignKey("review_periods.id", ondelete="CASCADE"), nullable=False, index=True)
    appraiser_id = Column(String(32), ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    appraiser_name = Column(String, nullable=False)  # captured at build time
    employee_id = Column(String(32), ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    employee_name = Column(String, nullable=False)
    relationship_type = Column(String, nullable=False, index=True)
    template_id = Column(String(32), ForeignKey("templates.id"), nullable=False)
    status = Column(String, nullable=False, default=AssignmentStatus.PENDING.value, index=True)
    assignment_type = Column(String, nullable=False, default=AssignmentType.AUTO.value)
    link_token = Column(String, nullable=True, index=True)
    due_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<AppraisalAssignment {self.appraiser_name} -> {self.employee_name} ({self.relationship_type})>"
