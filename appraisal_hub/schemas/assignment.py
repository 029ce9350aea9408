from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import date, datetime
from appraisal_hub.models.assignment import RelationshipType, AssignmentStatus, AssignmentType


class AutoAssignmentOptions(BaseModel):
    """Which relationship categories the auto-assignment engine should derive."""
    include_leader_to_member: bool = True
    include_member_to_leader: bool = True
    include_leader_to_leader: bool = False
    include_member_to_member: bool = False
    include_exec_to_leader: bool = False
    include_hr_to_all: bool = False


class PreviewRow(BaseModel):
    appraiser_id: str
    appraiser_name: str
    employee_id: str
    employee_name: str


class AutoAssignmentPreview(BaseModel):
    leader_to_member: List[PreviewRow] = []
    member_to_leader: List[PreviewRow] = []
    leader_to_leader: List[PreviewRow] = []
    member_to_member: List[PreviewRow] = []
    exec_to_leader: List[PreviewRow] = []
    hr_to_all: List[PreviewRow] = []
    warnings: List[str] = []
    options: AutoAssignmentOptions = AutoAssignmentOptions()

    @property
    def total(self) -> int:
        return sum(len(getattr(self, field)) for field in CATEGORY_FIELDS)


class TemplateMapping(BaseModel):
    """Template id per category; empty string means "not selected"."""
    leader_to_member: str = ""
    member_to_leader: str = ""
    leader_to_leader: str = ""
    member_to_member: str = ""
    exec_to_leader: str = ""
    hr_to_all: str = ""


# Preview and mapping field names, in output order
CATEGORY_FIELDS = (
    "leader_to_member",
    "member_to_leader",
    "leader_to_leader",
    "member_to_member",
    "exec_to_leader",
    "hr_to_all",
)


class AssignmentDraft(BaseModel):
    """An assignment produced by the engine, not yet persisted."""
    id: str
    review_period_id: str
    appraiser_id: str
    appraiser_name: str
    employee_id: str
    employee_name: str
    relationship_type: RelationshipType
    template_id: str
    status: AssignmentStatus = AssignmentStatus.PENDING
    assignment_type: AssignmentType = AssignmentType.AUTO
    link_token: Optional[str] = None
    due_date: Optional[date] = None
    created_at: datetime


class AssignmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    review_period_id: str
    appraiser_id: str
    appraiser_name: str
    employee_id: str
    employee_name: str
    relationship_type: RelationshipType
    template_id: str
    status: AssignmentStatus
    assignment_type: AssignmentType
    link_token: Optional[str] = None
    due_date: Optional[date] = None
    created_at: Optional[datetime] = None


class AutoPreviewRequest(BaseModel):
    review_period_id: str
    options: AutoAssignmentOptions = AutoAssignmentOptions()


class AutoPreviewResponse(BaseModel):
    preview: AutoAssignmentPreview
    total: int
    existing_count: int = Field(0, description="Assignments already stored for this period")


class AutoBuildRequest(BaseModel):
    review_period_id: str
    options: AutoAssignmentOptions = AutoAssignmentOptions()
    template_mapping: TemplateMapping
    due_date: Optional[date] = None


class AutoBuildResponse(BaseModel):
    created: int
    warnings: List[str] = []
    assignments: List[AssignmentResponse]


class AssignmentStatusUpdate(BaseModel):
    status: AssignmentStatus
