from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime
from appraisal_hub.models.employee import HierarchyLevel, EmploymentStatus, ExecutiveType


class EmployeeBase(BaseModel):
    """Base schema for employee data."""
    name: str = Field(..., min_length=1, max_length=200)
    email: Optional[str] = None
    role: str = ""
    hierarchy: HierarchyLevel = HierarchyLevel.MEMBER
    executive_type: Optional[ExecutiveType] = None
    reports_to: Optional[str] = None
    team_id: Optional[str] = None
    employment_status: EmploymentStatus = EmploymentStatus.PERMANENT


class EmployeeCreate(EmployeeBase):
    """Schema for creating a new employee."""
    pass


class EmployeeUpdate(BaseModel):
    """Schema for updating an employee."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[str] = None
    role: Optional[str] = None
    hierarchy: Optional[HierarchyLevel] = None
    executive_type: Optional[ExecutiveType] = None
    reports_to: Optional[str] = None
    team_id: Optional[str] = None
    employment_status: Optional[EmploymentStatus] = None


class EmployeeResponse(EmployeeBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ReportingChainResponse(BaseModel):
    employee_id: str
    chain: List[EmployeeResponse]
    direct_reports: List[EmployeeResponse]


class SpanOfControl(BaseModel):
    """Direct-report counts for leaders/executives that have at least one report."""
    avg: float
    max: int
    min: int
    counts: List[int]
