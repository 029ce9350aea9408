from pydantic import BaseModel, Field, ConfigDict, model_validator
from typing import Optional
from datetime import datetime
from appraisal_hub.models.assignment import RelationshipType
from appraisal_hub.schemas.template import TemplateResponse


class LinkCreate(BaseModel):
    employee_id: str
    appraiser_id: str
    template_id: str
    review_period_id: str
    expiration_days: Optional[int] = Field(None, ge=1, le=365)
    relationship_type: RelationshipType = RelationshipType.CUSTOM

    @model_validator(mode="after")
    def distinct_people(self):
        if self.employee_id == self.appraiser_id:
            raise ValueError("appraiser and employee must be different people")
        return self


class LinkResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    employee_id: str
    appraiser_id: str
    template_id: str
    review_period_id: str
    review_period_name: str
    token: str
    expires_at: Optional[datetime] = None
    used: bool
    created_at: Optional[datetime] = None


class LinkForm(BaseModel):
    """Everything an appraiser needs to render the form behind a token."""
    link: LinkResponse
    template: TemplateResponse
    employee_name: str
    appraiser_name: str
