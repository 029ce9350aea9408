from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator
from typing import Optional, List
from datetime import datetime
from appraisal_hub.models.assignment import RelationshipType
from appraisal_hub.models.template import QuestionType


class CategoryItem(BaseModel):
    id: Optional[str] = None
    text: str = Field(..., min_length=1)
    category_name: Optional[str] = None  # optional sub-category label
    type: QuestionType = QuestionType.RATING
    weight: float = Field(..., ge=0, le=100)
    required: bool = True
    options: Optional[List[str]] = None
    order: int = 0

    @model_validator(mode="after")
    def check_options(self):
        if self.type == QuestionType.MULTIPLE_CHOICE:
            cleaned = [o.strip() for o in (self.options or []) if o and o.strip()]
            if not cleaned:
                raise ValueError("multiple-choice items need at least one option")
            self.options = cleaned
        return self


class Category(BaseModel):
    id: Optional[str] = None
    category_name: str = Field(..., min_length=1)
    items: List[CategoryItem] = []
    order: int = 0


class LegacyQuestion(BaseModel):
    """Flat question from schema version 1 templates."""
    id: Optional[str] = None
    evaluation_factor: Optional[float] = None
    category_name: Optional[str] = None
    text: str
    type: str = QuestionType.RATING.value  # may still be "rating-1-10"
    weight: float = 0
    required: bool = True
    options: Optional[List[str]] = None
    order: int = 0


class TemplateBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    subtitle: Optional[str] = None
    type: RelationshipType

    @field_validator("type")
    @classmethod
    def no_custom_templates(cls, value: RelationshipType) -> RelationshipType:
        if value == RelationshipType.CUSTOM:
            raise ValueError("template type must be one of the six relationship categories")
        return value


class TemplateCreate(TemplateBase):
    """Accepts the category shape, or a legacy ``questions`` list that is migrated on save."""
    categories: List[Category] = []
    questions: Optional[List[LegacyQuestion]] = None


class TemplateUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    subtitle: Optional[str] = None
    type: Optional[RelationshipType] = None
    categories: Optional[List[Category]] = None


class TemplateResponse(TemplateBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    categories: List[Category]
    version: int
    schema_version: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    item_count: Optional[int] = None
    total_weight: Optional[float] = None

    # Stored rows are read back verbatim, including any historical "custom" type
    @field_validator("type")
    @classmethod
    def no_custom_templates(cls, value: RelationshipType) -> RelationshipType:
        return value


class WeightCheck(BaseModel):
    total_weight: float
    valid: bool
    difference: float
