from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional

from appraisal_hub.core.state import AppState, get_app_state
from appraisal_hub.database import get_db
from appraisal_hub.models.assignment import RelationshipType
from appraisal_hub.schemas.template import Category, TemplateCreate, TemplateResponse, TemplateUpdate, WeightCheck
from appraisal_hub.services.scoring import check_template_weights
from appraisal_hub.services.template_service import TemplateService

router = APIRouter(prefix="/templates", tags=["Templates"])


@router.get("/", response_model=List[TemplateResponse])
def list_templates(
    template_type: Optional[RelationshipType] = None,
    db: Session = Depends(get_db),
    state: AppState = Depends(get_app_state),
):
    service = TemplateService(db, state)
    rows = service.list_templates(template_type.value if template_type else None)
    return [service.describe(t) for t in rows]


@router.post("/check-weights", response_model=WeightCheck)
def check_weights(categories: List[Category]):
    """Dry-run the 100-point weight rule without saving anything."""
    return check_template_weights(categories)


@router.post("/", response_model=TemplateResponse, status_code=status.HTTP_201_CREATED)
def create_template(
    data: TemplateCreate,
    db: Session = Depends(get_db),
    state: AppState = Depends(get_app_state),
):
    service = TemplateService(db, state)
    return service.describe(service.create(data))


@router.get("/{template_id}", response_model=TemplateResponse)
def get_template(template_id: str, db: Session = Depends(get_db), state: AppState = Depends(get_app_state)):
    service = TemplateService(db, state)
    return service.describe(service.get(template_id))


@router.patch("/{template_id}", response_model=TemplateResponse)
def update_template(
    template_id: str,
    data: TemplateUpdate,
    db: Session = Depends(get_db),
    state: AppState = Depends(get_app_state),
):
    service = TemplateService(db, state)
    return service.describe(service.update(template_id, data))


@router.post("/{template_id}/duplicate", response_model=TemplateResponse, status_code=status.HTTP_201_CREATED)
def duplicate_template(
    template_id: str,
    db: Session = Depends(get_db),
    state: AppState = Depends(get_app_state),
):
    service = TemplateService(db, state)
    return service.describe(service.duplicate(template_id))


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_template(template_id: str, db: Session = Depends(get_db), state: AppState = Depends(get_app_state)):
    TemplateService(db, state).delete(template_id)
