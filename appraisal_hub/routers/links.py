from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
from typing import List, Optional

from appraisal_hub.core.exceptions import NotFoundError
from appraisal_hub.core.limiter import PUBLIC_LINK_LIMIT, limiter
from appraisal_hub.core.state import AppState, get_app_state
from appraisal_hub.database import get_db
from appraisal_hub.schemas.appraisal import AppraisalOut, AppraisalSubmission
from appraisal_hub.schemas.link import LinkCreate, LinkForm, LinkResponse
from appraisal_hub.services.appraisal_service import AppraisalService
from appraisal_hub.services.link_service import LinkService

router = APIRouter(prefix="/links", tags=["Appraisal Links"])


@router.get("/", response_model=List[LinkResponse])
def list_links(
    active_only: bool = False,
    review_period_id: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return LinkService(db).list_links(active_only=active_only, review_period_id=review_period_id)


@router.post("/", response_model=LinkResponse, status_code=status.HTTP_201_CREATED)
def create_link(data: LinkCreate, db: Session = Depends(get_db), state: AppState = Depends(get_app_state)):
    return LinkService(db, state).create(data)


# Public token endpoints: the appraiser opens these without signing in

@router.get("/token/{token}", response_model=LinkForm)
@limiter.limit(PUBLIC_LINK_LIMIT)
def open_link(request: Request, token: str, db: Session = Depends(get_db), state: AppState = Depends(get_app_state)):
    link = LinkService(db, state).resolve(token)
    template = state.find("templates", db, link.template_id)
    if template is None:
        raise NotFoundError("Template", link.template_id)
    people = {}
    for employee_id in (link.employee_id, link.appraiser_id):
        people[employee_id] = state.find("employees", db, employee_id)
        if people[employee_id] is None:
            raise NotFoundError("Employee", employee_id)
    return LinkForm(
        link=LinkResponse.model_validate(link),
        template=template,
        employee_name=people[link.employee_id].name,
        appraiser_name=people[link.appraiser_id].name,
    )


@router.post("/token/{token}/submit", response_model=AppraisalOut, status_code=status.HTTP_201_CREATED)
@limiter.limit(PUBLIC_LINK_LIMIT)
def submit_link(
    request: Request,
    token: str,
    data: AppraisalSubmission,
    db: Session = Depends(get_db),
    state: AppState = Depends(get_app_state),
):
    return AppraisalService(db, state).submit_by_token(token, data.responses)


@router.delete("/{link_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_link(link_id: str, db: Session = Depends(get_db)):
    LinkService(db).delete(link_id)
