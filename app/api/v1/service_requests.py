"""Service requests: CLIENT creates for own company, ADMIN approves (creates a project)."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user, require_admin, require_roles
from app.core.database import get_db
from app.models import Role
from app.schemas.projects import ProjectOut
from app.schemas.service_requests import ServiceRequestCreate, ServiceRequestOut
from app.services import service_requests as requests_service
from app.services.authorization import Actor

router = APIRouter()


@router.get("", response_model=list[ServiceRequestOut])
def list_requests(
    current_user: Annotated[Actor, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> list[ServiceRequestOut]:
    """ADMIN sees all requests; CLIENT sees own company requests."""
    return [
        ServiceRequestOut.model_validate(r)
        for r in requests_service.list_requests(db, current_user)
    ]


@router.post("", response_model=ServiceRequestOut, status_code=status.HTTP_201_CREATED)
def create_request(
    body: ServiceRequestCreate,
    current_user: Annotated[Actor, Depends(require_roles(Role.CLIENT))],
    db: Annotated[Session, Depends(get_db)],
) -> ServiceRequestOut:
    request = requests_service.create_request(db, current_user, body)
    return ServiceRequestOut.model_validate(request)


@router.patch("/{request_id}/approve", response_model=ProjectOut)
def approve_request(
    request_id: int,
    current_user: Annotated[Actor, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> ProjectOut:
    """Approve a pending request; returns the project created in the same transaction."""
    project = requests_service.approve_request(db, current_user, request_id)
    return ProjectOut.model_validate(project)
