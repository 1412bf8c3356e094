"""Employee self-service routes."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.auth import require_roles
from app.core.database import get_db
from app.models import Role
from app.schemas.projects import ProjectOut
from app.services import projects as projects_service
from app.services.authorization import Actor

router = APIRouter()


@router.get("/me/projects", response_model=list[ProjectOut])
def my_projects(
    current_user: Annotated[Actor, Depends(require_roles(Role.EMPLOYEE))],
    db: Annotated[Session, Depends(get_db)],
) -> list[ProjectOut]:
    """Projects the calling employee is assigned to."""
    projects = projects_service.list_employee_projects(db, current_user.id)
    return [ProjectOut.model_validate(p) for p in projects]
