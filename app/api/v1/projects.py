"""Projects: role-scoped reads, ADMIN writes and staffing, status updates by assignees."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user, require_admin, require_roles
from app.core.database import get_db
from app.models import Role
from app.schemas.projects import (
    AssignRequest,
    ProjectCreate,
    ProjectOut,
    ProjectStatusUpdate,
    ProjectUpdate,
)
from app.services import projects as projects_service
from app.services.authorization import Actor

router = APIRouter()


@router.get("", response_model=list[ProjectOut])
def list_projects(
    current_user: Annotated[Actor, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> list[ProjectOut]:
    """ADMIN: all projects. EMPLOYEE: assigned projects. CLIENT: own company projects."""
    return [
        ProjectOut.model_validate(p)
        for p in projects_service.list_projects(db, current_user)
    ]


@router.get("/{project_id}", response_model=ProjectOut)
def get_project(
    project_id: int,
    current_user: Annotated[Actor, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ProjectOut:
    return ProjectOut.model_validate(projects_service.get_project(db, current_user, project_id))


@router.post("", response_model=ProjectOut, status_code=status.HTTP_201_CREATED)
def create_project(
    body: ProjectCreate,
    _admin: Annotated[Actor, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> ProjectOut:
    return ProjectOut.model_validate(projects_service.create_project(db, body))


@router.patch("/{project_id}", response_model=ProjectOut)
def update_project(
    project_id: int,
    body: ProjectUpdate,
    _admin: Annotated[Actor, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> ProjectOut:
    return ProjectOut.model_validate(projects_service.update_project(db, project_id, body))


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(
    project_id: int,
    _admin: Annotated[Actor, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> None:
    """Delete the project and its assignments atomically."""
    projects_service.delete_project(db, project_id)


@router.post("/{project_id}/assign", response_model=ProjectOut)
def assign_employees(
    project_id: int,
    body: AssignRequest,
    _admin: Annotated[Actor, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> ProjectOut:
    project = projects_service.assign_employees(db, project_id, body.employee_ids)
    return ProjectOut.model_validate(project)


@router.delete("/{project_id}/assign/{employee_id}", response_model=ProjectOut)
def unassign_employee(
    project_id: int,
    employee_id: int,
    current_user: Annotated[Actor, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> ProjectOut:
    """Remove one employee from the project. An admin cannot unassign their own id."""
    project = projects_service.unassign_employee(db, current_user, project_id, employee_id)
    return ProjectOut.model_validate(project)


@router.patch("/{project_id}/status", response_model=ProjectOut)
def update_status(
    project_id: int,
    body: ProjectStatusUpdate,
    current_user: Annotated[Actor, Depends(require_roles(Role.ADMIN, Role.EMPLOYEE))],
    db: Annotated[Session, Depends(get_db)],
) -> ProjectOut:
    """Change status. Allowed for ADMIN or an employee assigned to the project."""
    project = projects_service.update_status(db, current_user, project_id, body.status)
    return ProjectOut.model_validate(project)
