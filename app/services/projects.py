"""Projects: role-scoped reads, admin writes, assignments and status updates."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session, joinedload, selectinload

from app.core.database import transaction
from app.core.errors import ForbiddenError, NotFoundError
from app.models import ClientCompany, Project, ProjectEmployee, ProjectStatus, Role, User
from app.schemas.projects import ProjectCreate, ProjectUpdate
from app.services.authorization import (
    Actor,
    apply_project_scope,
    decide_project_read,
    decide_project_status_update,
    decide_unassign,
    project_scope,
)

logger = logging.getLogger(__name__)


def project_query(db: Session) -> Query:
    """Project query with client and assigned employees eagerly loaded."""
    return db.query(Project).options(
        joinedload(Project.client),
        selectinload(Project.assignments).joinedload(ProjectEmployee.employee),
    )


def _get_project(db: Session, project_id: int) -> Project:
    project = project_query(db).filter(Project.id == project_id).first()
    if project is None:
        raise NotFoundError("Project not found")
    return project


def _assigned_ids(project: Project) -> list[int]:
    return [a.employee_id for a in project.assignments]


def _require_company(db: Session, company_id: int) -> None:
    if db.get(ClientCompany, company_id) is None:
        raise NotFoundError("Client company not found")


def list_projects(db: Session, actor: Actor) -> list[Project]:
    """Admin: all. Employee: assigned. Client: own company (none if unlinked)."""
    query = apply_project_scope(project_query(db), project_scope(actor))
    return query.order_by(Project.updated_at.desc(), Project.id.desc()).all()


def list_employee_projects(db: Session, employee_id: int) -> list[Project]:
    return (
        project_query(db)
        .filter(Project.assignments.any(ProjectEmployee.employee_id == employee_id))
        .order_by(Project.updated_at.desc(), Project.id.desc())
        .all()
    )


def get_project(db: Session, actor: Actor, project_id: int) -> Project:
    project = _get_project(db, project_id)
    decide_project_read(actor, project.client_id, _assigned_ids(project)).enforce(
        actor, "project_read"
    )
    return project


def create_project(db: Session, data: ProjectCreate) -> Project:
    _require_company(db, data.client_id)
    project = Project(
        name=data.name.strip(),
        description=data.description,
        client_id=data.client_id,
        status=ProjectStatus.NOT_STARTED.value,
    )
    with transaction(db):
        db.add(project)
    return _get_project(db, project.id)


def update_project(db: Session, project_id: int, data: ProjectUpdate) -> Project:
    project = _get_project(db, project_id)
    if data.client_id is not None:
        _require_company(db, data.client_id)
    with transaction(db):
        if data.name is not None:
            project.name = data.name.strip()
        if "description" in data.model_fields_set:
            project.description = data.description
        if data.client_id is not None:
            project.client_id = data.client_id
        if data.status is not None:
            project.status = data.status.value
    db.expire_all()
    return _get_project(db, project_id)


def delete_project(db: Session, project_id: int) -> None:
    """Remove the assignments and the project in one transaction."""
    if db.get(Project, project_id) is None:
        raise NotFoundError("Project not found")
    with transaction(db):
        removed = (
            db.query(ProjectEmployee)
            .filter(ProjectEmployee.project_id == project_id)
            .delete(synchronize_session=False)
        )
        db.query(Project).filter(Project.id == project_id).delete(synchronize_session=False)
    db.expire_all()
    logger.info(
        "Project deleted",
        extra={"project_id": project_id, "assignments_removed": removed},
    )


def _existing_assignments(db: Session, project_id: int, employee_ids: set[int]) -> set[int]:
    return {
        row.employee_id
        for row in db.query(ProjectEmployee.employee_id).filter(
            ProjectEmployee.project_id == project_id,
            ProjectEmployee.employee_id.in_(employee_ids),
        )
    }


def _add_missing_assignments(db: Session, project_id: int, employee_ids: set[int]) -> None:
    already = _existing_assignments(db, project_id, employee_ids)
    with transaction(db):
        for employee_id in sorted(employee_ids - already):
            db.add(ProjectEmployee(project_id=project_id, employee_id=employee_id))


def assign_employees(db: Session, project_id: int, employee_ids: list[int]) -> Project:
    """
    Assign active EMPLOYEE users to a project. Existing assignments are kept as-is.

    Raises ForbiddenError if any id is not an active employee.
    """
    _get_project(db, project_id)
    wanted = set(employee_ids)
    employees = (
        db.query(User.id)
        .filter(User.id.in_(wanted), User.role == Role.EMPLOYEE, User.is_active.is_(True))
        .all()
    )
    if len(employees) != len(wanted):
        raise ForbiddenError("Some IDs are not valid employees")

    try:
        _add_missing_assignments(db, project_id, wanted)
    except IntegrityError:
        # Another request assigned some of the same employees after our read.
        logger.info("Assignment collided; retrying", extra={"project_id": project_id})
        _add_missing_assignments(db, project_id, wanted)
    db.expire_all()
    return _get_project(db, project_id)


def unassign_employee(db: Session, actor: Actor, project_id: int, employee_id: int) -> Project:
    """Remove one assignment. The self guard is checked before any lookup."""
    decide_unassign(actor, employee_id).enforce(actor, "project_unassign")
    assignment = (
        db.query(ProjectEmployee)
        .filter(
            ProjectEmployee.project_id == project_id,
            ProjectEmployee.employee_id == employee_id,
        )
        .first()
    )
    if assignment is None:
        raise NotFoundError("Assignment not found")
    with transaction(db):
        db.delete(assignment)
    db.expire_all()
    return _get_project(db, project_id)


def update_status(
    db: Session,
    actor: Actor,
    project_id: int,
    status: ProjectStatus,
) -> Project:
    """Any-to-any status change by an ADMIN or an employee assigned to the project."""
    project = _get_project(db, project_id)
    decide_project_status_update(actor, _assigned_ids(project)).enforce(
        actor, "project_status"
    )
    with transaction(db):
        project.status = status.value
    db.expire_all()
    return _get_project(db, project_id)
