"""Aggregate counters for the admin dashboard."""

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models import Project, RequestStatus, Role, ServiceRequest, User
from app.schemas.stats import AdminStats


def _active_users(db: Session, role: Role) -> int:
    return (
        db.query(func.count(User.id))
        .filter(User.role == role, User.is_active.is_(True))
        .scalar()
    )


def admin_stats(db: Session) -> AdminStats:
    return AdminStats(
        total_projects=db.query(func.count(Project.id)).scalar(),
        active_employees=_active_users(db, Role.EMPLOYEE),
        active_clients=_active_users(db, Role.CLIENT),
        pending_requests=db.query(func.count(ServiceRequest.id))
        .filter(ServiceRequest.status == RequestStatus.PENDING)
        .scalar(),
    )
