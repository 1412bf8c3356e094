"""
Relationship-derived authorization.

Decisions are pure functions of (actor, ownership facts) returning a Decision.
The fact-gathering helpers below them read the database but never write; callers
re-read facts per request so role, liveness and company links are always current.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from sqlalchemy import false, select

from app.core.errors import ForbiddenError
from app.models import ClientCompany, Project, ProjectEmployee, Role, User
from app.schemas.messages import ChatPartner

if TYPE_CHECKING:
    from sqlalchemy.orm import Query, Session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Actor:
    """Identity a decision is made for: the requester, or a messaging peer."""

    id: int
    role: str
    client_company_id: int | None = None

    @classmethod
    def from_user(cls, user: User) -> Actor:
        return cls(id=user.id, role=user.role, client_company_id=user.client_company_id)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


@dataclass(frozen=True)
class Decision:
    """Outcome of an authorization rule. Falsy when denied."""

    allowed: bool
    reason: str = ""

    def __bool__(self) -> bool:
        return self.allowed

    def enforce(self, actor: Actor | None = None, rule: str = "") -> None:
        """Raise ForbiddenError with the denial reason unless allowed."""
        if self.allowed:
            return
        logger.info(
            "Authorization denied",
            extra={
                "actor_id": actor.id if actor else None,
                "rule": rule,
                "reason": self.reason,
            },
        )
        raise ForbiddenError(self.reason)


ALLOW = Decision(True)


def deny(reason: str) -> Decision:
    return Decision(False, reason)


# ---------------------------------------------------------------------------
# Pure decisions
# ---------------------------------------------------------------------------


def decide_role(actor: Actor, *roles: str) -> Decision:
    if actor.role in roles:
        return ALLOW
    return deny("Insufficient role for this operation")


def decide_messaging(sender: Actor, receiver: Actor, shares_project: bool) -> Decision:
    """
    Pairwise messaging rule.

    shares_project: the EMPLOYEE party is assigned to at least one project whose
    client is the CLIENT party's company. Ignored for other pairings.
    """
    if sender.id == receiver.id:
        return deny("You cannot message yourself")
    if sender.is_admin or receiver.is_admin:
        return ALLOW
    if sender.role == Role.EMPLOYEE and receiver.role == Role.CLIENT:
        if receiver.client_company_id is not None and shares_project:
            return ALLOW
        return deny("You are not allowed to message this user")
    if sender.role == Role.CLIENT and receiver.role == Role.EMPLOYEE:
        if sender.client_company_id is not None and shares_project:
            return ALLOW
        return deny("You are not allowed to message this user")
    return deny("You are not allowed to message this user")


ScopeKind = Literal["all", "assigned", "company", "none"]


@dataclass(frozen=True)
class ProjectScope:
    kind: ScopeKind
    employee_id: int | None = None
    company_id: int | None = None


def project_scope(actor: Actor) -> ProjectScope:
    """Which projects an actor may see: all, assigned ones, their company's, or none."""
    if actor.is_admin:
        return ProjectScope("all")
    if actor.role == Role.EMPLOYEE:
        return ProjectScope("assigned", employee_id=actor.id)
    if actor.role == Role.CLIENT and actor.client_company_id is not None:
        return ProjectScope("company", company_id=actor.client_company_id)
    return ProjectScope("none")


def decide_project_read(
    actor: Actor,
    project_client_id: int,
    assigned_employee_ids: Iterable[int],
) -> Decision:
    scope = project_scope(actor)
    if scope.kind == "all":
        return ALLOW
    if scope.kind == "assigned" and scope.employee_id in set(assigned_employee_ids):
        return ALLOW
    if scope.kind == "company" and scope.company_id == project_client_id:
        return ALLOW
    return deny("You are not allowed to view this project")


def decide_project_status_update(actor: Actor, assigned_employee_ids: Iterable[int]) -> Decision:
    if actor.is_admin:
        return ALLOW
    if actor.role == Role.EMPLOYEE and actor.id in set(assigned_employee_ids):
        return ALLOW
    return deny("Only assigned employees or ADMIN can update project status")


def decide_unassign(actor: Actor, employee_id: int) -> Decision:
    """ADMIN only; the target id must not be the acting admin's own id, assigned or not."""
    if not actor.is_admin:
        return deny("Only ADMIN can unassign employees")
    if employee_id == actor.id:
        return deny("Cannot unassign yourself")
    return ALLOW


def decide_company_projects(actor: Actor, company_id: int) -> Decision:
    if actor.role != Role.CLIENT:
        return deny("Only CLIENT can access this endpoint")
    if actor.client_company_id is None or actor.client_company_id != company_id:
        return deny("You can only view your own company projects")
    return ALLOW


def decide_service_request_create(actor: Actor, requested_company_id: int) -> Decision:
    if actor.role != Role.CLIENT:
        return deny("Only CLIENT can create service requests")
    if actor.client_company_id is None:
        return deny("User must be linked to a client company")
    if requested_company_id != actor.client_company_id:
        return deny("client_id must match your client company")
    return ALLOW


def decide_service_request_approve(actor: Actor) -> Decision:
    if actor.is_admin:
        return ALLOW
    return deny("Only ADMIN can approve service requests")


# ---------------------------------------------------------------------------
# Fact gathering (reads only)
# ---------------------------------------------------------------------------


def apply_project_scope(query: Query, scope: ProjectScope) -> Query:
    """Restrict a Project query to the rows visible under scope."""
    if scope.kind == "all":
        return query
    if scope.kind == "assigned":
        return query.filter(
            Project.assignments.any(ProjectEmployee.employee_id == scope.employee_id)
        )
    if scope.kind == "company":
        return query.filter(Project.client_id == scope.company_id)
    return query.filter(false())


def employee_serves_company(db: Session, employee_id: int, company_id: int) -> bool:
    """True if the employee is assigned to any project of the given company."""
    row = (
        db.query(ProjectEmployee.id)
        .join(Project, Project.id == ProjectEmployee.project_id)
        .filter(
            ProjectEmployee.employee_id == employee_id,
            Project.client_id == company_id,
        )
        .first()
    )
    return row is not None


def _active_user(db: Session, user_id: int) -> User | None:
    return db.query(User).filter(User.id == user_id, User.is_active.is_(True)).first()


def messaging_decision(db: Session, sender_id: int, receiver_id: int) -> Decision:
    """Apply the pairwise rule to current records. Missing or inactive users are denied."""
    if sender_id == receiver_id:
        return deny("You cannot message yourself")
    sender_row = _active_user(db, sender_id)
    receiver_row = _active_user(db, receiver_id)
    if sender_row is None or receiver_row is None:
        return deny("You are not allowed to message this user")
    sender = Actor.from_user(sender_row)
    receiver = Actor.from_user(receiver_row)

    shares_project = False
    if sender.role == Role.EMPLOYEE and receiver.role == Role.CLIENT and receiver.client_company_id:
        shares_project = employee_serves_company(db, sender.id, receiver.client_company_id)
    elif sender.role == Role.CLIENT and receiver.role == Role.EMPLOYEE and sender.client_company_id:
        shares_project = employee_serves_company(db, receiver.id, sender.client_company_id)
    return decide_messaging(sender, receiver, shares_project)


def can_message(db: Session, sender_id: int, receiver_id: int) -> bool:
    return messaging_decision(db, sender_id, receiver_id).allowed


def _partner(user: User, category: str) -> ChatPartner:
    return ChatPartner(id=user.id, name=user.name, role=user.role, category=category)


def _active_admins(db: Session, exclude_id: int) -> list[User]:
    return (
        db.query(User)
        .filter(User.role == Role.ADMIN, User.is_active.is_(True), User.id != exclude_id)
        .order_by(User.name, User.id)
        .all()
    )


def chat_partners(db: Session, actor: Actor) -> list[ChatPartner]:
    """
    Enumerate every user the actor may message.

    Mirrors decide_messaging: each returned peer passes can_message(actor.id, peer.id).
    """
    if actor.is_admin:
        rows = (
            db.query(User, ClientCompany.name)
            .outerjoin(ClientCompany, ClientCompany.id == User.client_company_id)
            .filter(User.id != actor.id, User.is_active.is_(True))
            .order_by(User.name, User.id)
            .all()
        )
        return [_partner(user, company_name or user.role) for user, company_name in rows]

    if actor.role == Role.EMPLOYEE:
        partners = [_partner(a, "Management") for a in _active_admins(db, actor.id)]
        company_ids = (
            select(Project.client_id)
            .join(ProjectEmployee, ProjectEmployee.project_id == Project.id)
            .where(ProjectEmployee.employee_id == actor.id)
        )
        rows = (
            db.query(User, ClientCompany.name)
            .outerjoin(ClientCompany, ClientCompany.id == User.client_company_id)
            .filter(
                User.role == Role.CLIENT,
                User.is_active.is_(True),
                User.client_company_id.in_(company_ids),
            )
            .order_by(User.name, User.id)
            .all()
        )
        partners.extend(_partner(user, company_name or "Client") for user, company_name in rows)
        return partners

    if actor.role == Role.CLIENT:
        partners = [_partner(a, "Support") for a in _active_admins(db, actor.id)]
        if actor.client_company_id is None:
            return partners
        employees = (
            db.query(User)
            .join(ProjectEmployee, ProjectEmployee.employee_id == User.id)
            .join(Project, Project.id == ProjectEmployee.project_id)
            .filter(
                Project.client_id == actor.client_company_id,
                User.role == Role.EMPLOYEE,
                User.is_active.is_(True),
            )
            .distinct()
            .order_by(User.name, User.id)
            .all()
        )
        partners.extend(_partner(e, "Project Team") for e in employees)
        return partners

    return []
