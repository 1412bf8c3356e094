"""Client company management and the client-facing project listing."""

import logging

from sqlalchemy.orm import Session

from app.core.database import transaction
from app.core.errors import ConflictError, NotFoundError
from app.models import ClientCompany, Project, ServiceRequest, User
from app.services.authorization import Actor, decide_company_projects
from app.services.projects import project_query

logger = logging.getLogger(__name__)


def _get_company(db: Session, company_id: int) -> ClientCompany:
    company = db.get(ClientCompany, company_id)
    if company is None:
        raise NotFoundError("Client company not found")
    return company


def list_companies(db: Session) -> list[ClientCompany]:
    return db.query(ClientCompany).order_by(ClientCompany.name, ClientCompany.id).all()


def create_company(db: Session, name: str) -> ClientCompany:
    company = ClientCompany(name=name.strip())
    with transaction(db):
        db.add(company)
    db.refresh(company)
    return company


def update_company(db: Session, company_id: int, name: str) -> ClientCompany:
    company = _get_company(db, company_id)
    with transaction(db):
        company.name = name.strip()
    db.refresh(company)
    return company


def delete_company(db: Session, company_id: int) -> None:
    """
    Delete a company that nothing references.

    No cascade policy exists for linked users, projects or service requests, so a
    referenced company is refused with ConflictError instead.
    """
    company = _get_company(db, company_id)
    referenced = (
        db.query(User.id).filter(User.client_company_id == company_id).first()
        or db.query(Project.id).filter(Project.client_id == company_id).first()
        or db.query(ServiceRequest.id).filter(ServiceRequest.client_id == company_id).first()
    )
    if referenced:
        raise ConflictError("Client company still has users, projects or service requests")
    with transaction(db):
        db.delete(company)
    logger.info("Client company deleted", extra={"company_id": company_id})


def list_company_projects(db: Session, actor: Actor, company_id: int) -> list[Project]:
    """Projects of one company, for a CLIENT of that same company only."""
    decide_company_projects(actor, company_id).enforce(actor, "company_projects")
    return (
        project_query(db)
        .filter(Project.client_id == company_id)
        .order_by(Project.updated_at.desc(), Project.id.desc())
        .all()
    )
