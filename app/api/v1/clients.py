"""Client company management (ADMIN) and own-company project listing (CLIENT)."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user, require_admin
from app.core.database import get_db
from app.schemas.clients import CompanyCreate, CompanyOut, CompanyUpdate
from app.schemas.projects import ProjectOut
from app.services import clients as clients_service
from app.services.authorization import Actor

router = APIRouter()


@router.get("", response_model=list[CompanyOut])
def list_companies(
    _admin: Annotated[Actor, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> list[CompanyOut]:
    return [CompanyOut.model_validate(c) for c in clients_service.list_companies(db)]


@router.post("", response_model=CompanyOut, status_code=status.HTTP_201_CREATED)
def create_company(
    body: CompanyCreate,
    _admin: Annotated[Actor, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> CompanyOut:
    return CompanyOut.model_validate(clients_service.create_company(db, body.name))


@router.patch("/{company_id}", response_model=CompanyOut)
def update_company(
    company_id: int,
    body: CompanyUpdate,
    _admin: Annotated[Actor, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> CompanyOut:
    return CompanyOut.model_validate(clients_service.update_company(db, company_id, body.name))


@router.delete("/{company_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_company(
    company_id: int,
    _admin: Annotated[Actor, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> None:
    """Delete a company. Refused with 409 while users, projects or requests reference it."""
    clients_service.delete_company(db, company_id)


@router.get("/{company_id}/projects", response_model=list[ProjectOut])
def list_company_projects(
    company_id: int,
    current_user: Annotated[Actor, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> list[ProjectOut]:
    """Projects of the caller's own company (CLIENT only; admins use GET /projects)."""
    projects = clients_service.list_company_projects(db, current_user, company_id)
    return [ProjectOut.model_validate(p) for p in projects]
