"""Service catalog: ADMIN and CLIENT may read, ADMIN writes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.v1.auth import require_admin, require_roles
from app.core.database import get_db
from app.models import Role
from app.schemas.catalog import ServiceCreate, ServiceOut, ServiceUpdate
from app.services import catalog
from app.services.authorization import Actor

router = APIRouter()

require_catalog_reader = require_roles(Role.ADMIN, Role.CLIENT)


@router.get("", response_model=list[ServiceOut])
def list_services(
    _user: Annotated[Actor, Depends(require_catalog_reader)],
    db: Annotated[Session, Depends(get_db)],
) -> list[ServiceOut]:
    return [ServiceOut.model_validate(s) for s in catalog.list_services(db)]


@router.get("/{service_id}", response_model=ServiceOut)
def get_service(
    service_id: int,
    _user: Annotated[Actor, Depends(require_catalog_reader)],
    db: Annotated[Session, Depends(get_db)],
) -> ServiceOut:
    return ServiceOut.model_validate(catalog.get_service(db, service_id))


@router.post("", response_model=ServiceOut, status_code=status.HTTP_201_CREATED)
def create_service(
    body: ServiceCreate,
    _admin: Annotated[Actor, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> ServiceOut:
    return ServiceOut.model_validate(catalog.create_service(db, body))


@router.patch("/{service_id}", response_model=ServiceOut)
def update_service(
    service_id: int,
    body: ServiceUpdate,
    _admin: Annotated[Actor, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> ServiceOut:
    return ServiceOut.model_validate(catalog.update_service(db, service_id, body))


@router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_service(
    service_id: int,
    _admin: Annotated[Actor, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> None:
    catalog.delete_service(db, service_id)
