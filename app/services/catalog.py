"""Service catalog CRUD. Writes are ADMIN-only at the router."""

from sqlalchemy.orm import Session

from app.core.database import transaction
from app.core.errors import ConflictError, NotFoundError
from app.models import Service, ServiceRequest
from app.schemas.catalog import ServiceCreate, ServiceUpdate


def list_services(db: Session) -> list[Service]:
    return db.query(Service).order_by(Service.name, Service.id).all()


def get_service(db: Session, service_id: int) -> Service:
    service = db.get(Service, service_id)
    if service is None:
        raise NotFoundError("Service not found")
    return service


def create_service(db: Session, data: ServiceCreate) -> Service:
    service = Service(
        name=data.name.strip(),
        description=data.description,
        price=data.price,
    )
    with transaction(db):
        db.add(service)
    db.refresh(service)
    return service


def update_service(db: Session, service_id: int, data: ServiceUpdate) -> Service:
    service = get_service(db, service_id)
    with transaction(db):
        if data.name is not None:
            service.name = data.name.strip()
        if "description" in data.model_fields_set:
            service.description = data.description
        if data.price is not None:
            service.price = data.price
    db.refresh(service)
    return service


def delete_service(db: Session, service_id: int) -> None:
    service = get_service(db, service_id)
    in_use = db.query(ServiceRequest.id).filter(ServiceRequest.service_id == service_id).first()
    if in_use:
        raise ConflictError("Service is referenced by service requests")
    with transaction(db):
        db.delete(service)
