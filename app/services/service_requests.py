"""Service requests: client creation and atomic admin approval."""

import logging

from sqlalchemy.orm import Query, Session, joinedload

from app.core.database import transaction
from app.core.errors import AlreadyApprovedError, NotFoundError
from app.models import (
    ClientCompany,
    Project,
    ProjectStatus,
    RequestStatus,
    Role,
    Service,
    ServiceRequest,
)
from app.schemas.service_requests import ServiceRequestCreate
from app.services.authorization import (
    Actor,
    decide_service_request_approve,
    decide_service_request_create,
)
from app.services.projects import project_query

logger = logging.getLogger(__name__)


def _request_query(db: Session) -> Query:
    return db.query(ServiceRequest).options(
        joinedload(ServiceRequest.service),
        joinedload(ServiceRequest.client),
    )


def approved_project_name(service_name: str, client_name: str) -> str:
    return f"{service_name} for {client_name}"


def list_requests(db: Session, actor: Actor) -> list[ServiceRequest]:
    """ADMIN: all requests. CLIENT: own company's (none if unlinked). Others: none."""
    query = _request_query(db)
    if actor.role == Role.CLIENT:
        if actor.client_company_id is None:
            return []
        query = query.filter(ServiceRequest.client_id == actor.client_company_id)
    elif actor.role != Role.ADMIN:
        return []
    return query.order_by(ServiceRequest.created_at.desc(), ServiceRequest.id.desc()).all()


def create_request(db: Session, actor: Actor, data: ServiceRequestCreate) -> ServiceRequest:
    decide_service_request_create(actor, data.client_id).enforce(actor, "service_request_create")
    if db.get(Service, data.service_id) is None:
        raise NotFoundError("Service not found")
    if db.get(ClientCompany, data.client_id) is None:
        raise NotFoundError("Client company not found")
    request = ServiceRequest(
        client_id=data.client_id,
        service_id=data.service_id,
        details=data.details,
        status=RequestStatus.PENDING.value,
        created_by=actor.id,
    )
    with transaction(db):
        db.add(request)
    logger.info(
        "Service request created",
        extra={"request_id": request.id, "client_id": request.client_id},
    )
    return _request_query(db).filter(ServiceRequest.id == request.id).one()


def approve_request(db: Session, actor: Actor, request_id: int) -> Project:
    """
    Mark a PENDING request APPROVED and create its project in one transaction.

    The project is named "<service name> for <client name>", copies the request
    details as its description and starts NOT_STARTED.
    """
    decide_service_request_approve(actor).enforce(actor, "service_request_approve")
    request = (
        _request_query(db)
        .filter(ServiceRequest.id == request_id)
        .with_for_update(of=ServiceRequest)
        .first()
    )
    if request is None:
        raise NotFoundError("Service request not found")
    if request.status == RequestStatus.APPROVED:
        db.rollback()
        raise AlreadyApprovedError()

    project = Project(
        name=approved_project_name(request.service.name, request.client.name),
        description=request.details,
        client_id=request.client_id,
        status=ProjectStatus.NOT_STARTED.value,
    )
    with transaction(db):
        request.status = RequestStatus.APPROVED.value
        db.add(project)
    logger.info(
        "Service request approved",
        extra={"request_id": request_id, "project_id": project.id},
    )
    return project_query(db).filter(Project.id == project.id).one()
