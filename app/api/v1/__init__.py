"""API v1 routes."""

from fastapi import APIRouter

from app.api.v1 import (
    auth,
    clients,
    employees,
    health,
    messages,
    projects,
    service_requests,
    services,
    stats,
    users,
)

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(clients.router, prefix="/clients", tags=["clients"])
router.include_router(services.router, prefix="/services", tags=["services"])
router.include_router(
    service_requests.router, prefix="/service-requests", tags=["service-requests"]
)
router.include_router(projects.router, prefix="/projects", tags=["projects"])
router.include_router(employees.router, prefix="/employees", tags=["employees"])
router.include_router(messages.router, prefix="/messages", tags=["messages"])
router.include_router(stats.router, prefix="/admin", tags=["admin"])
