"""Schemas for the admin dashboard counters."""

from pydantic import BaseModel


class AdminStats(BaseModel):
    total_projects: int
    active_employees: int
    active_clients: int
    pending_requests: int
