"""ORM models for projects and employee assignments."""

import enum

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from app.models.base import Base


class ProjectStatus(str, enum.Enum):
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class Project(Base):
    """Work for one client company. Status transitions are unordered."""

    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    client_id = Column(Integer, ForeignKey("client_companies.id"), nullable=False, index=True)
    status = Column(String(32), nullable=False, default=ProjectStatus.NOT_STARTED.value)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    client = relationship("ClientCompany", back_populates="projects")
    assignments = relationship(
        "ProjectEmployee",
        back_populates="project",
        order_by="ProjectEmployee.assigned_at",
    )


class ProjectEmployee(Base):
    """Assignment of one employee to one project."""

    __tablename__ = "project_employees"
    __table_args__ = (
        UniqueConstraint("project_id", "employee_id", name="uq_project_employees_project_employee"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    employee_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    assigned_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    project = relationship("Project", back_populates="assignments")
    employee = relationship("User")
