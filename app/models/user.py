"""ORM model for application users (auth and RBAC)."""

import enum

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship

from app.models.base import Base


class Role(str, enum.Enum):
    ADMIN = "ADMIN"
    EMPLOYEE = "EMPLOYEE"
    CLIENT = "CLIENT"


class User(Base):
    """
    User account for JWT authentication and relationship-based access control.

    role: ADMIN, EMPLOYEE or CLIENT. client_company_id is set for CLIENT users only.
    Users are never hard-deleted; is_active=False means the account does not exist
    for login, token resolution and messaging.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    # Stored lowercase; lookups normalise before querying.
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default=Role.EMPLOYEE.value, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    client_company_id = Column(
        Integer,
        ForeignKey("client_companies.id"),
        nullable=True,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    client_company = relationship("ClientCompany", back_populates="users")
