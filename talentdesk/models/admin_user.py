"""
Admin account model.

Admins authenticate with email/password and receive a JWT carrying their
id, uuid and role.
"""

import uuid
from sqlalchemy import Column, Integer, String, DateTime, func
from talentdesk.core.database import Base


class AdminUser(Base):
    __tablename__ = "admin_users"

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))

    full_name = Column(String(100), nullable=False)
    email = Column(String(150), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)

    # Free-form role label; blank values are treated as "admin"
    role = Column(String(20), nullable=False, default="admin", server_default="admin")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    @property
    def effective_role(self) -> str:
        return self.role if self.role and self.role.strip() else "admin"

    def __repr__(self):
        return f"<AdminUser(id={self.id}, email='{self.email}', role='{self.role}')>"
