"""Account model - operator and user identities"""
from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from app.database import Base
from app.utils.clock import utcnow


class Account(Base):
    """A user account. ``password_hash`` is a bcrypt hash, never the plaintext."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    last_login = Column(DateTime, nullable=True, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    memberships = relationship("Membership", back_populates="account", cascade="all, delete-orphan")
    roles = relationship(
        "Role",
        secondary="memberships",
        order_by="Role.name",
        viewonly=True,
    )

    @property
    def role_names(self) -> set:
        return {role.name for role in self.roles}
