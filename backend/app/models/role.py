"""Role and Membership models"""
from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from app.database import Base
from app.utils.clock import utcnow

SUPERADMIN_ROLE = "superadmin"


class Role(Base):
    """A named set of free-form permission strings.

    The role named ``superadmin`` is the capability checked by the access gate;
    its name is frozen once created.
    """

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), unique=True, nullable=False, index=True)
    permissions = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    memberships = relationship("Membership", back_populates="role", cascade="all, delete-orphan")
    members = relationship(
        "Account",
        secondary="memberships",
        order_by="Account.id",
        viewonly=True,
    )


class Membership(Base):
    """Account <-> Role link. A given (account, role) pair exists at most once."""

    __tablename__ = "memberships"
    __table_args__ = (
        UniqueConstraint("account_id", "role_id", name="uq_memberships_account_role"),
    )

    id = Column(Integer, primary_key=True, index=True)
    account_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    role_id = Column(Integer, ForeignKey("roles.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    # Relationships
    account = relationship("Account", back_populates="memberships")
    role = relationship("Role", back_populates="memberships")
