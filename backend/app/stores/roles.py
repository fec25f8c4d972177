"""Role store: roles and single-membership assignment"""
from typing import Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.errors import ConflictError
from app.models.role import Membership, Role

ROLE_NAME_EXISTS = "Role name already exists"
ALREADY_HAS_ROLE = "User already has this role"


class RoleStore:
    """SQLAlchemy-backed role and membership persistence"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, role_id: int) -> Optional[Role]:
        return self.db.get(Role, role_id)

    def get_by_name(self, name: str) -> Optional[Role]:
        return self.db.query(Role).filter(Role.name == name).first()

    def get_many(self, role_ids: Iterable[int]) -> List[Role]:
        ids = set(role_ids)
        if not ids:
            return []
        return self.db.query(Role).filter(Role.id.in_(ids)).order_by(Role.id).all()

    def list_all(self) -> List[Role]:
        return (
            self.db.query(Role)
            .options(selectinload(Role.members))
            .order_by(Role.name.asc())
            .all()
        )

    def name_taken(self, name: str, exclude_id: Optional[int] = None) -> bool:
        query = self.db.query(Role.id).filter(Role.name == name)
        if exclude_id is not None:
            query = query.filter(Role.id != exclude_id)
        return query.first() is not None

    def add(self, role: Role) -> Role:
        self.db.add(role)
        self._commit(ROLE_NAME_EXISTS)
        self.db.refresh(role)
        return role

    def save(self, role: Role) -> Role:
        self._commit(ROLE_NAME_EXISTS)
        self.db.refresh(role)
        return role

    def has_membership(self, account_id: int, role_id: int) -> bool:
        return (
            self.db.query(Membership.id)
            .filter(Membership.account_id == account_id, Membership.role_id == role_id)
            .first()
            is not None
        )

    def add_membership(self, account_id: int, role_id: int) -> Membership:
        membership = Membership(account_id=account_id, role_id=role_id)
        self.db.add(membership)
        self._commit(ALREADY_HAS_ROLE)
        return membership

    def count_memberships(self, account_id: int, role_id: int) -> int:
        return (
            self.db.query(func.count(Membership.id))
            .filter(Membership.account_id == account_id, Membership.role_id == role_id)
            .scalar()
            or 0
        )

    def count(self) -> int:
        return self.db.query(func.count(Role.id)).scalar() or 0

    def _commit(self, conflict_message: str) -> None:
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(conflict_message)
