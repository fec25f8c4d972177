"""Credential store: accounts and their membership sets"""
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.errors import ConflictError
from app.models.account import Account
from app.models.role import Membership, Role
from app.utils.pagination import paginate

EMAIL_EXISTS = "Email already exists"


class AccountStore:
    """SQLAlchemy-backed account persistence.

    Email uniqueness is guaranteed by the ``accounts.email`` unique constraint;
    a violation on commit is rolled back and raised as :class:`ConflictError`.
    """

    def __init__(self, db: Session):
        self.db = db

    def get(self, account_id: int) -> Optional[Account]:
        return self.db.get(Account, account_id)

    def get_by_email(self, email: str) -> Optional[Account]:
        return self.db.query(Account).filter(Account.email == email).first()

    def email_taken(self, email: str, exclude_id: Optional[int] = None) -> bool:
        query = self.db.query(Account.id).filter(Account.email == email)
        if exclude_id is not None:
            query = query.filter(Account.id != exclude_id)
        return query.first() is not None

    def list(
        self,
        page: int,
        limit: int,
        search: Optional[str] = None,
        role_name: Optional[str] = None,
    ) -> Tuple[List[Account], int]:
        query = self.db.query(Account)

        if search:
            needle = search.lower()
            query = query.filter(
                or_(
                    func.lower(Account.name).contains(needle, autoescape=True),
                    func.lower(Account.email).contains(needle, autoescape=True),
                )
            )
        if role_name:
            query = query.filter(Account.roles.any(Role.name == role_name))

        # id breaks created_at ties so pages never overlap
        query = query.order_by(Account.created_at.desc(), Account.id.desc())
        return paginate(query, page, limit)

    def add(self, account: Account, roles: Iterable[Role] = ()) -> Account:
        account.memberships = [Membership(role=role) for role in roles]
        self.db.add(account)
        self._commit()
        self.db.refresh(account)
        return account

    def save(self, account: Account) -> Account:
        self._commit()
        self.db.refresh(account)
        return account

    def replace_roles(self, account: Account, roles: Iterable[Role]) -> None:
        """Make ``roles`` the account's whole membership set (not committed).

        Memberships that survive are kept as-is so the (account, role) unique
        constraint is never hit by a delete/insert pair in one flush.
        """
        wanted = {role.id: role for role in roles}
        kept = [m for m in account.memberships if m.role_id in wanted]
        kept_ids = {m.role_id for m in kept}
        added = [Membership(role=role) for role_id, role in wanted.items() if role_id not in kept_ids]
        account.memberships = kept + added

    def delete(self, account: Account) -> None:
        self.db.delete(account)
        self.db.commit()

    def touch_last_login(self, account: Account, when: datetime) -> None:
        account.last_login = when
        self.db.commit()

    # ----- counts used by analytics -----

    def count(self) -> int:
        return self.db.query(func.count(Account.id)).scalar() or 0

    def count_logged_in_between(self, start: datetime, end: datetime) -> int:
        return (
            self.db.query(func.count(Account.id))
            .filter(Account.last_login >= start, Account.last_login <= end)
            .scalar()
            or 0
        )

    def count_created_between(self, start: datetime, end: datetime) -> int:
        return (
            self.db.query(func.count(Account.id))
            .filter(Account.created_at >= start, Account.created_at <= end)
            .scalar()
            or 0
        )

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(EMAIL_EXISTS)
