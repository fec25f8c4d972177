"""Administrative service: account and role management with audit side effects.

Every successful mutating operation (and every successful login) appends exactly
one audit entry through :class:`~app.services.audit_trail.AuditTrail` after the
mutation has been committed. See that module for the best-effort write policy.
"""
from typing import Callable, Iterable, List, NamedTuple, Optional

from app.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from app.middleware.monitoring import record_auth_failure
from app.models.account import Account
from app.models.audit_log import AuditAction, AuditTargetType
from app.models.role import SUPERADMIN_ROLE, Role
from app.services.audit_trail import AuditTrail
from app.stores.accounts import EMAIL_EXISTS, AccountStore
from app.stores.roles import ALREADY_HAS_ROLE, ROLE_NAME_EXISTS, RoleStore
from app.utils.auth import hash_password, verify_password
from app.utils.clock import utcnow
from app.utils.jwt_utils import create_access_token
from app.utils.logger import logger
from app.utils.pagination import total_pages

INVALID_CREDENTIALS = "Invalid credentials"
DEFAULT_PAGE_SIZE = 10


class AccountPage(NamedTuple):
    accounts: List[Account]
    total: int
    page: int
    limit: int
    total_pages: int


class LoginResult(NamedTuple):
    token: str
    account: Account


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class AdminService:
    """Orchestrates the credential store, role store and audit trail.

    Args:
        accounts: credential store.
        roles:    role store.
        audit:    audit trail used for the per-operation entry.
        clock:    returns "now" as naive UTC; injectable for tests.
    """

    def __init__(
        self,
        accounts: AccountStore,
        roles: RoleStore,
        audit: AuditTrail,
        clock: Callable = utcnow,
    ):
        self.accounts = accounts
        self.roles = roles
        self.audit = audit
        self.clock = clock

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def authenticate(self, email: Optional[str], password: Optional[str]) -> LoginResult:
        """Check credentials, stamp ``last_login``, audit LOGIN and issue a token.

        Unknown email and wrong password raise the same error.
        """
        if _blank(email) or not password:
            raise ValidationError("Email and password are required")

        account = self.accounts.get_by_email(email)
        if account is None or not verify_password(password, account.password_hash):
            record_auth_failure("login")
            logger.info("Login rejected")
            raise AuthenticationError(INVALID_CREDENTIALS)

        self.accounts.touch_last_login(account, self.clock())
        self.audit.append(account.id, AuditAction.LOGIN, AuditTargetType.SYSTEM)

        token = create_access_token(account.id, account.email)
        logger.info("Login succeeded", extra={"account_id": account.id})
        return LoginResult(token=token, account=account)

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    def list_accounts(
        self,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
        search: Optional[str] = None,
        role_name: Optional[str] = None,
    ) -> AccountPage:
        if page < 1 or limit < 1:
            raise ValidationError("page and limit must be positive")
        accounts, total = self.accounts.list(page, limit, search=search or None, role_name=role_name or None)
        return AccountPage(accounts, total, page, limit, total_pages(total, limit))

    def get_account(self, account_id: int) -> Account:
        account = self.accounts.get(account_id)
        if account is None:
            raise NotFoundError("User not found")
        return account

    def create_account(
        self,
        actor_id: Optional[int],
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
        role_ids: Iterable[int] = (),
    ) -> Account:
        if _blank(name) or _blank(email) or not password:
            raise ValidationError("Name, email, and password are required")

        if self.accounts.email_taken(email):
            raise ConflictError(EMAIL_EXISTS)

        roles = self.roles.get_many(role_ids)
        account = self.accounts.add(
            Account(name=name, email=email, password_hash=hash_password(password)),
            roles=roles,
        )

        self.audit.append(
            actor_id,
            AuditAction.CREATE,
            AuditTargetType.USER,
            account.id,
            {"email": account.email, "assignedRoles": [role.id for role in roles]},
        )
        return account

    def update_account(
        self,
        actor_id: Optional[int],
        account_id: int,
        name: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
        role_ids: Optional[Iterable[int]] = None,
    ) -> Account:
        """Apply a partial update. ``None`` means "leave unchanged".

        A non-``None`` ``role_ids`` (including an empty list) replaces the whole
        membership set.
        """
        account = self.get_account(account_id)

        # Validate everything before touching the instance
        if name is not None and _blank(name):
            raise ValidationError("Name cannot be empty")
        if email is not None:
            if _blank(email):
                raise ValidationError("Email cannot be empty")
            if self.accounts.email_taken(email, exclude_id=account.id):
                raise ConflictError(EMAIL_EXISTS)
        if password is not None and not password:
            raise ValidationError("Password cannot be empty")

        updated_fields = []
        if name is not None:
            account.name = name
            updated_fields.append("name")
        if email is not None:
            account.email = email
            updated_fields.append("email")
        if password is not None:
            account.password_hash = hash_password(password)
            updated_fields.append("password")
        if role_ids is not None:
            self.accounts.replace_roles(account, self.roles.get_many(role_ids))
            updated_fields.append("roleIds")
        if updated_fields:
            account.updated_at = self.clock()

        account = self.accounts.save(account)

        self.audit.append(
            actor_id,
            AuditAction.UPDATE,
            AuditTargetType.USER,
            account.id,
            {"updatedFields": updated_fields, "email": account.email},
        )
        return account

    def delete_account(self, actor_id: int, account_id: int) -> None:
        """Delete an account and its memberships.

        The DELETE entry is written before the row goes so it still names the email.
        """
        if account_id == actor_id:
            raise ConflictError("Cannot delete your own account")

        account = self.get_account(account_id)
        if SUPERADMIN_ROLE in account.role_names:
            raise ConflictError("Cannot delete a superadmin account")

        self.audit.append(
            actor_id,
            AuditAction.DELETE,
            AuditTargetType.USER,
            account.id,
            {"deletedEmail": account.email},
        )
        self.accounts.delete(account)

    # ------------------------------------------------------------------
    # Roles
    # ------------------------------------------------------------------

    def list_roles(self) -> List[Role]:
        return self.roles.list_all()

    def create_role(
        self,
        actor_id: Optional[int],
        name: Optional[str],
        permissions: Optional[Iterable[str]] = None,
    ) -> Role:
        if _blank(name):
            raise ValidationError("Role name is required")
        if self.roles.name_taken(name):
            raise ConflictError(ROLE_NAME_EXISTS)

        role = self.roles.add(Role(name=name, permissions=list(permissions or [])))

        self.audit.append(
            actor_id,
            AuditAction.CREATE,
            AuditTargetType.ROLE,
            role.id,
            {"roleName": role.name, "permissions": role.permissions},
        )
        return role

    def update_role(
        self,
        actor_id: Optional[int],
        role_id: int,
        name: Optional[str] = None,
        permissions: Optional[Iterable[str]] = None,
    ) -> Role:
        role = self.roles.get(role_id)
        if role is None:
            raise NotFoundError("Role not found")

        if name is not None:
            if _blank(name):
                raise ValidationError("Role name cannot be empty")
            if role.name == SUPERADMIN_ROLE and name != SUPERADMIN_ROLE:
                raise ConflictError("Cannot modify superadmin role name")
            if self.roles.name_taken(name, exclude_id=role.id):
                raise ConflictError(ROLE_NAME_EXISTS)

        updated_fields = []
        if name is not None:
            role.name = name
            updated_fields.append("name")
        if permissions is not None:
            role.permissions = list(permissions)
            updated_fields.append("permissions")
        if updated_fields:
            role.updated_at = self.clock()

        role = self.roles.save(role)

        self.audit.append(
            actor_id,
            AuditAction.UPDATE,
            AuditTargetType.ROLE,
            role.id,
            {"roleName": role.name, "updatedFields": updated_fields},
        )
        return role

    def assign_role(self, actor_id: Optional[int], account_id: Optional[int], role_id: Optional[int]) -> None:
        """Add one membership. Re-assigning a held role is a conflict, not a no-op."""
        if not account_id or not role_id:
            raise ValidationError("userId and roleId are required")

        account = self.accounts.get(account_id)
        if account is None:
            raise NotFoundError("User not found")
        role = self.roles.get(role_id)
        if role is None:
            raise NotFoundError("Role not found")

        if self.roles.has_membership(account.id, role.id):
            raise ConflictError(ALREADY_HAS_ROLE)

        self.roles.add_membership(account.id, role.id)

        self.audit.append(
            actor_id,
            AuditAction.ASSIGN_ROLE,
            AuditTargetType.USER,
            account.id,
            {"assignedRole": role.name, "targetUserEmail": account.email},
        )
