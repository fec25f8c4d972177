"""Access control gate: bearer token -> account context -> capability check"""
from typing import FrozenSet, NamedTuple, Optional

from app.errors import AuthenticationError, AuthorizationError
from app.middleware.monitoring import record_auth_failure
from app.models.role import SUPERADMIN_ROLE
from app.stores.accounts import AccountStore
from app.utils.jwt_utils import decode_access_token
from app.utils.logger import logger


class AdminContext(NamedTuple):
    """Resolved caller identity, populated by :meth:`AccessGate.authenticate`."""
    account_id: int
    email: str
    roles: FrozenSet[str]

    @property
    def is_superadmin(self) -> bool:
        return SUPERADMIN_ROLE in self.roles


def _unauthenticated() -> AuthenticationError:
    # Same message for every cause
    return AuthenticationError(headers={"WWW-Authenticate": "Bearer"})


class AccessGate:
    """Verifies tokens against the credential store.

    Read-only: verification never touches ``last_login``.
    """

    def __init__(self, accounts: AccountStore):
        self.accounts = accounts

    def authenticate(self, token: Optional[str]) -> AdminContext:
        """Resolve a bearer token to the account it names.

        Raises:
            AuthenticationError: missing, invalid or expired token, or the
                account no longer exists.
        """
        if not token:
            record_auth_failure("token")
            raise _unauthenticated()

        try:
            payload = decode_access_token(token)
        except AuthenticationError:
            record_auth_failure("token")
            raise

        try:
            account_id = int(payload.get("sub"))
        except (TypeError, ValueError):
            record_auth_failure("token")
            raise _unauthenticated()

        account = self.accounts.get(account_id)
        if account is None:
            record_auth_failure("token")
            logger.info("Token subject no longer exists", extra={"account_id": account_id})
            raise _unauthenticated()

        return AdminContext(
            account_id=account.id,
            email=account.email,
            roles=frozenset(account.role_names),
        )

    @staticmethod
    def require_superadmin(ctx: AdminContext) -> AdminContext:
        """Raise AuthorizationError unless the caller holds the ``superadmin`` role"""
        if not ctx.is_superadmin:
            record_auth_failure("capability")
            logger.warning(
                "Super Admin access denied",
                extra={"account_id": ctx.account_id},
            )
            raise AuthorizationError()
        return ctx
