"""Gatekeeper client implementation"""
import time
from typing import Any, Dict, List, Optional

import requests


class GatekeeperAPIError(Exception):
    """Non-2xx answer from the Gatekeeper API.

    Attributes:
        status_code: HTTP status of the response.
        error:       machine-readable ``error`` code from the body, if any.
        message:     human-readable ``message`` from the body.
    """

    def __init__(self, status_code: int, error: Optional[str], message: str):
        super().__init__(f"{status_code} {error or 'error'}: {message}")
        self.status_code = status_code
        self.error = error
        self.message = message


class GatekeeperClient:
    """Client for the Gatekeeper super-admin API.

    Authentication is handled transparently:
    - Pass ``email`` and ``password`` at construction.
    - On the first request the client logs in via ``POST /auth/login`` and
      caches the bearer token.
    - The token is renewed 60 seconds before ``token_ttl`` runs out, and once
      more if the server answers 401 (e.g. after a key rotation).
    """

    def __init__(
        self,
        base_url: str,
        email: str,
        password: str,
        api_prefix: str = "/api/v1",
        token_ttl: int = 86400,
        session: Any = None,
    ):
        """
        Initialize Gatekeeper client.

        Args:
            base_url:   Base URL of the backend (e.g. ``http://localhost:5000``).
            email:      Super-admin login email.
            password:   Super-admin password.
            api_prefix: Path prefix of the versioned API.
            token_ttl:  Token lifetime in seconds, as configured on the server.
            session:    Optional ``requests.Session``-compatible object.
        """
        self.base_url = base_url.rstrip("/") + api_prefix
        self.email = email
        self.password = password
        self.token_ttl = token_ttl
        self.session = session if session is not None else requests.Session()

        self._token: Optional[str] = None
        self._token_expires_at = 0.0
        self.user: Optional[Dict[str, Any]] = None

    # ---------------------------------------------------------------------------
    # Internal token management
    # ---------------------------------------------------------------------------

    @staticmethod
    def _check(response: Any) -> Any:
        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = {}
            raise GatekeeperAPIError(
                response.status_code,
                body.get("error"),
                body.get("message") or response.text,
            )
        return response

    def login(self) -> Dict[str, Any]:
        """Exchange the configured credentials for a token.

        Returns:
            The logged-in user (``id``, ``name``, ``email``, ``roles``).

        Raises:
            GatekeeperAPIError: 401 on bad credentials.
        """
        response = self._check(
            self.session.post(
                f"{self.base_url}/auth/login",
                json={"email": self.email, "password": self.password},
            )
        )
        data = response.json()
        self._token = data["token"]
        self._token_expires_at = time.time() + self.token_ttl
        self.user = data["user"]
        return self.user

    def logout(self) -> None:
        """Forget the cached token. Tokens are stateless, so nothing is sent."""
        self._token = None
        self._token_expires_at = 0.0
        self.user = None

    def _ensure_token(self) -> str:
        if self._token is None or time.time() >= self._token_expires_at - 60:
            self.login()
        return self._token  # type: ignore[return-value]

    def _request(self, method: str, endpoint: str, **kwargs: Any) -> Any:
        """Make an authenticated request and return the decoded JSON body.

        Raises:
            GatekeeperAPIError: On non-2xx responses.
        """
        url = f"{self.base_url}{endpoint}"
        headers = kwargs.pop("headers", {})
        headers["Authorization"] = f"Bearer {self._ensure_token()}"

        response = self.session.request(method, url, headers=headers, **kwargs)
        if response.status_code == 401:
            self.login()
            headers["Authorization"] = f"Bearer {self._token}"
            response = self.session.request(method, url, headers=headers, **kwargs)

        return self._check(response).json()

    # ========== Users ==========

    def list_users(
        self,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        role: Optional[str] = None,
    ) -> Dict[str, Any]:
        """One page of users: ``{"users": [...], "pagination": {...}}``"""
        params: Dict[str, Any] = {"page": page, "limit": limit}
        if search:
            params["search"] = search
        if role:
            params["role"] = role
        return self._request("GET", "/superadmin/users", params=params)

    def get_user(self, user_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/superadmin/users/{user_id}")

    def create_user(
        self,
        name: str,
        email: str,
        password: str,
        role_ids: Optional[List[int]] = None,
    ) -> Dict[str, Any]:
        payload = {"name": name, "email": email, "password": password, "roleIds": role_ids or []}
        return self._request("POST", "/superadmin/users", json=payload)

    def update_user(
        self,
        user_id: int,
        name: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
        role_ids: Optional[List[int]] = None,
    ) -> Dict[str, Any]:
        """
        Partially update a user. Only the arguments that are not ``None`` are sent.

        ``role_ids`` replaces the user's whole role set, so pass ``[]`` to clear it.
        """
        payload: Dict[str, Any] = {}
        if name is not None:
            payload["name"] = name
        if email is not None:
            payload["email"] = email
        if password is not None:
            payload["password"] = password
        if role_ids is not None:
            payload["roleIds"] = role_ids
        return self._request("PUT", f"/superadmin/users/{user_id}", json=payload)

    def delete_user(self, user_id: int) -> Dict[str, Any]:
        return self._request("DELETE", f"/superadmin/users/{user_id}")

    # ========== Roles ==========

    def list_roles(self) -> List[Dict[str, Any]]:
        """All roles with ``userCount`` and member summaries"""
        return self._request("GET", "/superadmin/roles")["roles"]

    def create_role(self, name: str, permissions: Optional[List[str]] = None) -> Dict[str, Any]:
        return self._request(
            "POST",
            "/superadmin/roles",
            json={"name": name, "permissions": permissions or []},
        )

    def update_role(
        self,
        role_id: int,
        name: Optional[str] = None,
        permissions: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if name is not None:
            payload["name"] = name
        if permissions is not None:
            payload["permissions"] = permissions
        return self._request("PUT", f"/superadmin/roles/{role_id}", json=payload)

    def assign_role(self, user_id: int, role_id: int) -> Dict[str, Any]:
        return self._request(
            "POST",
            "/superadmin/assign-role",
            json={"userId": user_id, "roleId": role_id},
        )

    # ========== Audit logs & analytics ==========

    def get_audit_logs(
        self,
        page: int = 1,
        limit: int = 20,
        action: Optional[str] = None,
        user_id: Optional[int] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Query the audit trail, newest first.

        Args:
            action:     ``CREATE``, ``UPDATE``, ``DELETE``, ``ASSIGN_ROLE`` or ``LOGIN``.
            user_id:    Only entries performed by this user.
            start_date: ISO 8601 lower bound (inclusive).
            end_date:   ISO 8601 upper bound (inclusive).
        """
        params: Dict[str, Any] = {"page": page, "limit": limit}
        if action:
            params["action"] = action
        if user_id is not None:
            params["userId"] = user_id
        if start_date:
            params["startDate"] = start_date
        if end_date:
            params["endDate"] = end_date
        return self._request("GET", "/superadmin/audit-logs", params=params)

    def get_analytics(self) -> Dict[str, Any]:
        """Dashboard counts: ``{"summary": {...}, "timestamp": ...}``"""
        return self._request("GET", "/superadmin/analytics/summary")
