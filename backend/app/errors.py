"""Domain error taxonomy.

Services raise these; ``app.main`` renders them as
``{"error": <code>, "message": <text>}`` with the class's status code.
"""
from typing import Dict, Optional


class GatekeeperError(Exception):
    """Base class for errors that map onto an HTTP response"""

    status_code: int = 500
    code: str = "internal_server_error"
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None, headers: Optional[Dict[str, str]] = None):
        self.message = message or self.default_message
        self.headers = headers
        super().__init__(self.message)


class ValidationError(GatekeeperError):
    """Missing or malformed input"""

    status_code = 400
    code = "validation_error"
    default_message = "Invalid request"


class AuthenticationError(GatekeeperError):
    """Bad, missing or expired credentials"""

    status_code = 401
    code = "unauthenticated"
    default_message = "Invalid or expired token"


class AuthorizationError(GatekeeperError):
    """Authenticated, but lacking the required capability"""

    status_code = 403
    code = "unauthorized"
    default_message = "Super Admin access required"


class NotFoundError(GatekeeperError):
    status_code = 404
    code = "not_found"
    default_message = "Resource not found"


class ConflictError(GatekeeperError):
    """Uniqueness or state conflict (duplicate email, held role, self-delete)"""

    status_code = 400
    code = "conflict"
    default_message = "Request conflicts with current state"


class InternalError(GatekeeperError):
    status_code = 500
    code = "internal_server_error"
    default_message = "An unexpected error occurred. Please contact support."
