"""Login endpoint"""
from fastapi import APIRouter, Depends, Request

from app.api.deps import get_admin_service
from app.config import settings
from app.middleware.rate_limit import limiter
from app.schemas.auth import LoginRequest, LoginResponse, LoginUser
from app.services.admin_service import AdminService

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/login", response_model=LoginResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
def login(
    request: Request,
    body: LoginRequest,
    service: AdminService = Depends(get_admin_service),
) -> LoginResponse:
    """
    Exchange email + password for a bearer token.

    The token carries the account id and email and expires after 24 hours.
    Send it as ``Authorization: Bearer <token>`` on every other endpoint.
    Unknown email and wrong password both answer 401 "Invalid credentials".
    """
    result = service.authenticate(body.email, body.password)
    return LoginResponse(token=result.token, user=LoginUser.model_validate(result.account))
