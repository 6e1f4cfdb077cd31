"""Auth API — registration, login, current user.

Learn: Routes for user authentication:
- POST /auth/register → create an account, returns a token right away
- POST /auth/login → email/password → token
- GET /auth/me → the user behind the bearer token

Handlers only translate: request body in, service call, domain errors
out as ApiError. All the rules live in AuthService and AuthGate.
"""

from fastapi import APIRouter, Depends

from authgate.auth.dependencies import get_auth_service, get_current_user
from authgate.errors import ApiError
from authgate.schemas.user import (
    AuthResponse,
    ErrorResponse,
    LoginRequest,
    MeResponse,
    PublicUser,
    RegisterRequest,
)
from authgate.services.auth_service import (
    AuthService,
    InvalidCredentials,
    RegistrationInvalid,
)
from authgate.store.base import DuplicateIdentity

router = APIRouter(prefix="/auth")

SERVER_FAULT = {500: {"model": ErrorResponse, "description": "Internal server error"}}


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}, **SERVER_FAULT},
)
async def register(
    body: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
):
    """Create a new user account and log it in."""
    try:
        token, user = await service.register(body.name, body.email, body.password)
    except RegistrationInvalid as e:
        raise ApiError(400, "Validation failed", errors=e.errors)
    except DuplicateIdentity:
        raise ApiError(400, "User already exists")

    return AuthResponse(token=token, user=user)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={400: {"model": ErrorResponse}, **SERVER_FAULT},
)
async def login(
    body: LoginRequest,
    service: AuthService = Depends(get_auth_service),
):
    """Login with email and password → bearer token."""
    try:
        token, user = await service.login(body.email, body.password)
    except InvalidCredentials:
        raise ApiError(400, "Invalid credentials")

    return AuthResponse(token=token, user=user)


@router.get(
    "/me",
    response_model=MeResponse,
    responses={401: {"model": ErrorResponse}, **SERVER_FAULT},
)
async def get_me(user: PublicUser = Depends(get_current_user)):
    """Get the current authenticated user's profile."""
    return MeResponse(user=user)
