"""Account router for registration, login and the user's own data.

Users and admins register and log in through parallel endpoints; the
access token returned at login carries the account's role.
"""

from fastapi import APIRouter, status

from ..dependencies import AccountServiceDep, CurrentUser
from ..schemas.auth_schemas import (
    AdminLoginResponse,
    AdminRegisterResponse,
    LoginRequest,
    RegisterRequest,
    RsvpResponse,
    UserLoginResponse,
    UserProfile,
    UserRegisterResponse,
)

router = APIRouter(
    prefix="/api",
    tags=["accounts"],
    responses={
        400: {"description": "Bad request"},
        500: {"description": "Internal server error"},
    },
)


@router.post(
    "/register",
    response_model=UserRegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register user",
)
async def register_user(
    request: RegisterRequest,
    account_service: AccountServiceDep,
) -> UserRegisterResponse:
    """Register a new user.

    Example:
        POST /api/register
        {"username": "alice", "password": "s3cret-pass", "email": "alice@example.com"}

        Response (201):
        {"message": "User created successfully", "user_id": 1}
    """
    user_id = await account_service.register_user(request)
    return UserRegisterResponse(user_id=user_id)


@router.post(
    "/login",
    response_model=UserLoginResponse,
    summary="User login",
)
async def login_user(
    request: LoginRequest,
    account_service: AccountServiceDep,
) -> UserLoginResponse:
    """Log a user in and return an access token.

    Unknown usernames and wrong passwords both yield 400 "Invalid credentials".
    """
    return await account_service.login_user(request)


@router.post(
    "/admin/register",
    response_model=AdminRegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register admin",
)
async def register_admin(
    request: RegisterRequest,
    account_service: AccountServiceDep,
) -> AdminRegisterResponse:
    admin_id = await account_service.register_admin(request)
    return AdminRegisterResponse(admin_id=admin_id)


@router.post(
    "/admin/login",
    response_model=AdminLoginResponse,
    summary="Admin login",
)
async def login_admin(
    request: LoginRequest,
    account_service: AccountServiceDep,
) -> AdminLoginResponse:
    return await account_service.login_admin(request)


@router.get(
    "/user",
    response_model=UserProfile,
    summary="Current user",
    responses={401: {"description": "Not authenticated"}, 403: {"description": "Not a user token"}},
)
async def get_user(
    current_user: CurrentUser,
    account_service: AccountServiceDep,
) -> UserProfile:
    return await account_service.get_user_profile(current_user.account_id)


@router.get(
    "/rsvps",
    response_model=list[RsvpResponse],
    summary="Current user's RSVPs",
    description="RSVPs of the authenticated user with event title and date, newest first",
    responses={401: {"description": "Not authenticated"}, 403: {"description": "Not a user token"}},
)
async def list_rsvps(
    current_user: CurrentUser,
    account_service: AccountServiceDep,
) -> list[RsvpResponse]:
    return await account_service.list_user_rsvps(current_user.account_id)
