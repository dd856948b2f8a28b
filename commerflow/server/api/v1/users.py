"""
User Endpoints.

Registration, login and the caller's own profile and order history.
"""

from fastapi import APIRouter, Query, status

from commerflow.core.database.entities.carts import Cart
from commerflow.core.database.entities.users import User
from commerflow.core.errors import AuthenticationError, ConflictError
from commerflow.core.logging_config import get_logger
from commerflow.core.models.domain.enums import UserRole
from commerflow.core.models.io import (
    AuthResponse,
    UserLogin,
    UserOrdersResponse,
    UserRead,
    UserRegister,
    UserUpdate,
)
from commerflow.core.security import create_access_token, hash_password, verify_password
from commerflow.server.core import constant
from commerflow.server.services import OrderService
from commerflow.server.services.deps import CurrentUser, ReposDep

logger = get_logger(__name__)

router = APIRouter()


def issue_token(user: User) -> str:
    return create_access_token(user.id, {"email": user.email, "role": user.role.value})


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Create a customer account and its empty cart, and return an access token.",
    responses={409: {"description": "Email already registered"}},
)
async def register(payload: UserRegister, repos: ReposDep) -> AuthResponse:
    if await repos.users.email_taken(payload.email):
        raise ConflictError("User already exists")

    user = await repos.users.add(
        User(
            email=payload.email,
            name=payload.name,
            password_hash=hash_password(payload.password),
            role=UserRole.USER,
        )
    )
    await repos.carts.add(Cart(user_id=user.id))
    await repos.users.session.commit()

    logger.info(f"User registered: {user.id}")
    return AuthResponse(user=UserRead.model_validate(user), token=issue_token(user))


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login",
    description="Exchange email and password for an access token.",
    responses={401: {"description": "Invalid credentials"}},
)
async def login(payload: UserLogin, repos: ReposDep) -> AuthResponse:
    user = await repos.users.get_by_email(payload.email)
    if user is None or not verify_password(payload.password, user.password_hash):
        logger.debug(f"Failed login attempt for {payload.email}")
        raise AuthenticationError("Invalid credentials")
    return AuthResponse(user=UserRead.model_validate(user), token=issue_token(user))


@router.get("/profile", response_model=UserRead, summary="Get Profile")
async def get_profile(user: CurrentUser) -> UserRead:
    return UserRead.model_validate(user)


@router.put(
    "/profile",
    response_model=UserRead,
    summary="Update Profile",
    responses={409: {"description": "Email already in use"}},
)
async def update_profile(payload: UserUpdate, user: CurrentUser, repos: ReposDep) -> UserRead:
    """
    Update the caller's name and/or email.

    - **name**: New display name (2-100 characters).
    - **email**: New email address; must not belong to another account.
    """
    if payload.email is not None and payload.email != user.email:
        if await repos.users.email_taken(payload.email, exclude_user_id=user.id):
            raise ConflictError("Email already in use")
        user.email = payload.email
    if payload.name is not None:
        user.name = payload.name
    user = await repos.users.update(user)
    return UserRead.model_validate(user)


@router.get(
    "/orders",
    response_model=UserOrdersResponse,
    summary="List My Orders",
    description="Page through the caller's orders with per-status counts.",
)
async def my_orders(
    user: CurrentUser,
    repos: ReposDep,
    page: int = Query(1, ge=1),
    limit: int = Query(constant.DEFAULT_PAGE_SIZE, ge=1, le=constant.MAX_PAGE_SIZE),
) -> UserOrdersResponse:
    return await OrderService(repos).list_orders_page(user.id, page, limit)
