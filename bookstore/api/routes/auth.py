"""
Authentication API Routes.

Handles:
- User registration
- User login (token issuance)
"""

from fastapi import APIRouter, Depends, status
from loguru import logger

from bookstore.api.dependencies import get_user_service
from bookstore.api.schemas import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserResponse,
    WebResponse,
)
from bookstore.services import UserService

router = APIRouter(tags=["auth"])


@router.post(
    "/register",
    response_model=WebResponse[UserResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    request: RegisterRequest,
    service: UserService = Depends(get_user_service),
):
    """Register a new user."""
    logger.info("Registering new user")
    user = await service.register(request.name, request.email, request.password)
    return WebResponse(data=UserResponse.from_user(user), message="user registered")


@router.post(
    "/login",
    response_model=WebResponse[AuthResponse],
    response_model_exclude_none=True,
)
async def login(
    request: LoginRequest,
    service: UserService = Depends(get_user_service),
):
    """Exchange email and password for a bearer token."""
    result = await service.login(request.email, request.password)
    return WebResponse(
        data=AuthResponse(
            token=result.token,
            expires_at=result.expires_at,
            user=UserResponse.from_user(result.user),
        ),
        message="login success",
    )
