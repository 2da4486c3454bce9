"""Registration, login and profile endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from default_management.application.services import UserService
from default_management.core.dependencies import CurrentUser, get_user_service
from default_management.presentation.schemas import (
    ErrorResponseSchema,
    LoginRequestSchema,
    LoginResponseSchema,
    RegisterRequestSchema,
    UserResponseSchema,
)

users_router = APIRouter(
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid request"},
    },
)


@users_router.post(
    "/register",
    response_model=UserResponseSchema,
    status_code=201,
    summary="Register User",
    responses={
        409: {"model": ErrorResponseSchema, "description": "Username already exists"},
    },
)
async def register(
    request: RegisterRequestSchema,
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponseSchema:
    user = await user_service.register(request.username, request.password, request.role)

    return UserResponseSchema(
        id=str(user.id),
        username=user.username,
        role=user.role,
        created_at=user.created_at,
    )


@users_router.post(
    "/login",
    response_model=LoginResponseSchema,
    summary="Log In",
    description="Exchange a username and password for a bearer token.",
    responses={
        401: {"model": ErrorResponseSchema, "description": "Invalid username or password"},
    },
)
async def login(
    request: LoginRequestSchema,
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> LoginResponseSchema:
    token = await user_service.login(request.username, request.password)
    return LoginResponseSchema(token=token)


@users_router.get(
    "/profile",
    response_model=UserResponseSchema,
    summary="Current User",
    responses={
        401: {"model": ErrorResponseSchema, "description": "Missing or invalid token"},
    },
)
async def get_profile(
    claims: CurrentUser,
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponseSchema:
    user = await user_service.get_user(claims.user_id)

    return UserResponseSchema(
        id=str(user.id),
        username=user.username,
        role=user.role,
        created_at=user.created_at,
    )
