# booking_api/routes/auth.py
"""
Authentication routes.

Endpoints:
    POST /register - Create an account and receive a token
    POST /login - Exchange credentials for a token
    GET /profile - Identity carried by the caller's token
"""

import asyncio
import logging

from fastapi import APIRouter, Body, Depends, status

from ..api.dependencies import get_auth_service, get_current_principal
from ..principal import UserPrincipal
from ..schemas.auth import (
    AuthResponse,
    Identity,
    LoginRequest,
    ProfileResponse,
    RegisterRequest,
    UserPublic,
)
from ..services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest = Body(...),
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    Register a new user.

    Role defaults to customer. Returns the public user view and a bearer token.
    """
    user, token = await asyncio.to_thread(
        auth_service.register_user,
        name=payload.name,
        email=payload.email,
        password=payload.password,
        role=payload.role,
    )
    return AuthResponse(
        message="User registered successfully",
        user=UserPublic.model_validate(user),
        token=token,
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest = Body(...),
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    user, token = await asyncio.to_thread(
        auth_service.login, email=payload.email, password=payload.password
    )
    return AuthResponse(
        message="Login successful",
        user=UserPublic.model_validate(user),
        token=token,
    )


@router.get("/profile", response_model=ProfileResponse)
async def profile(
    principal: UserPrincipal = Depends(get_current_principal),
) -> ProfileResponse:
    return ProfileResponse(
        user=Identity(id=principal.user_id, email=principal.email, role=principal.role)
    )
