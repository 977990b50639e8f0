# booking_api/schemas/auth.py
"""
Registration, login and identity schemas.

Required fields are Optional here so the service layer can answer with
its own messages ("Name, email, and password are required").
"""

from typing import Optional

from pydantic import EmailStr

from ..core.enums import Role
from .base import RequestModel, StandardizedModel, SuccessResponse


class RegisterRequest(RequestModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    role: Optional[Role] = None


class LoginRequest(RequestModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserPublic(StandardizedModel):
    """Public view of a user; never includes the password hash."""

    id: str
    name: str
    email: str
    role: Role


class AuthResponse(SuccessResponse):
    message: str
    user: UserPublic
    token: str


class Identity(StandardizedModel):
    id: str
    email: str
    role: Role


class ProfileResponse(SuccessResponse):
    message: str = "Profile retrieved successfully"
    user: Identity
