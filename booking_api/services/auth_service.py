# booking_api/services/auth_service.py
"""
Identity service: registration, login and token verification.
"""

import logging
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..auth import (
    DUMMY_HASH_FOR_TIMING_ATTACK,
    create_token_for,
    get_password_hash,
    verify_password,
    verify_token,
)
from ..core.enums import Role
from ..core.exceptions import (
    ConflictException,
    RepositoryException,
    UnauthorizedException,
    ValidationException,
)
from ..models.user import User
from ..principal import UserPrincipal
from ..repositories.factory import RepositoryFactory
from ..repositories.user_repository import UserRepository
from .base import BaseService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


def principal_for(user: User) -> UserPrincipal:
    return UserPrincipal(user_id=user.id, email=user.email, role=Role(user.role))


class AuthService(BaseService):
    """Service for handling authentication operations."""

    def __init__(self, db: Session, user_repository: Optional[UserRepository] = None) -> None:
        super().__init__(db)
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)

    @BaseService.measure_operation("register_user")
    def register_user(
        self,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
        role: Optional[Role] = None,
    ) -> Tuple[User, str]:
        """
        Register a new user and issue a session token.

        Args:
            name: Display name
            email: Unique email (stored lower-cased)
            password: Plain text password (only its bcrypt hash is stored)
            role: customer (default) or provider

        Returns:
            The created user and a bearer token

        Raises:
            ValidationException: If name, email or password is missing
            ConflictException: If the email is already registered
        """
        name = (name or "").strip()
        email = (email or "").strip().lower()
        if not name or not email or not password:
            raise ValidationException(
                "Name, email, and password are required", code="MISSING_FIELDS"
            )
        role = role or Role.CUSTOMER

        self.log_operation("register_user", email=email, role=role.value)

        if self.user_repository.get_by_email(email):
            self.logger.warning(f"Registration failed - email already exists: {email}")
            raise ConflictException("User with this email already exists", code="EMAIL_EXISTS")

        hashed_password = get_password_hash(password)

        with self.transaction():
            try:
                user = self.user_repository.create(
                    name=name,
                    email=email,
                    hashed_password=hashed_password,
                    role=role.value,
                )
            except RepositoryException as e:
                if isinstance(e.__cause__, IntegrityError):
                    # Lost a race with a concurrent registration
                    raise ConflictException(
                        "User with this email already exists", code="EMAIL_EXISTS"
                    ) from e
                raise

        self.logger.info(f"Successfully registered user: {email} with role: {role.value}")
        return user, create_token_for(principal_for(user))

    @BaseService.measure_operation("login")
    def login(self, email: Optional[str], password: Optional[str]) -> Tuple[User, str]:
        """
        Authenticate by email and password.

        A missing account and a wrong password produce the same error.
        """
        email = (email or "").strip().lower()
        if not email or not password:
            raise ValidationException(
                "Email and password are required", code="MISSING_FIELDS"
            )

        user = self.user_repository.get_by_email(email)
        if user is None:
            # Burn the same bcrypt time as a real check
            verify_password(password, DUMMY_HASH_FOR_TIMING_ATTACK)
            self.logger.warning(f"Authentication failed - user not found: {email}")
            raise UnauthorizedException(INVALID_CREDENTIALS_MESSAGE, code="INVALID_CREDENTIALS")

        if not verify_password(password, user.hashed_password):
            self.logger.warning(f"Authentication failed - incorrect password: {email}")
            raise UnauthorizedException(INVALID_CREDENTIALS_MESSAGE, code="INVALID_CREDENTIALS")

        self.logger.info(f"Successful authentication for user: {email}")
        return user, create_token_for(principal_for(user))

    @staticmethod
    def verify_token(token: Optional[str]) -> UserPrincipal:
        """Decode a bearer token into its identity claims."""
        return verify_token(token)
