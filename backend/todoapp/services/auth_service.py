"""
Registration, login and profile use cases.

Input is validated before the store is touched. Unknown email and wrong
password both surface as the same INVALID_CREDENTIALS error so callers
cannot tell which one was wrong.
"""

import logging

from todoapp.core.errors import AppError, ErrorKind, infrastructure_error, unauthenticated
from todoapp.core.security import EncodingError, InvalidTokenError, PasswordHasher, TokenService
from todoapp.models.user import User
from todoapp.schemas.auth import (
    FIELD_MESSAGES,
    AuthResult,
    LoginRequest,
    RegisterRequest,
    UserView,
)
from todoapp.schemas.validation import validate_model
from todoapp.storage.errors import NotFoundError, StoreError, UniqueConstraintError
from todoapp.storage.user_store import UserStore

logger = logging.getLogger(__name__)

ALREADY_EXISTS_MESSAGE = "User already exists"
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


class AuthService:
    def __init__(self, store: UserStore, hasher: PasswordHasher, tokens: TokenService):
        self.store = store
        self.hasher = hasher
        self.tokens = tokens

    def register(self, email: str, password: str, name: str) -> AuthResult:
        request = validate_model(
            RegisterRequest, FIELD_MESSAGES, email=email, password=password, name=name
        )

        # Emails are stored and matched exactly as supplied, not the normalized form
        try:
            self.store.find_by_email(email)
        except NotFoundError:
            pass
        except StoreError as exc:
            logger.error(f"Failed to check existing user: {exc}")
            raise infrastructure_error("Registration failed") from exc
        else:
            logger.info("Registration rejected: email already registered")
            raise AppError(ErrorKind.ALREADY_EXISTS, ALREADY_EXISTS_MESSAGE)

        try:
            digest = self.hasher.hash(request.password)
        except EncodingError as exc:
            logger.error(f"Failed to hash password: {exc}")
            raise infrastructure_error("Registration failed") from exc

        try:
            user = self.store.create(
                User(email=email, password_hash=digest, name=request.name)
            )
        except UniqueConstraintError as exc:
            logger.info("Registration lost a race on a duplicate email")
            raise AppError(ErrorKind.ALREADY_EXISTS, ALREADY_EXISTS_MESSAGE) from exc
        except StoreError as exc:
            logger.error(f"Failed to create user: {exc}")
            raise infrastructure_error("Registration failed") from exc

        token = self._issue(user, "Registration failed")
        logger.info(f"User registered successfully: user_id={user.id}")
        return AuthResult(user=UserView.model_validate(user), token=token)

    def login(self, email: str, password: str) -> AuthResult:
        request = validate_model(LoginRequest, FIELD_MESSAGES, email=email, password=password)

        try:
            user = self.store.find_by_email(email)
        except NotFoundError as exc:
            logger.info("Login failed: unknown email")
            raise AppError(ErrorKind.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE) from exc
        except StoreError as exc:
            logger.error(f"Failed to find user: {exc}")
            raise infrastructure_error("Login failed") from exc

        if not self.hasher.verify(request.password, user.password_hash):
            logger.info(f"Login failed: wrong password for user_id={user.id}")
            raise AppError(ErrorKind.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE)

        token = self._issue(user, "Login failed")
        logger.info(f"User logged in successfully: user_id={user.id}")
        return AuthResult(user=UserView.model_validate(user), token=token)

    def get_profile(self, user_id: int) -> UserView:
        """Look up the caller's own record; identity was already verified upstream"""
        try:
            user = self.store.find_by_id(user_id)
        except NotFoundError as exc:
            raise AppError(ErrorKind.NOT_FOUND, "User not found") from exc
        except StoreError as exc:
            logger.error(f"Failed to get user profile: {exc}")
            raise infrastructure_error("Failed to get profile") from exc
        return UserView.model_validate(user)

    def refresh(self, token: str) -> str:
        try:
            return self.tokens.refresh(token)
        except InvalidTokenError as exc:
            logger.info(f"Token refresh rejected: {exc}")
            raise unauthenticated("Invalid or expired token") from exc
        except EncodingError as exc:
            logger.error(f"Failed to generate token: {exc}")
            raise infrastructure_error("Token refresh failed") from exc

    def _issue(self, user: User, failure_message: str) -> str:
        try:
            return self.tokens.issue(user.id, user.email)
        except EncodingError as exc:
            logger.error(f"Failed to generate token: {exc}")
            raise infrastructure_error(failure_message) from exc
