"""Auth service: credential checks bridging users and the session registry.

Everything leaving this module as a user is a :class:`PublicUser`; the
stored credential hash never crosses this boundary.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from fieldflow.auth.passwords import DEFAULT_ROUNDS, hash_password, verify_password
from fieldflow.auth.sessions import SessionRegistry
from fieldflow.core.errors import AuthenticationError, FieldError, ValidationError
from fieldflow.models import PublicUser, Role, User, UserCreate, UserUpdate
from fieldflow.storage.base import Storage

logger = structlog.get_logger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
SESSION_EXPIRED = "Session expired"

_DUMMY_PASSWORD = "fieldflow-dummy-password"


@dataclass(frozen=True)
class LoginResult:
    user: PublicUser
    token: str


class AuthService:
    """Login, logout, current-user resolution and account management."""

    def __init__(
        self,
        storage: Storage,
        sessions: SessionRegistry,
        bcrypt_rounds: int = DEFAULT_ROUNDS,
    ):
        self.storage = storage
        self.sessions = sessions
        self.bcrypt_rounds = bcrypt_rounds
        self._dummy_hash: str | None = None

    def login(self, username: str, password: str) -> LoginResult:
        """Verify credentials and open a new session.

        Raises:
            AuthenticationError: Unknown user, wrong password or inactive
                account, all with the same message.
        """
        user = self.storage.get_user_by_username(username)
        if user is None:
            verify_password(password, self.dummy_hash)
            raise AuthenticationError(INVALID_CREDENTIALS)

        if not verify_password(password, user.password_hash) or not user.is_active:
            raise AuthenticationError(INVALID_CREDENTIALS)

        token = self.sessions.issue(user.id)
        logger.info("login_succeeded", user_id=user.id)
        return LoginResult(user=PublicUser.from_user(user), token=token)

    @property
    def dummy_hash(self) -> str:
        """Hash checked when the username is unknown.

        Built at the configured cost so both failure paths take one
        bcrypt verification of the same price.
        """
        if self._dummy_hash is None:
            self._dummy_hash = hash_password(_DUMMY_PASSWORD, self.bcrypt_rounds)
        return self._dummy_hash

    def logout(self, token: str | None) -> None:
        self.sessions.revoke(token)

    def current_user(self, token: str | None) -> PublicUser | None:
        """Resolve a token to its user, or None.

        A live session whose user has since gone or been deactivated
        counts as absent.
        """
        user = self._resolve(token)
        return PublicUser.from_user(user) if user else None

    def require_user(self, token: str | None) -> PublicUser:
        """Like :meth:`current_user` but raises when there is no user.

        Raises:
            AuthenticationError: "Authentication required" without a token,
                "Session expired" when the token no longer resolves.
        """
        if not token:
            raise AuthenticationError()
        user = self.current_user(token)
        if user is None:
            raise AuthenticationError(SESSION_EXPIRED)
        return user

    def _resolve(self, token: str | None) -> User | None:
        user_id = self.sessions.resolve(token)
        if user_id is None:
            return None
        user = self.storage.get_user(user_id)
        if user is None or not user.is_active:
            return None
        return user

    # ------------------------------------------------------------------
    # Account management
    # ------------------------------------------------------------------

    def create_user(
        self,
        *,
        username: str,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        role: Role,
        company_id: int | None = None,
        phone: str | None = None,
        is_active: bool = True,
    ) -> PublicUser:
        """Create an account with a hashed password.

        Raises:
            ValidationError: Username or email already taken, or the
                password is longer than bcrypt accepts.
        """
        self._check_unique(username=username, email=email)
        user = self.storage.create_user(
            UserCreate(
                username=username,
                email=email,
                password_hash=hash_password(password, self.bcrypt_rounds),
                first_name=first_name,
                last_name=last_name,
                role=role,
                company_id=company_id,
                phone=phone,
                is_active=is_active,
            )
        )
        logger.info("user_created", user_id=user.id, role=user.role.value)
        return PublicUser.from_user(user)

    def update_user(
        self,
        user_id: int,
        changes: UserUpdate,
        password: str | None = None,
    ) -> PublicUser | None:
        """Apply profile changes, rehashing ``password`` when given.

        Returns None when the user does not exist.

        Raises:
            ValidationError: New username or email belongs to someone else,
                or the new password is too long.
        """
        if self.storage.get_user(user_id) is None:
            return None
        fields = changes.model_dump(exclude_unset=True)
        fields.pop("password_hash", None)
        self._check_unique(
            username=fields.get("username"),
            email=fields.get("email"),
            exclude_id=user_id,
        )
        if password:
            fields["password_hash"] = hash_password(password, self.bcrypt_rounds)
        updated = self.storage.update_user(user_id, UserUpdate.model_validate(fields))
        return PublicUser.from_user(updated) if updated else None

    def _check_unique(
        self,
        username: str | None = None,
        email: str | None = None,
        exclude_id: int | None = None,
    ) -> None:
        errors: list[FieldError] = []
        if username is not None:
            taken = self.storage.get_user_by_username(username)
            if taken is not None and taken.id != exclude_id:
                errors.append(FieldError("username", "Username already exists"))
        if email is not None:
            taken = self.storage.get_user_by_email(email)
            if taken is not None and taken.id != exclude_id:
                errors.append(FieldError("email", "Email already exists"))
        if errors:
            raise ValidationError("User already exists", errors)
