from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import datetime

from pydantic import BaseModel, ConfigDict, TypeAdapter
from pydantic.alias_generators import to_camel
from werkzeug.security import check_password_hash, generate_password_hash

from pcos_calculators.pcos_risk_calculator.errors import (
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    MissingFieldError,
    NotAuthenticatedError,
    PasswordMismatchError,
    PCOSError,
)
from pcos_dagster.db.kv_store import KeyValueStore
from pcos_dagster.utils.ids import generate_id, utc_isoformat

logger = logging.getLogger(__name__)

AUTH_KEY = "pcos_auth"
USERS_KEY = "pcos_registered_users"
LANGUAGE_KEY = "pcos_language"
DEFAULT_LANGUAGE = "en"

_LANGUAGE_CODE = re.compile(r"^[a-z]{2,3}$")

# Built-in demo accounts, always available
TEST_USERS = (
    {"email": "test@example.com", "password": "password123", "name": "Test User"},
    {"email": "demo@pcos.app", "password": "demo123", "name": "Demo User"},
)


class User(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    email: str
    name: str
    created_at: str


class RegisteredUser(User):
    password_hash: str

    def public(self) -> User:
        return User(id=self.id, email=self.email, name=self.name, created_at=self.created_at)


class AuthState(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    user: User | None = None
    is_authenticated: bool = False


_users_adapter = TypeAdapter(list[RegisteredUser])


def _normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


class AccountStore:
    """Registration, sign-in and the current session.

    The session lasts until ``logout``; it lives in the injected store, so a
    persistent backend keeps users signed in across CLI invocations.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        *,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], str] | None = None,
    ):
        self._kv = kv
        self._clock = clock
        self._id_factory = id_factory or generate_id

    def _now(self) -> str:
        return utc_isoformat(self._clock() if self._clock is not None else None)

    def _registered_users(self) -> list[RegisteredUser]:
        stored = self._kv.get(USERS_KEY)
        if not stored:
            return []
        return _users_adapter.validate_json(stored)

    def _start_session(self, user: User) -> None:
        state = AuthState(user=user, is_authenticated=True)
        self._kv.set(AUTH_KEY, state.model_dump_json(by_alias=True))
        logger.info("Signed in %s", user.email)

    def register(
        self,
        email: str,
        password: str,
        name: str | None = None,
        confirm_password: str | None = None,
    ) -> User:
        """Create an account and sign it in.

        Args:
            email: Account email; compared case-insensitively
            password: Plain password, stored only as a hash
            name: Display name, defaults to the email's local part
            confirm_password: If given, must equal ``password``

        Raises:
            MissingFieldError: email or password is empty
            PasswordMismatchError: confirmation differs from password
            EmailAlreadyRegisteredError: email belongs to an existing or built-in account
        """
        email = _normalize_email(email)
        if not email:
            raise MissingFieldError("Email is required")
        if not password:
            raise MissingFieldError("Password is required")
        if confirm_password is not None and password != confirm_password:
            raise PasswordMismatchError()

        users = self._registered_users()
        if any(u.email == email for u in users) or any(t["email"] == email for t in TEST_USERS):
            raise EmailAlreadyRegisteredError()

        record = RegisteredUser(
            id=self._id_factory(),
            email=email,
            name=name or email.split("@")[0],
            created_at=self._now(),
            password_hash=generate_password_hash(password),
        )
        users.append(record)
        self._kv.set(USERS_KEY, _users_adapter.dump_json(users, by_alias=True).decode("utf-8"))
        logger.info("Registered %s", email)

        user = record.public()
        self._start_session(user)
        return user

    def login(self, email: str, password: str) -> User:
        """Sign in with a built-in or registered account.

        Raises:
            MissingFieldError: email or password is empty
            InvalidCredentialsError: no account matches
        """
        email = _normalize_email(email)
        if not email:
            raise MissingFieldError("Email is required")
        if not password:
            raise MissingFieldError("Password is required")

        for test_user in TEST_USERS:
            if test_user["email"] == email and test_user["password"] == password:
                user = User(
                    id=self._id_factory(),
                    email=test_user["email"],
                    name=test_user["name"],
                    created_at=self._now(),
                )
                self._start_session(user)
                return user

        for record in self._registered_users():
            if record.email == email and check_password_hash(record.password_hash, password):
                user = record.public()
                self._start_session(user)
                return user

        logger.info("Failed sign-in for %s", email)
        raise InvalidCredentialsError()

    def logout(self) -> None:
        self._kv.delete(AUTH_KEY)
        logger.info("Signed out")

    def current(self) -> AuthState:
        stored = self._kv.get(AUTH_KEY)
        if not stored:
            return AuthState()
        return AuthState.model_validate_json(stored)

    def require_user(self) -> User:
        state = self.current()
        if not state.is_authenticated or state.user is None:
            raise NotAuthenticatedError()
        return state.user

    def get_language(self) -> str:
        return self._kv.get(LANGUAGE_KEY) or DEFAULT_LANGUAGE

    def set_language(self, language: str) -> None:
        code = language.strip().lower()
        if not _LANGUAGE_CODE.match(code):
            raise PCOSError(f"Invalid language code '{language}'")
        self._kv.set(LANGUAGE_KEY, code)
