"""
Credential store: persistence of user records.

AuthService only depends on the UserStore protocol. SqlUserStore is the
production variant on a SQLAlchemy session; InMemoryUserStore keeps records
in a dict and enforces the same email uniqueness, for tests and local use.
"""

from datetime import datetime, timezone
from typing import Dict, Protocol
import itertools
import threading

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from todoapp.models.user import User
from todoapp.storage.errors import NotFoundError, StoreError, UniqueConstraintError


class UserStore(Protocol):
    def find_by_email(self, email: str) -> User:
        """Return the user with this email or raise NotFoundError"""
        ...

    def find_by_id(self, user_id: int) -> User:
        """Return the user with this id or raise NotFoundError"""
        ...

    def create(self, user: User) -> User:
        """Persist a new user, raising UniqueConstraintError on a duplicate email"""
        ...


class SqlUserStore:
    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str) -> User:
        try:
            user = self.db.query(User).filter(User.email == email).first()
        except SQLAlchemyError as exc:
            raise StoreError(f"failed to look up user by email: {exc}") from exc
        if user is None:
            raise NotFoundError(f"no user with email {email!r}")
        return user

    def find_by_id(self, user_id: int) -> User:
        try:
            user = self.db.query(User).filter(User.id == user_id).first()
        except SQLAlchemyError as exc:
            raise StoreError(f"failed to look up user {user_id}: {exc}") from exc
        if user is None:
            raise NotFoundError(f"no user with id {user_id}")
        return user

    def create(self, user: User) -> User:
        try:
            self.db.add(user)
            self.db.commit()
            # Load id and server-side timestamps
            self.db.refresh(user)
            return user
        except IntegrityError as exc:
            # Two registrations for the same email can both pass the
            # existence check; the unique index rejects the second insert
            self.db.rollback()
            raise UniqueConstraintError(f"email {user.email!r} already registered") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreError(f"failed to create user: {exc}") from exc


class InMemoryUserStore:
    def __init__(self):
        self._users: Dict[int, User] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def find_by_email(self, email: str) -> User:
        for user in self._users.values():
            if user.email == email:
                return user
        raise NotFoundError(f"no user with email {email!r}")

    def find_by_id(self, user_id: int) -> User:
        try:
            return self._users[user_id]
        except KeyError:
            raise NotFoundError(f"no user with id {user_id}") from None

    def create(self, user: User) -> User:
        with self._lock:
            if any(existing.email == user.email for existing in self._users.values()):
                raise UniqueConstraintError(f"email {user.email!r} already registered")
            now = datetime.now(timezone.utc)
            user.id = next(self._ids)
            user.created_at = now
            user.updated_at = now
            self._users[user.id] = user
        return user

    def __len__(self) -> int:
        return len(self._users)
