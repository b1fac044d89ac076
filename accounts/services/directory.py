"""User directory: CRUD over user records keyed by unique email and by id."""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from accounts.core.errors import ConflictError, NotFoundError, StoreError
from accounts.models import User

logger = logging.getLogger(__name__)


class UserDirectory:
    """
    Persistent store of user records backed by a SQLAlchemy session.

    The unique index on users.email is the synchronization point for concurrent
    registrations: create() lets the database reject the loser and reports it as
    ConflictError. Driver and I/O failures surface as StoreError.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def find_by_email(self, email: str) -> User | None:
        try:
            return self._session.query(User).filter(User.email == email).first()
        except SQLAlchemyError as e:
            raise self._store_error("find_by_email", e) from e

    def find_by_id(self, user_id: int) -> User | None:
        try:
            return self._session.get(User, user_id)
        except SQLAlchemyError as e:
            raise self._store_error("find_by_id", e) from e

    def find_by_id_and_email(self, user_id: int, email: str) -> User | None:
        try:
            return (
                self._session.query(User)
                .filter(User.id == user_id, User.email == email)
                .first()
            )
        except SQLAlchemyError as e:
            raise self._store_error("find_by_id_and_email", e) from e

    def list_all(self) -> list[User]:
        try:
            return self._session.query(User).order_by(User.id).all()
        except SQLAlchemyError as e:
            raise self._store_error("list_all", e) from e

    def create(self, email: str, password_hash: str, role: str, name: str) -> User:
        """Insert a new user. Raises ConflictError if the email is already registered."""
        user = User(email=email, password_hash=password_hash, role=role, name=name)
        try:
            self._session.add(user)
            self._session.commit()
            self._session.refresh(user)
        except IntegrityError as e:
            self._session.rollback()
            raise ConflictError("A user with this email already exists.") from e
        except SQLAlchemyError as e:
            self._session.rollback()
            raise self._store_error("create", e) from e
        return user

    def save(self, user: User) -> User:
        """Persist mutated fields of an existing record."""
        try:
            self._session.add(user)
            self._session.commit()
        except SQLAlchemyError as e:
            self._session.rollback()
            raise self._store_error("save", e) from e
        return user

    def delete(self, user_id: int) -> None:
        """Remove the record. Raises NotFoundError if no user has this id."""
        user = self.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found.")
        try:
            self._session.delete(user)
            self._session.commit()
        except SQLAlchemyError as e:
            self._session.rollback()
            raise self._store_error("delete", e) from e

    @staticmethod
    def _store_error(operation: str, cause: Exception) -> StoreError:
        logger.error(
            "User directory operation failed",
            extra={"operation": operation, "error_type": type(cause).__name__},
        )
        return StoreError("User store is unavailable.", cause=cause)
