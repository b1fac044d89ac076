"""Tests for accounts.services.directory: CRUD against in-memory SQLite and error translation."""

import unittest
from unittest.mock import MagicMock

from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from accounts.core.errors import ConflictError, NotFoundError, StoreError
from accounts.models import Base, User
from accounts.services.directory import UserDirectory


def _memory_session():
    """Return a session bound to a fresh in-memory SQLite database with the schema created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)()


class TestUserDirectory(unittest.TestCase):
    """UserDirectory create/find/save/delete against a real (SQLite) database."""

    def setUp(self) -> None:
        self.session = _memory_session()
        self.directory = UserDirectory(self.session)

    def tearDown(self) -> None:
        self.session.close()

    def test_create_assigns_id_and_timestamps(self) -> None:
        user = self.directory.create("a@x.com", "hash", "USER", "Ann")
        self.assertIsNotNone(user.id)
        self.assertIsNotNone(user.created_at)
        self.assertEqual(self.directory.find_by_id(user.id).email, "a@x.com")
        self.assertEqual(self.directory.find_by_email("a@x.com").id, user.id)

    def test_create_duplicate_email_raises_conflict(self) -> None:
        self.directory.create("a@x.com", "hash-1", "USER", "Ann")
        with self.assertRaises(ConflictError):
            self.directory.create("a@x.com", "hash-2", "USER", "Other")
        users = self.directory.list_all()
        self.assertEqual(len(users), 1)
        self.assertEqual(users[0].password_hash, "hash-1")

    def test_email_lookup_is_case_sensitive(self) -> None:
        self.directory.create("a@x.com", "hash", "USER", "Ann")
        self.assertIsNone(self.directory.find_by_email("A@X.COM"))

    def test_find_missing_returns_none(self) -> None:
        self.assertIsNone(self.directory.find_by_email("nobody@x.com"))
        self.assertIsNone(self.directory.find_by_id(999))

    def test_find_by_id_and_email_requires_both(self) -> None:
        user = self.directory.create("a@x.com", "hash", "USER", "Ann")
        self.assertIsNotNone(self.directory.find_by_id_and_email(user.id, "a@x.com"))
        self.assertIsNone(self.directory.find_by_id_and_email(user.id, "b@x.com"))

    def test_save_persists_mutation(self) -> None:
        user = self.directory.create("a@x.com", "old", "USER", "Ann")
        user.password_hash = "new"
        self.directory.save(user)
        self.session.expire_all()
        self.assertEqual(self.directory.find_by_id(user.id).password_hash, "new")

    def test_delete_removes_record(self) -> None:
        user = self.directory.create("a@x.com", "hash", "USER", "Ann")
        self.directory.delete(user.id)
        self.assertIsNone(self.directory.find_by_id(user.id))

    def test_delete_missing_raises_not_found(self) -> None:
        with self.assertRaises(NotFoundError):
            self.directory.delete(12345)

    def test_list_all_orders_by_id(self) -> None:
        self.directory.create("a@x.com", "h", "USER", "Ann")
        self.directory.create("b@x.com", "h", "ADMIN", "Bob")
        self.assertEqual([u.email for u in self.directory.list_all()], ["a@x.com", "b@x.com"])


class TestUserDirectoryStoreErrors(unittest.TestCase):
    """Driver failures surface as StoreError, never as raw SQLAlchemy exceptions."""

    def _failing_session(self) -> MagicMock:
        session = MagicMock()
        error = OperationalError("SELECT 1", {}, Exception("connection refused"))
        session.query.side_effect = error
        session.get.side_effect = error
        session.commit.side_effect = error
        return session

    def test_find_by_email_raises_store_error(self) -> None:
        directory = UserDirectory(self._failing_session())
        with self.assertRaises(StoreError) as ctx:
            directory.find_by_email("a@x.com")
        self.assertIsInstance(ctx.exception.cause, OperationalError)
        self.assertEqual(ctx.exception.status_code, 500)

    def test_list_all_raises_store_error(self) -> None:
        with self.assertRaises(StoreError):
            UserDirectory(self._failing_session()).list_all()

    def test_create_rolls_back_and_raises_store_error(self) -> None:
        session = self._failing_session()
        with self.assertRaises(StoreError):
            UserDirectory(session).create("a@x.com", "hash", "USER", "Ann")
        session.rollback.assert_called_once()

    def test_refresh_failure_after_create_raises_store_error(self) -> None:
        session = MagicMock()
        session.refresh.side_effect = OperationalError("SELECT 1", {}, Exception("connection lost"))
        with self.assertRaises(StoreError):
            UserDirectory(session).create("a@x.com", "hash", "USER", "Ann")
        session.rollback.assert_called_once()

    def test_save_rolls_back_and_raises_store_error(self) -> None:
        session = self._failing_session()
        with self.assertRaises(StoreError):
            UserDirectory(session).save(User(email="a@x.com", password_hash="h", role="USER", name="Ann"))
        session.rollback.assert_called_once()


if __name__ == "__main__":
    unittest.main()
