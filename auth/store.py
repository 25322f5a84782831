"""
auth/store.py -- SQLAlchemy Core persistence layer for accounts.

Pattern: Repository. AccountStore exposes exactly what the auth flows need:
insert_account() and find_account_by_identifier(). Service and route code
never touches SQL.

Security:
  All queries use bound parameters. No f-strings in SQL.

  UNIQUE(username) and UNIQUE(email) are enforced by the schema, not by a
  read-before-write check. Two concurrent registrations for the same name
  race on the INSERT and exactly one wins; the loser gets
  AccountConflictError.

Concurrency:
  The engine is a connection pool. Each public method checks out one
  connection and runs one statement, so no transaction spans two calls.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, MetaData, String, Table, Text, create_engine, event, or_, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError


logger = logging.getLogger("weathergate.store")

_DEFAULT_DB_URL = "sqlite:///weathergate.db"

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_accounts = Table(
    "accounts",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("username", String(24), nullable=False, unique=True),
    Column("email", String(320), nullable=False, unique=True),
    Column("password_hash", Text, nullable=False),
    Column("created_at", String(32), nullable=False),
)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class StorageError(Exception):
    """Any persistence failure: database unavailable, locked, schema mismatch."""


class AccountConflictError(StorageError):
    """The username or email is already taken by another account."""


# ---------------------------------------------------------------------------
# WAL mode
# ---------------------------------------------------------------------------


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _is_unique_violation(exc: IntegrityError) -> bool:
    # SQLite: "UNIQUE constraint failed"; PostgreSQL: "violates unique constraint";
    # MySQL: "Duplicate entry". NOT NULL and CHECK failures are not conflicts.
    message = str(exc.orig).lower()
    return "unique" in message or "duplicate" in message


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class AccountStore:
    """Repository for registered accounts.

    Usage:
        store = AccountStore()
        account_id = store.insert_account("jane_doe", "jane@example.com", hash_password("Secur3!pass"))
        found = store.find_account_by_identifier("jane@example.com")
        store.close()
    """

    def __init__(self, db_url: str = _DEFAULT_DB_URL) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        _metadata.create_all(self.engine)

    def insert_account(self, username: str, email: str, password_hash: str) -> int:
        """Insert a new account and return its assigned database ID.

        Caller is responsible for hashing the password.

        Raises AccountConflictError if the username or email already exists,
        StorageError on any other database failure. Either way no row is left
        behind.
        """
        try:
            with self.engine.connect() as conn:
                result = conn.execute(
                    _accounts.insert().values(
                        username=username,
                        email=email,
                        password_hash=password_hash,
                        created_at=_now_iso(),
                    )
                )
                conn.commit()
                return result.inserted_primary_key[0]
        except IntegrityError as exc:
            if _is_unique_violation(exc):
                raise AccountConflictError("Username or email already registered.") from exc
            logger.warning("Account insert rejected by database: %s", exc.orig)
            raise StorageError("Account insert failed.") from exc
        except SQLAlchemyError as exc:
            logger.warning("Account insert failed: %s", exc)
            raise StorageError("Account insert failed.") from exc

    def find_account_by_identifier(self, identifier: str) -> tuple[int, str] | None:
        """Return (id, password_hash) of the account whose username OR email equals identifier.

        A single identifier is compared against both columns. Usernames cannot
        contain "@", so one identifier never matches two different accounts.
        Returns None if no account matches. Raises StorageError if the
        database cannot be queried.
        """
        query = select(_accounts.c.id, _accounts.c.password_hash).where(
            or_(_accounts.c.username == identifier, _accounts.c.email == identifier)
        )
        try:
            with self.engine.connect() as conn:
                row = conn.execute(query).first()
        except SQLAlchemyError as exc:
            logger.warning("Account lookup failed: %s", exc)
            raise StorageError("Account lookup failed.") from exc
        return (row.id, row.password_hash) if row is not None else None

    def ping(self) -> bool:
        """Return True if the database answers a trivial query. Used by /health."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError:
            return False
        return True

    def close(self) -> None:
        self.engine.dispose()
