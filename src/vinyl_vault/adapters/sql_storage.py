"""SQLAlchemy-backed storage for users, records and sessions."""

import secrets
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    create_engine,
    delete,
    event,
    func,
    or_,
    select,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from vinyl_vault.domain.models import (
    RECORD_FIELDS,
    NewUser,
    RecordDraft,
    UserRecord,
    VinylRecord,
)
from vinyl_vault.domain.sessions import SessionRecord
from vinyl_vault.errors import ConflictError
from vinyl_vault.services.storage import CatalogStorage, SessionStore

Base = declarative_base()

# Largest value an ``Integer`` primary key holds on every supported backend.
MAX_ROW_ID = 2**31 - 1


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class UserRow(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password = Column(Text, nullable=False)
    name = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


class RecordRow(Base):
    __tablename__ = "records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(Text, nullable=False)
    artist = Column(Text, nullable=False)
    year = Column(Text)
    genre = Column(Text)
    cover_image = Column(Text)
    custom_fields = Column(JSON)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


class SessionRow(Base):
    __tablename__ = "sessions"

    sid = Column(String(64), primary_key=True)
    user_id = Column(Integer, nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)


def create_sql_engine(database_url: str) -> Engine:
    """Create an engine for a connection string."""
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, pool_pre_ping=True)
    # The ASGI server and TestClient may call in from other threads.
    options: dict[str, object] = {"connect_args": {"check_same_thread": False}}
    if database_url in {"sqlite://", "sqlite:///:memory:"}:
        options["poolclass"] = StaticPool
    engine = create_engine(database_url, **options)

    @event.listens_for(engine, "connect")
    def _unicode_lower(dbapi_connection, _record) -> None:  # type: ignore[no-untyped-def]
        # SQLite's built-in lower() only folds ASCII letters.
        dbapi_connection.create_function(
            "lower", 1, _lower_or_none, deterministic=True
        )

    return engine


def _lower_or_none(value: object) -> object:
    return value.lower() if isinstance(value, str) else value


def _storable_id(row_id: int) -> bool:
    return 0 < row_id <= MAX_ROW_ID


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored as UTC.
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def _to_user(row: UserRow) -> UserRecord:
    return UserRecord(
        id=row.id,
        username=row.username,
        password_hash=row.password,
        name=row.name,
        created_at=_aware(row.created_at),
    )


def _to_record(row: RecordRow) -> VinylRecord:
    return VinylRecord(
        id=row.id,
        owner_id=row.user_id,
        title=row.title,
        artist=row.artist,
        year=row.year,
        genre=row.genre,
        cover_image=row.cover_image,
        custom_fields=dict(row.custom_fields or {}),
        created_at=_aware(row.created_at),
    )


def _to_session(row: SessionRow) -> SessionRecord:
    return SessionRecord(
        id=row.sid, user_id=row.user_id, expires_at=_aware(row.expires_at)
    )


@dataclass
class SqlSessionStore(SessionStore):
    """Session store backed by the ``sessions`` table."""

    session_factory: sessionmaker

    def create(self, user_id: int, expires_at: datetime) -> SessionRecord:
        """Insert a session row and return it."""
        row = SessionRow(
            sid=secrets.token_urlsafe(32), user_id=user_id, expires_at=expires_at
        )
        with self.session_factory() as db:
            db.add(row)
            db.commit()
            return _to_session(row)

    def get(self, session_id: str) -> SessionRecord | None:
        """Return a live session, dropping it if it has expired."""
        with self.session_factory() as db:
            row = db.get(SessionRow, session_id)
            if row is None:
                return None
            session = _to_session(row)
            if session.is_expired(_utcnow()):
                db.delete(row)
                db.commit()
                return None
            return session

    def touch(self, session_id: str, expires_at: datetime) -> None:
        """Move a session's expiry forward."""
        with self.session_factory() as db:
            row = db.get(SessionRow, session_id)
            if row is not None:
                row.expires_at = expires_at
                db.commit()

    def destroy(self, session_id: str) -> None:
        """Delete a session row."""
        with self.session_factory() as db:
            db.execute(delete(SessionRow).where(SessionRow.sid == session_id))
            db.commit()

    def prune_expired(self) -> int:
        """Delete expired session rows."""
        with self.session_factory() as db:
            result = db.execute(
                delete(SessionRow).where(SessionRow.expires_at <= _utcnow())
            )
            db.commit()
            return result.rowcount or 0


@dataclass
class SqlCatalogStorage(CatalogStorage):
    """Relational implementation of the catalog storage."""

    engine: Engine
    session_factory: sessionmaker
    sessions: SqlSessionStore
    kind: str = "sql"

    @classmethod
    def connect(cls, database_url: str) -> "SqlCatalogStorage":
        """Connect, create missing tables and return the storage.

        Raises the driver's error when the database cannot be reached.
        """
        engine = create_sql_engine(database_url)
        try:
            Base.metadata.create_all(engine)
        except Exception:
            engine.dispose()
            raise
        return cls.from_engine(engine)

    @classmethod
    def from_engine(cls, engine: Engine) -> "SqlCatalogStorage":
        """Wrap an engine whose tables already exist."""
        session_factory = sessionmaker(bind=engine, expire_on_commit=False)
        return cls(
            engine=engine,
            session_factory=session_factory,
            sessions=SqlSessionStore(session_factory),
        )

    def get_user(self, user_id: int) -> UserRecord | None:
        """Return a user by id, if present."""
        if not _storable_id(user_id):
            return None
        with self.session_factory() as db:
            row = db.get(UserRow, user_id)
            return _to_user(row) if row else None

    def get_user_by_username(self, username: str) -> UserRecord | None:
        """Return a user by username, if present."""
        with self.session_factory() as db:
            row = db.scalars(
                select(UserRow).where(UserRow.username == username).limit(1)
            ).first()
            return _to_user(row) if row else None

    def create_user(self, candidate: NewUser) -> UserRecord:
        """Insert a user row; the unique index on username rejects duplicates."""
        row = UserRow(
            username=candidate.username,
            password=candidate.password_hash,
            name=candidate.name,
        )
        with self.session_factory() as db:
            db.add(row)
            try:
                db.commit()
            except IntegrityError as exc:
                db.rollback()
                raise ConflictError("Username already exists") from exc
            db.refresh(row)
            return _to_user(row)

    def get_records(self, owner_id: int) -> list[VinylRecord]:
        """Return every record of an owner."""
        with self.session_factory() as db:
            rows = db.scalars(select(RecordRow).where(RecordRow.user_id == owner_id))
            return [_to_record(row) for row in rows]

    def get_record(self, record_id: int) -> VinylRecord | None:
        """Return a record by id, if present."""
        if not _storable_id(record_id):
            return None
        with self.session_factory() as db:
            row = db.get(RecordRow, record_id)
            return _to_record(row) if row else None

    def create_record(self, candidate: RecordDraft) -> VinylRecord:
        """Insert a record row and return it."""
        row = RecordRow(
            user_id=candidate.owner_id,
            title=candidate.title,
            artist=candidate.artist,
            year=candidate.year,
            genre=candidate.genre,
            cover_image=candidate.cover_image,
            custom_fields=dict(candidate.custom_fields),
        )
        with self.session_factory() as db:
            db.add(row)
            db.commit()
            db.refresh(row)
            return _to_record(row)

    def update_record(
        self, record_id: int, fields: Mapping[str, object]
    ) -> VinylRecord | None:
        """Merge the provided fields into a record row."""
        if not _storable_id(record_id):
            return None
        with self.session_factory() as db:
            row = db.get(RecordRow, record_id)
            if row is None:
                return None
            for name in RECORD_FIELDS:
                if name not in fields:
                    continue
                value = fields[name]
                if name == "custom_fields":
                    value = dict(value or {})
                setattr(row, name, value)
            db.commit()
            db.refresh(row)
            return _to_record(row)

    def delete_record(self, record_id: int) -> bool:
        """Delete a record row and report whether it existed."""
        if not _storable_id(record_id):
            return False
        with self.session_factory() as db:
            result = db.execute(delete(RecordRow).where(RecordRow.id == record_id))
            db.commit()
            return bool(result.rowcount)

    def search_records(self, owner_id: int, query: str) -> list[VinylRecord]:
        """Case-insensitive substring search over title, artist, genre and year."""
        needle = query.lower()
        columns = (RecordRow.title, RecordRow.artist, RecordRow.genre, RecordRow.year)
        statement = select(RecordRow).where(
            RecordRow.user_id == owner_id,
            or_(
                *(func.lower(column).contains(needle, autoescape=True) for column in columns)
            ),
        )
        with self.session_factory() as db:
            return [_to_record(row) for row in db.scalars(statement)]

    def close(self) -> None:
        """Dispose of pooled connections."""
        self.engine.dispose()
