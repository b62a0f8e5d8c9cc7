import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, ForeignKey, String, Text, create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

log = logging.getLogger(__name__)

Base = declarative_base()


def _new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DBUser(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=_new_id)
    username = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)


class DBTask(Base):
    __tablename__ = "tasks"

    id = Column(String, primary_key=True, default=_new_id)
    title = Column(String, nullable=False)
    description = Column(Text, default="")
    status = Column(String, nullable=False, default="pending")
    priority = Column(String, nullable=False, default="medium")
    due_date = Column(Date, nullable=True)
    user = Column(String, ForeignKey("users.id"), index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow)


def make_session_factory(database_url: str) -> sessionmaker:
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    engine = create_engine(database_url, connect_args=connect_args)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(session_factory: sessionmaker):
    Base.metadata.create_all(bind=session_factory.kw["bind"])
    log.info("Database initialized.")


def session_scope(session_factory: sessionmaker):
    """Yields one session per request and always closes it."""
    db: Session = session_factory()
    try:
        yield db
    finally:
        db.close()
