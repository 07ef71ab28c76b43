import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from .config import get_settings
from .errors import ArchiveError, Conflict, StorageError, is_unique_violation

LOG = logging.getLogger(__name__)

DATABASE_URL = get_settings().database_url

if DATABASE_URL.startswith("sqlite"):
    sqlite_args = {"check_same_thread": False, "timeout": 30}
else:
    sqlite_args = {}

engine = create_engine(DATABASE_URL, connect_args=sqlite_args, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_connection(bind=None) -> None:
    """Run a trivial query so startup fails fast when the store is unreachable."""
    with (bind or engine).connect() as conn:
        conn.execute(text("SELECT 1"))


@contextmanager
def write_scope(db: Session, *, conflict: str | None = None):
    """Commit the enclosed writes or roll all of them back.

    Uniqueness violations become ``Conflict`` (with ``conflict`` as the
    message), other storage failures become ``StorageError``.
    """
    try:
        yield db
        db.commit()
    except ArchiveError:
        db.rollback()
        raise
    except IntegrityError as exc:
        db.rollback()
        if is_unique_violation(exc):
            raise Conflict(conflict) from exc
        LOG.warning("integrity error: %s", exc.orig)
        raise StorageError("Write rejected by the database") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        LOG.exception("storage failure during write")
        raise StorageError() from exc
