import logging
from contextlib import contextmanager

from fastapi import Request
from sqlalchemy import create_engine, event, inspect, text
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


# =========================
# STORE HANDLE
# =========================

class Store:
    """
    Owns the engine and session factory for one database.
    Created once at startup and shared by every request via app.state.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.engine = create_engine(url, echo=echo, **_engine_options(url))

        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine,
        )

    @contextmanager
    def session(self):
        """
        Context manager for standalone DB operations.
        Usage:
            with store.session() as db:
                db.get(Seller, uid)
        """
        db = self.SessionLocal()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def ping(self) -> bool:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True

    def init_db(self):
        # Register tables with Base before create_all
        import models  # noqa: F401

        self._reset_legacy_schema()
        Base.metadata.create_all(bind=self.engine)
        logger.info("DB_READY url=%s", self.engine.url.render_as_string(hide_password=True))

    def _reset_legacy_schema(self):
        # Earlier releases keyed sellers by an integer id; those rows
        # cannot be mapped onto identity subjects, so the tables restart.
        inspector = inspect(self.engine)
        if not inspector.has_table("sellers"):
            return

        columns = {col["name"] for col in inspector.get_columns("sellers")}
        if "uid" in columns:
            return

        logger.warning("LEGACY_SCHEMA_DETECTED resetting sellers/listings/reports")
        with self.engine.begin() as conn:
            conn.execute(text("DROP TABLE IF EXISTS reports"))
            conn.execute(text("DROP TABLE IF EXISTS listings"))
            conn.execute(text("DROP TABLE IF EXISTS sellers"))

    def dispose(self):
        self.engine.dispose()


def _engine_options(url: str) -> dict:
    if not url.startswith("sqlite"):
        return {"pool_pre_ping": True}

    options = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # one shared connection, otherwise every session sees an empty db
        options["poolclass"] = StaticPool
    return options


def _enable_sqlite_foreign_keys(dbapi_connection, _record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# =========================
# FASTAPI DEPENDENCY
# =========================

def get_store(request: Request) -> Store:
    return request.app.state.store


def get_db(request: Request):
    db = get_store(request).SessionLocal()
    try:
        yield db
    finally:
        db.close()
