import logging
from datetime import date, datetime
from typing import Any, Dict, Iterator

from fastapi import Request
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

logger = logging.getLogger(__name__)


class _RowMixin:
    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for attr in inspect(self).mapper.column_attrs:
            value = getattr(self, attr.key)
            if isinstance(value, (datetime, date)):
                value = value.isoformat()
            out[attr.key] = value
        return out


Base = declarative_base(cls=_RowMixin)


class Database:
    """
    Owns the process-wide engine and session factory.

    Opened once at startup, shared by the request handlers and the sync
    routine, and disposed once on shutdown.
    """

    def __init__(self, url: str, **engine_kwargs):
        if url.startswith("sqlite"):
            connect_args = engine_kwargs.setdefault("connect_args", {})
            connect_args.setdefault("check_same_thread", False)

        self.url = url
        self.engine: Engine = create_engine(url, future=True, **engine_kwargs)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self._disposed = False

    def create_all(self) -> None:
        # importing the package registers every table on Base.metadata
        import app.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("Schema ensured on %s", self.engine.url.render_as_string(hide_password=True))

    def session(self) -> Session:
        return self.SessionLocal()

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception:
            logger.exception("Database ping failed")
            return False

    def dispose(self) -> None:
        if self._disposed:
            return
        self.engine.dispose()
        self._disposed = True
        logger.info("Database closed")


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()
