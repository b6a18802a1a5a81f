import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy.engine import Engine, make_url
from sqlmodel import SQLModel, Session, create_engine

from .config import settings
from .seeding import seed_default_categories

logger = logging.getLogger(__name__)


def _prepare_sqlite_path(url: str) -> dict:
    """Create the parent directory of a SQLite file and return connect args."""
    parsed = make_url(url)
    if not parsed.drivername.startswith("sqlite"):
        return {}
    if parsed.database and parsed.database != ":memory:":
        Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)
    # Sessions are opened from FastAPI's worker threads
    return {"check_same_thread": False}


class Database:
    """Owns the engine shared by every request."""

    def __init__(self, url: Optional[str] = None, echo: bool = False, engine: Optional[Engine] = None):
        if engine is None:
            url = url or settings.DATABASE_URL
            engine = create_engine(url, echo=echo, connect_args=_prepare_sqlite_path(url))
        self.engine = engine

    def create_tables(self) -> None:
        SQLModel.metadata.create_all(self.engine)

    def init(self, seed_defaults: bool = True) -> None:
        """Create tables and seed default categories into an empty store."""
        self.create_tables()
        logger.info("Database tables created")
        if seed_defaults:
            with self.session() as session:
                inserted = seed_default_categories(session)
            if inserted:
                logger.info("Seeded %d default categories", inserted)

    @contextmanager
    def session(self) -> Iterator[Session]:
        with Session(self.engine) as session:
            yield session


def get_session(request: Request):
    """Yield a session from the database attached to the running app."""
    database: Database = request.app.state.database
    with database.session() as session:
        yield session
