from pathlib import Path

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel
from sqlmodel import create_engine

from farmbooks.core.config import settings
from farmbooks.db import models  # noqa: F401  (registers tables on SQLModel.metadata)

# SQLite connections are shared across FastAPI's worker threads
connect_args = (
    {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}
)
engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)


def create_db_and_tables(db_engine: Engine = engine):
    """
    Create any missing tables, and the directory of a file-backed SQLite database.
    """
    url = db_engine.url
    if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    SQLModel.metadata.create_all(db_engine)
