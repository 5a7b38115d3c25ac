import logging
from contextlib import contextmanager
from typing import Generator, Optional
from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker, Session

logger = logging.getLogger(__name__)

_database_options = {
    "pool_pre_ping": True,
    "pool_size": 10,
    "max_overflow": 5,
    "pool_timeout": 30,
    "pool_recycle": 300
}

class Database:
    """Engine and session factory with an explicit lifecycle.

    Built once per process (server lifespan or CLI command) and handed to
    whoever needs sessions; nothing connects at import time.
    """

    def __init__(self, url: str, engine: Optional[Engine] = None):
        self.url = url
        if engine is None:
            options = _database_options if url.startswith("postgresql") else {}
            engine = create_engine(url, **options)
        self.engine = engine
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        db = self.SessionLocal()
        try:
            yield db
        except OperationalError:
            logger.error("Database connection failed")
            db.rollback()
            raise
        finally:
            db.close()

    def dispose(self):
        self.engine.dispose()

def get_db(request: Request) -> Generator[Session, None, None]:

    database: Database = request.app.state.database

    with database.session() as db:
        yield db
