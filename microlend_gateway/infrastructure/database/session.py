"""Database engine and request-scoped sessions"""

from functools import lru_cache
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from microlend_gateway.config import settings


@lru_cache
def get_engine(database_url: str | None = None) -> Engine:
    """Engine built on first use"""
    url = database_url or settings.database_url
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=10,
        pool_recycle=3600,
    )


def get_db() -> Iterator[Session]:
    """Request-scoped session shared by every repository in one evaluation"""
    db = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())()
    try:
        yield db
    finally:
        db.close()
