# database.py
import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base

from config import settings

logger = logging.getLogger(__name__)

Base = declarative_base()

_engine: Engine | None = None
_SessionLocal: sessionmaker | None = None


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_timeout": settings.DB_POOL_TIMEOUT,
        "pool_recycle": settings.DB_POOL_RECYCLE,
        "pool_pre_ping": True,  # test connection liveness before checkout
    }


def get_engine() -> Engine:
    """Lazily build the engine from DATABASE_URL."""
    global _engine
    if _engine is None:
        url = settings.DATABASE_URL
        _engine = create_engine(url, **_engine_kwargs(url))
        if not url.startswith("sqlite"):
            logger.info(
                "DB pool configured: size=%d, max_overflow=%d, recycle=%ds, pre_ping=True",
                settings.DB_POOL_SIZE, settings.DB_MAX_OVERFLOW, settings.DB_POOL_RECYCLE,
            )
    return _engine


def get_sessionmaker() -> sessionmaker:
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return _SessionLocal


def init_db(engine: Engine | None = None) -> None:
    import models  # registers every table on Base.metadata

    Base.metadata.create_all(bind=engine or get_engine())


def get_db():
    db = get_sessionmaker()()
    try:
        yield db
    finally:
        db.close()
