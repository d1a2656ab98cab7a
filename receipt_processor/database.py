from typing import Optional
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from sqlalchemy.pool import StaticPool
from .config import settings

def _engine_kwargs(url: str) -> dict:
    # In-process SQLite: one shared connection, usable from any request thread
    if url.startswith("sqlite") and ":memory:" in url:
        return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}

def make_engine(url: str) -> Engine:
    return create_engine(url, future=True, **_engine_kwargs(url))

_engine: Optional[Engine] = None  # lazy-init, only built when the sql store is selected
_SessionLocal: Optional[sessionmaker] = None

def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = make_engine(settings.DATABASE_URL)
    return _engine

def _bind_sessions(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

def get_sessionmaker(engine: Optional[Engine] = None) -> sessionmaker:
    """Session factory for `engine`, or the shared one over the settings URL."""
    global _SessionLocal
    if engine is not None:
        return _bind_sessions(engine)
    if _SessionLocal is None:
        _SessionLocal = _bind_sessions(get_engine())
    return _SessionLocal

class Base(DeclarativeBase):
    pass
