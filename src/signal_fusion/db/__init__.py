"""Database layer — engine, session, ORM base."""

from signal_fusion.db.base import Base
from signal_fusion.db.engine import get_engine, get_session, get_session_factory, init_engine

__all__ = ["Base", "get_engine", "get_session", "get_session_factory", "init_engine"]
