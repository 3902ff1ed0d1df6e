from stockapp.database.base import Base
from stockapp.database.engine import build_engine, ensure_schema
from stockapp.database.session import build_session_factory

__all__ = ["Base", "build_engine", "build_session_factory", "ensure_schema"]
