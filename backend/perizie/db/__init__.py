from .session import engine, get_session
from .init_db import init_db
from . import models  # noqa: F401

__all__ = ["engine", "get_session", "init_db", "models"]
