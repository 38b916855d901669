import logging

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel

from perizie.db.session import engine

logger = logging.getLogger(__name__)


def init_db() -> None:
    """Crea tutte le tabelle e verifica la connessione."""
    SQLModel.metadata.create_all(engine)
    _healthcheck()


def _healthcheck() -> None:
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Database non raggiungibile")
        raise
