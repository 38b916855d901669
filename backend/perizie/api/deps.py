from typing import Annotated

from fastapi import Depends
from sqlmodel import Session

from perizie.db import get_session
from perizie.services import PaginatedExporter

DBSession = Annotated[Session, Depends(get_session)]

# Un solo exporter per processo: il flag in-flight impedisce export concorrenti
_exporter = PaginatedExporter()


def get_exporter() -> PaginatedExporter:
    return _exporter


Exporter = Annotated[PaginatedExporter, Depends(get_exporter)]

__all__ = ["DBSession", "Exporter", "get_exporter"]
