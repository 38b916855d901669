"""Contratti dei collaboratori esterni: analisi rischi e generazione licenze.

Il core non sa come vengono prodotti i risultati; qui si validano soltanto le
risposte e si isolano gli errori, che non toccano riconciliazione e
aggregazione.
"""
from __future__ import annotations

import logging
from typing import Awaitable, Literal, Optional, Protocol, Sequence

from pydantic import BaseModel, ValidationError

from perizie.services.varianti import ComputoSnapshot

logger = logging.getLogger(__name__)

PERPETUAL_LICENSE_DAYS = 9999

Livello = Literal["Alto", "Medio", "Basso"]


class CollaboratorError(RuntimeError):
    """Errore opaco di un collaboratore esterno."""


class Rischio(BaseModel):
    risk: str
    impact: Livello
    likelihood: Livello
    suggestion: str


class RiskAnalyzer(Protocol):
    def __call__(self, computi: Sequence[ComputoSnapshot]) -> Awaitable[Optional[list[dict]]]:
        ...


class LicenseKeyGenerator(Protocol):
    def __call__(self, identity: str, validity_days: int) -> str:
        ...


async def analizza_rischi(
    analyzer: RiskAnalyzer, computi: Sequence[ComputoSnapshot]
) -> Optional[list[Rischio]]:
    """None = analisi non eseguita, [] = nessun rischio trovato."""
    try:
        raw = await analyzer(computi)
    except Exception as exc:
        logger.warning("Analisi rischi non disponibile: %s", exc)
        raise CollaboratorError("Analisi rischi non disponibile") from exc
    if raw is None:
        return None
    try:
        return [Rischio.model_validate(item) for item in raw]
    except ValidationError as exc:
        raise CollaboratorError("Risposta analisi rischi non valida") from exc


def genera_licenza(generator: LicenseKeyGenerator, identity: str, validity_days: int) -> str:
    if isinstance(validity_days, bool) or not isinstance(validity_days, int) or validity_days < 0:
        raise ValueError("validity_days deve essere un intero non negativo")
    if not identity or not identity.strip():
        raise ValueError("Identità licenza mancante")
    try:
        return generator(identity.strip(), validity_days)
    except Exception as exc:
        logger.warning("Generazione licenza fallita per %s: %s", identity, exc)
        raise CollaboratorError("Generazione licenza fallita") from exc


def is_perpetual(validity_days: int) -> bool:
    return validity_days == PERPETUAL_LICENSE_DAYS
