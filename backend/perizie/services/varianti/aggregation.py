"""Aggregazione dei risultati di riconciliazione: voce -> gruppo -> computo.

L'aggregazione è un fold puro su uno snapshot immutabile: eseguirla due volte
sugli stessi dati produce gli stessi totali. Più computi vengono aggregati in
modo indipendente, senza totale complessivo implicito.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from .ledger import ComputoSnapshot, GruppoSnapshot, VoceSnapshot, toggle_security
from .reconciliation import EsitoRiconciliazione, InvalidItemData, reconcile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RiepilogoVoce:
    voce: VoceSnapshot
    esito: Optional[EsitoRiconciliazione] = None
    errore: Optional[InvalidItemData] = None

    @property
    def ok(self) -> bool:
        return self.esito is not None


@dataclass(frozen=True)
class RiepilogoGruppo:
    gruppo: GruppoSnapshot
    voci: tuple[RiepilogoVoce, ...]
    totale: float
    costo_manodopera: float


@dataclass(frozen=True)
class RiepilogoComputo:
    computo: ComputoSnapshot
    gruppi: tuple[RiepilogoGruppo, ...]
    totale: float
    costo_manodopera: float
    errori: tuple[InvalidItemData, ...] = ()

    @property
    def totale_sicurezza(self) -> float:
        return sum((g.totale for g in self.gruppi if g.gruppo.is_security_cost), 0.0)

    @property
    def totale_lavori(self) -> float:
        """Importo dei gruppi soggetti a ribasso (non sicurezza)."""
        return sum((g.totale for g in self.gruppi if not g.gruppo.is_security_cost), 0.0)


def _reconcile_voce(voce: VoceSnapshot) -> RiepilogoVoce:
    try:
        return RiepilogoVoce(voce=voce, esito=reconcile(voce))
    except InvalidItemData as exc:
        logger.warning("Voce esclusa dalla riconciliazione: %s", exc)
        return RiepilogoVoce(voce=voce, errore=exc)


def aggregate_group(gruppo: GruppoSnapshot) -> RiepilogoGruppo:
    voci = tuple(_reconcile_voce(voce) for voce in gruppo.voci)
    totale = 0.0
    manodopera = 0.0
    for riepilogo in voci:
        if riepilogo.esito is None:
            continue
        totale += riepilogo.esito.nuovo_importo
        manodopera += riepilogo.esito.costo_manodopera
    return RiepilogoGruppo(
        gruppo=gruppo, voci=voci, totale=totale, costo_manodopera=manodopera
    )


def aggregate(computo: ComputoSnapshot) -> RiepilogoComputo:
    """Totale documento = somma dei gruppi, inclusi gli oneri della sicurezza."""
    gruppi = tuple(aggregate_group(gruppo) for gruppo in computo.gruppi)
    errori = tuple(
        voce.errore
        for gruppo in gruppi
        for voce in gruppo.voci
        if voce.errore is not None
    )
    riepilogo = RiepilogoComputo(
        computo=computo,
        gruppi=gruppi,
        totale=sum((g.totale for g in gruppi), 0.0),
        costo_manodopera=sum((g.costo_manodopera for g in gruppi), 0.0),
        errori=errori,
    )
    logger.debug(
        "Aggregato computo %s: %d gruppi, totale %.2f, %d voci in errore",
        computo.file_nome,
        len(gruppi),
        riepilogo.totale,
        len(errori),
    )
    return riepilogo


def aggregate_all(computi: Iterable[ComputoSnapshot]) -> list[RiepilogoComputo]:
    return [aggregate(computo) for computo in computi]


def toggle_group_security(computo: ComputoSnapshot, gruppo_id: Any) -> RiepilogoComputo:
    """Inverte il flag sicurezza del gruppo e ricalcola l'intero computo."""
    return aggregate(toggle_security(computo, gruppo_id))
