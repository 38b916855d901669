from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from .ledger import VoceSnapshot


class InvalidItemData(ValueError):
    """Quantità o prezzo non finiti, oppure incidenza manodopera fuori da 0-100."""

    def __init__(self, codice: str, campo: str, valore: Any) -> None:
        super().__init__(f"Voce {codice!r}: campo '{campo}' non valido ({valore!r})")
        self.codice = codice
        self.campo = campo
        self.valore = valore


@dataclass(frozen=True)
class EsitoRiconciliazione:
    variazione_netta: float
    nuova_quantita: float
    nuovo_importo: float
    costo_manodopera: float


def _finite(voce: VoceSnapshot, campo: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidItemData(voce.codice, campo, value)
    if not math.isfinite(value):
        raise InvalidItemData(voce.codice, campo, value)
    return float(value)


def net_variation(voce: VoceSnapshot) -> float:
    """Somma aumenti meno diminuzioni, nell'ordine di registrazione."""
    total = 0.0
    for variante in voce.varianti:
        total += variante.quantita_con_segno
    return total


def reconcile(voce: VoceSnapshot) -> EsitoRiconciliazione:
    """Calcola quantità, importo e costo manodopera aggiornati di una voce.

    Nessun arrotondamento: la formattazione a due decimali spetta al renderer.
    Una quantità finale negativa viene riportata così com'è.
    """
    quantita = _finite(voce, "quantita", voce.quantita)
    prezzo = _finite(voce, "prezzo_unitario", voce.prezzo_unitario)

    variazione = net_variation(voce)
    nuova_quantita = quantita + variazione
    nuovo_importo = nuova_quantita * prezzo

    costo_manodopera = 0.0
    if voce.incidenza_manodopera is not None:
        incidenza = _finite(voce, "incidenza_manodopera", voce.incidenza_manodopera)
        if not 0 <= incidenza <= 100:
            raise InvalidItemData(voce.codice, "incidenza_manodopera", incidenza)
        costo_manodopera = nuovo_importo * (incidenza / 100)

    return EsitoRiconciliazione(
        variazione_netta=variazione,
        nuova_quantita=nuova_quantita,
        nuovo_importo=nuovo_importo,
        costo_manodopera=costo_manodopera,
    )
