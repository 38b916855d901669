"""Snapshot immutabili del computo usati dal motore di riconciliazione.

Le strutture sono pure: nessun comportamento oltre alla validazione delle
varianti. Ogni valore derivato (quantità nuova, importi, colonne report) viene
ricalcolato dai campi memorizzati.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Any, Iterator, Optional

from perizie.domain.computi.models import TipoContabilizzazione, TipoVariazione


class InvalidVariationData(ValueError):
    """Variante con tipo sconosciuto o quantità negativa/non finita."""


class GruppoNotFound(KeyError):
    def __init__(self, gruppo_id: Any) -> None:
        super().__init__(gruppo_id)
        self.gruppo_id = gruppo_id

    def __str__(self) -> str:
        return f"Gruppo {self.gruppo_id!r} non trovato"


@dataclass(frozen=True)
class VarianteSnapshot:
    numero: str
    tipo: TipoVariazione
    quantita: float
    data: Optional[str] = None
    note: Optional[str] = None

    def __post_init__(self) -> None:
        try:
            tipo = TipoVariazione(self.tipo)
        except ValueError as exc:
            raise InvalidVariationData(
                f"Tipo variante non valido: {self.tipo!r} (atteso increase/decrease)"
            ) from exc
        object.__setattr__(self, "tipo", tipo)
        if self.numero is None or not str(self.numero).strip():
            raise InvalidVariationData("Identificativo variante mancante")
        object.__setattr__(self, "numero", str(self.numero))

        if isinstance(self.quantita, bool) or not isinstance(self.quantita, (int, float)):
            raise InvalidVariationData(
                f"Quantità variante {self.numero!r} non numerica: {self.quantita!r}"
            )
        if not math.isfinite(self.quantita) or self.quantita < 0:
            raise InvalidVariationData(
                f"Quantità variante {self.numero!r} deve essere >= 0 (ricevuto {self.quantita})"
            )

    @property
    def quantita_con_segno(self) -> float:
        if self.tipo is TipoVariazione.aumento:
            return self.quantita
        return -self.quantita


@dataclass(frozen=True)
class VoceSnapshot:
    codice: str
    descrizione: Optional[str]
    unita_misura: Optional[str]
    quantita: Any
    prezzo_unitario: Any
    incidenza_manodopera: Any = None
    varianti: tuple[VarianteSnapshot, ...] = ()
    id: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "varianti", tuple(self.varianti))


@dataclass(frozen=True)
class GruppoSnapshot:
    nome: str
    voci: tuple[VoceSnapshot, ...] = ()
    is_security_cost: bool = False
    accounting_type: TipoContabilizzazione = TipoContabilizzazione.misura
    id: Any = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "voci", tuple(self.voci))
        object.__setattr__(
            self, "accounting_type", TipoContabilizzazione(self.accounting_type)
        )


@dataclass(frozen=True)
class ComputoSnapshot:
    file_nome: str
    gruppi: tuple[GruppoSnapshot, ...] = field(default_factory=tuple)
    id: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "gruppi", tuple(self.gruppi))

    def iter_voci(self) -> Iterator[tuple[GruppoSnapshot, VoceSnapshot]]:
        for gruppo in self.gruppi:
            for voce in gruppo.voci:
                yield gruppo, voce


def toggle_security(computo: ComputoSnapshot, gruppo_id: Any) -> ComputoSnapshot:
    """Restituisce un nuovo snapshot con il flag sicurezza del gruppo invertito."""
    found = False
    gruppi: list[GruppoSnapshot] = []
    for gruppo in computo.gruppi:
        if gruppo.id == gruppo_id:
            found = True
            gruppo = replace(gruppo, is_security_cost=not gruppo.is_security_cost)
        gruppi.append(gruppo)
    if not found:
        raise GruppoNotFound(gruppo_id)
    return replace(computo, gruppi=tuple(gruppi))

