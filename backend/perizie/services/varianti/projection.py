"""Proiezione tabellare voce x variante per il report del computo aggiornato."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Literal, Optional, Sequence

from perizie.core import settings
from perizie.domain.computi.models import TipoVariazione

from .aggregation import RiepilogoComputo, RiepilogoGruppo, RiepilogoVoce
from .ledger import ComputoSnapshot, VoceSnapshot

RoundOrdering = Literal["numeric", "lexicographic"]
PLACEHOLDER_ASSENTE = "-"

_DECIMAL_RE = re.compile(r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_PREFIXED_RE = re.compile(r"0(?:[xX][0-9a-fA-F]+|[bB][01]+|[oO][0-7]+)")


def parse_round_number(numero: str) -> Optional[float]:
    """Valore numerico dell'identificativo, con le regole di ``Number()`` JavaScript.

    Sono numerici i decimali con esponente opzionale, ``Infinity`` con segno e
    gli interi esadecimali/binari/ottali con prefisso (``0x10``, ``0b101``,
    ``0o17``). Tutto il resto, compresi ``inf``, ``nan`` e ``1_000``, è
    un'etichetta.
    """
    text = numero.strip()
    if not text:
        return None
    if _PREFIXED_RE.fullmatch(text):
        return float(int(text, 0))
    if _DECIMAL_RE.fullmatch(text):
        return float(text.replace("Infinity", "inf"))
    return None


def round_sort_key(numero: str) -> tuple:
    """Chiave di ordinamento totale per gli identificativi di variante.

    Gli identificativi numerici vengono prima, in ordine di valore; le
    etichette seguono in ordine di stringa. Un confronto misto
    numero/etichetta non usa quindi la stringa grezza: ``["1bis", "2"]``
    diventa ``["2", "1bis"]``. Il confronto per stringa fra tipi misti non è
    transitivo e non darebbe un ordinamento stabile.
    """
    value = parse_round_number(numero)
    if value is None:
        return (1, 0.0, numero)
    return (0, value, numero)


def sort_rounds(numeri: Iterable[str], ordering: RoundOrdering | None = None) -> list[str]:
    ordering = ordering or settings.round_ordering
    distinct = set(numeri)
    if ordering == "lexicographic":
        return sorted(distinct)
    return sorted(distinct, key=round_sort_key)


def project_rounds(
    computo: ComputoSnapshot, ordering: RoundOrdering | None = None
) -> list[str]:
    """Unione ordinata degli identificativi di variante presenti nel documento."""
    return sort_rounds(
        (variante.numero for _, voce in computo.iter_voci() for variante in voce.varianti),
        ordering,
    )


def format_round_header(numero: str, template: str | None = None) -> str:
    if parse_round_number(numero) is None:
        return numero
    return (template or settings.round_header_template).format(numero=numero)


@dataclass(frozen=True)
class Movimento:
    tipo: TipoVariazione
    quantita: float

    @property
    def quantita_con_segno(self) -> float:
        return self.quantita if self.tipo is TipoVariazione.aumento else -self.quantita


@dataclass(frozen=True)
class CellaVariante:
    """Cella presente: tutti i movimenti della voce per quella variante."""
    numero: str
    movimenti: tuple[Movimento, ...]

    @property
    def netto(self) -> float:
        return sum((m.quantita_con_segno for m in self.movimenti), 0.0)


def project_row(voce: VoceSnapshot, rounds: Sequence[str]) -> list[Optional[CellaVariante]]:
    """Una cella per variante: None se la voce non ha varianti con quell'identificativo."""
    movimenti: dict[str, list[Movimento]] = {}
    for variante in voce.varianti:
        movimenti.setdefault(variante.numero, []).append(
            Movimento(tipo=variante.tipo, quantita=variante.quantita)
        )
    celle: list[Optional[CellaVariante]] = []
    for numero in rounds:
        if numero in movimenti:
            celle.append(CellaVariante(numero=numero, movimenti=tuple(movimenti[numero])))
        else:
            celle.append(None)
    return celle


@dataclass(frozen=True)
class RigaReport:
    progressivo: int
    riepilogo: RiepilogoVoce
    celle: tuple[Optional[CellaVariante], ...]

    @property
    def voce(self) -> VoceSnapshot:
        return self.riepilogo.voce


@dataclass(frozen=True)
class GruppoReport:
    riepilogo: RiepilogoGruppo
    righe: tuple[RigaReport, ...]


@dataclass(frozen=True)
class ReportComputo:
    riepilogo: RiepilogoComputo
    rounds: tuple[str, ...]
    intestazioni: tuple[str, ...]
    gruppi: tuple[GruppoReport, ...]


def project_group_rows(
    gruppo: RiepilogoGruppo, rounds: Sequence[str], progressivo: int
) -> tuple[GruppoReport, int]:
    """Costruisce le righe del gruppo; restituisce anche il prossimo progressivo."""
    righe = []
    for voce in gruppo.voci:
        righe.append(
            RigaReport(
                progressivo=progressivo,
                riepilogo=voce,
                celle=tuple(project_row(voce.voce, rounds)),
            )
        )
        progressivo += 1
    return GruppoReport(riepilogo=gruppo, righe=tuple(righe)), progressivo


def project_document(
    riepilogo: RiepilogoComputo,
    rounds: Sequence[str] | None = None,
    ordering: RoundOrdering | None = None,
) -> ReportComputo:
    if rounds is None:
        rounds = project_rounds(riepilogo.computo, ordering)
    gruppi = []
    progressivo = 1
    for gruppo in riepilogo.gruppi:
        gruppo_report, progressivo = project_group_rows(gruppo, rounds, progressivo)
        gruppi.append(gruppo_report)
    return ReportComputo(
        riepilogo=riepilogo,
        rounds=tuple(rounds),
        intestazioni=tuple(format_round_header(numero) for numero in rounds),
        gruppi=tuple(gruppi),
    )


def format_number(value: float) -> str:
    """Formato it-IT a due decimali (1.234,56)."""
    text = f"{value:,.2f}"
    return text.replace(",", "_").replace(".", ",").replace("_", ".")


def format_cell(cella: Optional[CellaVariante]) -> str:
    if cella is None:
        return PLACEHOLDER_ASSENTE
    parts = []
    for movimento in cella.movimenti:
        sign = "+" if movimento.tipo is TipoVariazione.aumento else "-"
        parts.append(f"{sign}{format_number(movimento.quantita)}")
    return " ".join(parts)


def format_labor_rate(value: object) -> str:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not value:
        return PLACEHOLDER_ASSENTE
    return f"{value:.2f}%"
