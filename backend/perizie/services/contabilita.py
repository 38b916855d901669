"""Riepilogo contrattuale: ribasso d'asta, oneri della sicurezza e manodopera.

Il flag sicurezza non modifica il "nuovo importo" del computo; interviene solo
qui, escludendo i gruppi di sicurezza dalla base soggetta a ribasso. I computi
vengono sommati solo perché il chiamante lo richiede esplicitamente.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from perizie.db.models import TipoContabilizzazione
from perizie.services.varianti import RiepilogoComputo


@dataclass(frozen=True)
class ContractConfig:
    discount_percent: float = 0.0
    exclude_labor_from_discount: bool = False


@dataclass(frozen=True)
class RiepilogoContrattuale:
    totale_lordo: float
    importo_misura: float
    importo_corpo: float
    oneri_sicurezza: float
    costo_manodopera: float
    manodopera_scorporata: float
    base_ribasso: float
    ribasso: float
    lavori_netti: float
    totale_netto: float


def _round2(value: Decimal) -> Decimal:
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def _dec(value: float) -> Decimal:
    return Decimal(str(value))


def riepilogo_contrattuale(
    riepiloghi: Iterable[RiepilogoComputo], config: ContractConfig
) -> RiepilogoContrattuale:
    misura = Decimal("0")
    corpo = Decimal("0")
    sicurezza = Decimal("0")
    manodopera = Decimal("0")

    for riepilogo in riepiloghi:
        for gruppo in riepilogo.gruppi:
            if gruppo.gruppo.is_security_cost:
                sicurezza += _dec(gruppo.totale)
                continue
            if gruppo.gruppo.accounting_type is TipoContabilizzazione.corpo:
                corpo += _dec(gruppo.totale)
            else:
                misura += _dec(gruppo.totale)
            manodopera += _dec(gruppo.costo_manodopera)

    misura, corpo, sicurezza, manodopera = (
        _round2(misura),
        _round2(corpo),
        _round2(sicurezza),
        _round2(manodopera),
    )
    lavori = misura + corpo
    scorporata = manodopera if config.exclude_labor_from_discount else Decimal("0")
    base = _round2(lavori - scorporata)
    ribasso = _round2(base * _dec(config.discount_percent) / Decimal("100"))
    netti = _round2(base - ribasso)
    totale_netto = _round2(netti + scorporata + sicurezza)

    return RiepilogoContrattuale(
        totale_lordo=float(lavori + sicurezza),
        importo_misura=float(misura),
        importo_corpo=float(corpo),
        oneri_sicurezza=float(sicurezza),
        costo_manodopera=float(manodopera),
        manodopera_scorporata=float(scorporata),
        base_ribasso=float(base),
        ribasso=float(ribasso),
        lavori_netti=float(netti),
        totale_netto=float(totale_netto),
    )
