"""Database models - re-export dei modelli di dominio.

I modelli vivono in perizie.domain.computi.models; questo modulo li espone in un
unico punto per session, init_db e servizi.
"""
from __future__ import annotations

from perizie.domain.computi.models import (
    Computo,
    ComputoBase,
    ComputoRead,
    GruppoBase,
    GruppoLavorazioni,
    TipoContabilizzazione,
    TipoVariazione,
    VarianteBase,
    VarianteVoce,
    VoceBase,
    VoceComputo,
)

__all__ = [
    "Computo",
    "ComputoBase",
    "ComputoRead",
    "GruppoBase",
    "GruppoLavorazioni",
    "TipoContabilizzazione",
    "TipoVariazione",
    "VarianteBase",
    "VarianteVoce",
    "VoceBase",
    "VoceComputo",
]
