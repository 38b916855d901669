"""Computi domain."""
from .models import (
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
