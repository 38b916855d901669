"""Computi domain models."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import Field, SQLModel


class TipoContabilizzazione(str, Enum):
    """Tipo di contabilizzazione del gruppo di lavorazioni."""
    misura = "measure"
    corpo = "body"


class ComputoBase(SQLModel):
    """Base model per Computo con campi comuni."""
    nome: str
    file_nome: Optional[str] = None
    note: Optional[str] = None


class Computo(ComputoBase, table=True):
    """Documento di computo metrico: elenco ordinato di gruppi di lavorazioni."""
    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class ComputoRead(ComputoBase):
    """Schema di lettura per Computo."""
    id: int
    created_at: datetime
    updated_at: datetime


class GruppoBase(SQLModel):
    """Categoria di lavorazioni (WorkGroup)."""
    nome: str
    ordine: int = Field(default=0)
    is_security_cost: bool = Field(
        default=False, description="Oneri della sicurezza (non soggetti a ribasso)"
    )
    accounting_type: TipoContabilizzazione = Field(default=TipoContabilizzazione.misura)


class GruppoLavorazioni(GruppoBase, table=True):
    __tablename__ = "gruppo_lavorazioni"

    id: Optional[int] = Field(default=None, primary_key=True)
    computo_id: int = Field(foreign_key="computo.id", index=True)


class VoceBase(SQLModel):
    """Base model per singola voce di computo."""
    ordine: int = Field(default=0)
    codice: str = ""
    descrizione: Optional[str] = None
    unita_misura: Optional[str] = None
    # Validazione numerica demandata alla riconciliazione (InvalidItemData per voce)
    quantita: Optional[float] = None
    prezzo_unitario: Optional[float] = None
    incidenza_manodopera: Optional[float] = Field(
        default=None, description="Incidenza manodopera in percentuale (0-100)"
    )


class VoceComputo(VoceBase, table=True):
    """Singola voce (riga) di un gruppo di lavorazioni."""
    __tablename__ = "voce_computo"

    id: Optional[int] = Field(default=None, primary_key=True)
    gruppo_id: int = Field(foreign_key="gruppo_lavorazioni.id", index=True)


class TipoVariazione(str, Enum):
    aumento = "increase"
    diminuzione = "decrease"


class VarianteBase(SQLModel):
    """Variazione di quantità registrata su una voce per una perizia/variante."""
    numero: str = Field(description="Identificativo della variante (es. '1', 'Perizia 2')")
    tipo: TipoVariazione
    quantita: float = Field(ge=0, description="Valore assoluto; il segno dipende dal tipo")
    data: Optional[str] = Field(default=None, description="Data ISO 'yyyy-MM-dd'")
    note: Optional[str] = None


class VarianteVoce(VarianteBase, table=True):
    """Record immutabile: le correzioni si registrano come nuove varianti."""
    __tablename__ = "variante_voce"

    id: Optional[int] = Field(default=None, primary_key=True)
    voce_id: int = Field(foreign_key="voce_computo.id", index=True)
    ordine: int = Field(default=0)
    created_at: datetime = Field(default_factory=datetime.utcnow)
