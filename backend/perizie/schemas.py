from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from perizie.db.models import TipoContabilizzazione, TipoVariazione

GruppoId = Union[int, str]


def _safe_float(value: Any) -> float | None:
    """Converte numeri o stringhe numeriche (anche con virgola) in float, altrimenti None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        text = str(value).strip().replace("\u00a0", "")
        text = text.replace(",", ".")
        text = "".join(ch for ch in text if ch not in (" ", "\t"))
        return float(text)
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Input: forma documento importato (chiavi camelCase accettate come alias)
# ---------------------------------------------------------------------------


class VarianteCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    numero: str = Field(alias="number", min_length=1)
    tipo: TipoVariazione = Field(alias="type")
    quantita: float = Field(alias="quantity", ge=0, allow_inf_nan=False)
    data: Optional[str] = Field(default=None, alias="date")
    note: Optional[str] = None

    @field_validator("numero", mode="before")
    @classmethod
    def _numero_as_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class VoceCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    codice: str = Field(default="", alias="articleCode")
    descrizione: Optional[str] = Field(default=None, alias="description")
    unita_misura: Optional[str] = Field(default=None, alias="unit")
    quantita: Optional[float] = Field(default=None, alias="quantity")
    prezzo_unitario: Optional[float] = Field(default=None, alias="unitPrice")
    incidenza_manodopera: Optional[float] = Field(default=None, alias="laborRate")
    varianti: list[VarianteCreate] = Field(default_factory=list, alias="variations")

    @field_validator("quantita", "prezzo_unitario", "incidenza_manodopera", mode="before")
    @classmethod
    def _lenient_number(cls, value: Any) -> float | None:
        # I valori non numerici arrivano alla riconciliazione come None (InvalidItemData)
        return _safe_float(value)

    @field_validator("varianti", mode="before")
    @classmethod
    def _no_variations(cls, value: Any) -> Any:
        return [] if value is None else value


class GruppoCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[GruppoId] = None
    nome: str = Field(alias="name")
    is_security_cost: bool = Field(default=False, alias="isSecurityCost")
    accounting_type: TipoContabilizzazione = Field(
        default=TipoContabilizzazione.misura, alias="accountingType"
    )
    voci: list[VoceCreate] = Field(default_factory=list, alias="items")


class ComputoCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_nome: str = Field(alias="fileName")
    nome: Optional[str] = None
    note: Optional[str] = None
    gruppi: list[GruppoCreate] = Field(default_factory=list, alias="workGroups")


class RiconciliazioneRequest(BaseModel):
    documenti: list[ComputoCreate] = Field(default_factory=list)


class ContractConfigSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    discount_percent: float = Field(default=0.0, ge=0, le=100, alias="discountPercent")
    exclude_labor_from_discount: bool = Field(
        default=False, alias="excludeLaborFromDiscount"
    )


class ContabilitaRequest(BaseModel):
    computo_ids: list[int] = Field(default_factory=list)
    config: ContractConfigSchema = Field(default_factory=ContractConfigSchema)


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


class ComputoSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nome: str
    file_nome: Optional[str] = None
    note: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class VarianteSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    voce_id: int
    ordine: int
    numero: str
    tipo: TipoVariazione
    quantita: float
    data: Optional[str] = None
    note: Optional[str] = None
    created_at: datetime


class VoceRiepilogoSchema(BaseModel):
    id: Optional[int] = None
    codice: str
    descrizione: Optional[str] = None
    unita_misura: Optional[str] = None
    quantita: Optional[float] = None
    prezzo_unitario: Optional[float] = None
    incidenza_manodopera: Optional[float] = None
    variazione_netta: Optional[float] = None
    nuova_quantita: Optional[float] = None
    nuovo_importo: Optional[float] = None
    costo_manodopera: Optional[float] = None
    errore: Optional[str] = None


class GruppoRiepilogoSchema(BaseModel):
    id: Optional[GruppoId] = None
    nome: str
    is_security_cost: bool
    accounting_type: TipoContabilizzazione
    totale: float
    costo_manodopera: float
    voci: list[VoceRiepilogoSchema]


class ComputoRiepilogoSchema(BaseModel):
    id: Optional[int] = None
    file_nome: str
    totale: float
    totale_lavori: float
    totale_sicurezza: float
    costo_manodopera: float
    gruppi: list[GruppoRiepilogoSchema]
    errori: list[str] = Field(default_factory=list)


class MovimentoSchema(BaseModel):
    tipo: TipoVariazione
    quantita: float


class CellaVarianteSchema(BaseModel):
    numero: str
    movimenti: list[MovimentoSchema]
    netto: float


class RigaReportSchema(BaseModel):
    progressivo: int
    voce: VoceRiepilogoSchema
    # None = voce senza variante per quella colonna (mostrata come "-")
    celle: list[Optional[CellaVarianteSchema]]


class GruppoReportSchema(BaseModel):
    id: Optional[GruppoId] = None
    nome: str
    is_security_cost: bool
    totale: float
    righe: list[RigaReportSchema]


class ReportComputoSchema(BaseModel):
    id: Optional[int] = None
    file_nome: str
    totale: float
    rounds: list[str]
    intestazioni: list[str]
    gruppi: list[GruppoReportSchema]


class RiepilogoContrattualeSchema(BaseModel):
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
