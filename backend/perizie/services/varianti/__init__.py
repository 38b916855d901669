from .aggregation import (
    RiepilogoComputo,
    RiepilogoGruppo,
    RiepilogoVoce,
    aggregate,
    aggregate_all,
    aggregate_group,
    toggle_group_security,
)
from .ledger import (
    ComputoSnapshot,
    GruppoNotFound,
    GruppoSnapshot,
    InvalidVariationData,
    VarianteSnapshot,
    VoceSnapshot,
    toggle_security,
)
from .projection import (
    CellaVariante,
    ReportComputo,
    format_round_header,
    project_document,
    project_rounds,
    project_row,
)
from .reconciliation import EsitoRiconciliazione, InvalidItemData, reconcile

__all__ = [
    "CellaVariante",
    "ComputoSnapshot",
    "EsitoRiconciliazione",
    "GruppoNotFound",
    "GruppoSnapshot",
    "InvalidItemData",
    "InvalidVariationData",
    "ReportComputo",
    "RiepilogoComputo",
    "RiepilogoGruppo",
    "RiepilogoVoce",
    "VarianteSnapshot",
    "VoceSnapshot",
    "aggregate",
    "aggregate_all",
    "aggregate_group",
    "format_round_header",
    "project_document",
    "project_rounds",
    "project_row",
    "reconcile",
    "toggle_group_security",
    "toggle_security",
]
