from .computi import ComputiService, build_snapshot
from .contabilita import ContractConfig, RiepilogoContrattuale, riepilogo_contrattuale
from .collaboratori import (
    PERPETUAL_LICENSE_DAYS,
    CollaboratorError,
    Rischio,
    analizza_rischi,
    genera_licenza,
)
from .export import (
    ExportFailed,
    ExportInProgress,
    PaginatedExporter,
    ReportRasterRenderer,
    paginate,
)
from . import serialization_service

__all__ = [
    "ComputiService",
    "build_snapshot",
    "ContractConfig",
    "RiepilogoContrattuale",
    "riepilogo_contrattuale",
    "PERPETUAL_LICENSE_DAYS",
    "CollaboratorError",
    "Rischio",
    "analizza_rischi",
    "genera_licenza",
    "ExportFailed",
    "ExportInProgress",
    "PaginatedExporter",
    "ReportRasterRenderer",
    "paginate",
    "serialization_service",
]
