import asyncio
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import FileResponse
from sqlmodel import Session

from perizie.api.deps import DBSession, Exporter
from perizie.core import settings
from perizie.schemas import (
    ComputoCreate,
    ComputoRiepilogoSchema,
    ComputoSchema,
    ContabilitaRequest,
    ReportComputoSchema,
    RiconciliazioneRequest,
    RiepilogoContrattualeSchema,
    VarianteCreate,
    VarianteSchema,
)
from perizie.services import (
    ComputiService,
    ContractConfig,
    ExportFailed,
    ExportInProgress,
    ReportRasterRenderer,
    build_snapshot,
    riepilogo_contrattuale,
    serialization_service,
)
from perizie.services.varianti import (
    GruppoNotFound,
    InvalidVariationData,
    ReportComputo,
    aggregate,
    aggregate_all,
    project_document,
)

router = APIRouter()

ComputoIds = Annotated[list[int], Query(alias="ids")]


@router.get("/", response_model=list[ComputoSchema])
def list_computi(session: DBSession):
    return ComputiService.list_computi(session)


@router.post("/", response_model=ComputoSchema, status_code=status.HTTP_201_CREATED)
def import_computo(payload: ComputoCreate, session: DBSession):
    try:
        return ComputiService.import_documento(session, payload)
    except InvalidVariationData as exc:
        raise HTTPException(status_code=422, detail=str(exc))


@router.post("/riconcilia", response_model=list[ComputoRiepilogoSchema])
def riconcilia_documenti(payload: RiconciliazioneRequest) -> list[ComputoRiepilogoSchema]:
    """Aggrega i documenti ricevuti senza salvarli."""
    try:
        snapshots = [build_snapshot(documento) for documento in payload.documenti]
    except InvalidVariationData as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return [serialization_service.serialize_riepilogo(r) for r in aggregate_all(snapshots)]


@router.get("/riepiloghi", response_model=list[ComputoRiepilogoSchema])
def get_riepiloghi(session: DBSession, ids: ComputoIds = []) -> list[ComputoRiepilogoSchema]:
    try:
        snapshots = ComputiService.load_snapshots(session, ids)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return [serialization_service.serialize_riepilogo(r) for r in aggregate_all(snapshots)]


@router.post("/contabilita", response_model=RiepilogoContrattualeSchema)
def get_riepilogo_contrattuale(
    payload: ContabilitaRequest, session: DBSession
) -> RiepilogoContrattualeSchema:
    try:
        snapshots = ComputiService.load_snapshots(session, payload.computo_ids)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    config = ContractConfig(
        discount_percent=payload.config.discount_percent,
        exclude_labor_from_discount=payload.config.exclude_labor_from_discount,
    )
    riepilogo = riepilogo_contrattuale(aggregate_all(snapshots), config)
    return serialization_service.serialize_contabilita(riepilogo)


def _build_reports(session: Session, ids: list[int]) -> list[ReportComputo]:
    snapshots = ComputiService.load_snapshots(session, ids)
    return [project_document(aggregate(snapshot)) for snapshot in snapshots]


@router.post("/report/pdf", response_class=FileResponse)
async def export_report_pdf(session: DBSession, exporter: Exporter, ids: ComputoIds = []):
    try:
        reports = await asyncio.to_thread(_build_reports, session, ids)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    renderer = ReportRasterRenderer(reports, scale=settings.export_capture_scale)
    try:
        path = await exporter.export(renderer, settings.export_dir)
    except ExportInProgress as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    except ExportFailed as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=exc.user_message
        )
    return FileResponse(path, media_type="application/pdf", filename=path.name)


@router.post(
    "/voci/{voce_id}/varianti",
    response_model=VarianteSchema,
    status_code=status.HTTP_201_CREATED,
)
def add_variante(voce_id: int, payload: VarianteCreate, session: DBSession):
    try:
        return ComputiService.add_variante(session, voce_id, payload)
    except InvalidVariationData as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


@router.post("/gruppi/{gruppo_id}/sicurezza", response_model=ComputoRiepilogoSchema)
def toggle_gruppo_sicurezza(gruppo_id: int, session: DBSession) -> ComputoRiepilogoSchema:
    try:
        riepilogo = ComputiService.toggle_group_security(session, gruppo_id)
    except GruppoNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return serialization_service.serialize_riepilogo(riepilogo)


@router.get("/{computo_id}/riepilogo", response_model=ComputoRiepilogoSchema)
def get_riepilogo(computo_id: int, session: DBSession) -> ComputoRiepilogoSchema:
    try:
        snapshot = ComputiService.load_snapshot(session, computo_id)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return serialization_service.serialize_riepilogo(aggregate(snapshot))


@router.get("/{computo_id}/report", response_model=ReportComputoSchema)
def get_report(computo_id: int, session: DBSession) -> ReportComputoSchema:
    try:
        snapshot = ComputiService.load_snapshot(session, computo_id)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return serialization_service.serialize_report(project_document(aggregate(snapshot)))


@router.delete("/{computo_id}", response_model=ComputoSchema)
def delete_computo(computo_id: int, session: DBSession):
    computo = ComputiService.delete_computo(session, computo_id)
    if not computo:
        raise HTTPException(status_code=404, detail="Computo non trovato")
    return computo
