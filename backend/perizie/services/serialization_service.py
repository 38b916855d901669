from perizie.schemas import (
    CellaVarianteSchema,
    ComputoRiepilogoSchema,
    GruppoReportSchema,
    GruppoRiepilogoSchema,
    MovimentoSchema,
    ReportComputoSchema,
    RiepilogoContrattualeSchema,
    RigaReportSchema,
    VoceRiepilogoSchema,
)
from perizie.services.contabilita import RiepilogoContrattuale
from perizie.services.varianti import (
    CellaVariante,
    ReportComputo,
    RiepilogoComputo,
    RiepilogoGruppo,
)
from perizie.services.varianti.aggregation import RiepilogoVoce


def _number_or_none(value: object) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def serialize_voce(riepilogo: RiepilogoVoce) -> VoceRiepilogoSchema:
    voce = riepilogo.voce
    esito = riepilogo.esito
    return VoceRiepilogoSchema(
        id=voce.id,
        codice=voce.codice,
        descrizione=voce.descrizione,
        unita_misura=voce.unita_misura,
        quantita=_number_or_none(voce.quantita),
        prezzo_unitario=_number_or_none(voce.prezzo_unitario),
        incidenza_manodopera=_number_or_none(voce.incidenza_manodopera),
        variazione_netta=esito.variazione_netta if esito else None,
        nuova_quantita=esito.nuova_quantita if esito else None,
        nuovo_importo=esito.nuovo_importo if esito else None,
        costo_manodopera=esito.costo_manodopera if esito else None,
        errore=str(riepilogo.errore) if riepilogo.errore else None,
    )


def serialize_gruppo(riepilogo: RiepilogoGruppo) -> GruppoRiepilogoSchema:
    gruppo = riepilogo.gruppo
    return GruppoRiepilogoSchema(
        id=gruppo.id,
        nome=gruppo.nome,
        is_security_cost=gruppo.is_security_cost,
        accounting_type=gruppo.accounting_type,
        totale=riepilogo.totale,
        costo_manodopera=riepilogo.costo_manodopera,
        voci=[serialize_voce(voce) for voce in riepilogo.voci],
    )


def serialize_riepilogo(riepilogo: RiepilogoComputo) -> ComputoRiepilogoSchema:
    return ComputoRiepilogoSchema(
        id=riepilogo.computo.id,
        file_nome=riepilogo.computo.file_nome,
        totale=riepilogo.totale,
        totale_lavori=riepilogo.totale_lavori,
        totale_sicurezza=riepilogo.totale_sicurezza,
        costo_manodopera=riepilogo.costo_manodopera,
        gruppi=[serialize_gruppo(gruppo) for gruppo in riepilogo.gruppi],
        errori=[str(errore) for errore in riepilogo.errori],
    )


def _serialize_cella(cella: CellaVariante | None) -> CellaVarianteSchema | None:
    if cella is None:
        return None
    return CellaVarianteSchema(
        numero=cella.numero,
        movimenti=[
            MovimentoSchema(tipo=m.tipo, quantita=m.quantita) for m in cella.movimenti
        ],
        netto=cella.netto,
    )


def serialize_report(report: ReportComputo) -> ReportComputoSchema:
    return ReportComputoSchema(
        id=report.riepilogo.computo.id,
        file_nome=report.riepilogo.computo.file_nome,
        totale=report.riepilogo.totale,
        rounds=list(report.rounds),
        intestazioni=list(report.intestazioni),
        gruppi=[
            GruppoReportSchema(
                id=gruppo.riepilogo.gruppo.id,
                nome=gruppo.riepilogo.gruppo.nome,
                is_security_cost=gruppo.riepilogo.gruppo.is_security_cost,
                totale=gruppo.riepilogo.totale,
                righe=[
                    RigaReportSchema(
                        progressivo=riga.progressivo,
                        voce=serialize_voce(riga.riepilogo),
                        celle=[_serialize_cella(cella) for cella in riga.celle],
                    )
                    for riga in gruppo.righe
                ],
            )
            for gruppo in report.gruppi
        ],
    )


def serialize_contabilita(riepilogo: RiepilogoContrattuale) -> RiepilogoContrattualeSchema:
    return RiepilogoContrattualeSchema(
        totale_lordo=riepilogo.totale_lordo,
        importo_misura=riepilogo.importo_misura,
        importo_corpo=riepilogo.importo_corpo,
        oneri_sicurezza=riepilogo.oneri_sicurezza,
        costo_manodopera=riepilogo.costo_manodopera,
        manodopera_scorporata=riepilogo.manodopera_scorporata,
        base_ribasso=riepilogo.base_ribasso,
        ribasso=riepilogo.ribasso,
        lavori_netti=riepilogo.lavori_netti,
        totale_netto=riepilogo.totale_netto,
    )
