from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime
from typing import Sequence

from sqlmodel import Session, select

from perizie.db.models import (
    Computo,
    ComputoRead,
    GruppoLavorazioni,
    VarianteVoce,
    VoceComputo,
)
from perizie.schemas import ComputoCreate, VarianteCreate
from perizie.services.varianti import (
    ComputoSnapshot,
    GruppoNotFound,
    GruppoSnapshot,
    RiepilogoComputo,
    VarianteSnapshot,
    VoceSnapshot,
    aggregate,
)

logger = logging.getLogger(__name__)


def build_snapshot(payload: ComputoCreate, computo_id: int | None = None) -> ComputoSnapshot:
    """Snapshot immutabile da un documento in ingresso (senza passare dal DB).

    I gruppi senza id ricevono la loro posizione come identificativo.
    """
    gruppi = []
    for index, gruppo in enumerate(payload.gruppi):
        voci = [
            VoceSnapshot(
                codice=voce.codice,
                descrizione=voce.descrizione,
                unita_misura=voce.unita_misura,
                quantita=voce.quantita,
                prezzo_unitario=voce.prezzo_unitario,
                incidenza_manodopera=voce.incidenza_manodopera,
                varianti=[
                    VarianteSnapshot(
                        numero=variante.numero,
                        tipo=variante.tipo,
                        quantita=variante.quantita,
                        data=variante.data,
                        note=variante.note,
                    )
                    for variante in voce.varianti
                ],
            )
            for voce in gruppo.voci
        ]
        gruppi.append(
            GruppoSnapshot(
                nome=gruppo.nome,
                voci=voci,
                is_security_cost=gruppo.is_security_cost,
                accounting_type=gruppo.accounting_type,
                id=gruppo.id if gruppo.id is not None else index,
            )
        )
    return ComputoSnapshot(file_nome=payload.file_nome, gruppi=gruppi, id=computo_id)


class ComputiService:

    @staticmethod
    def list_computi(session: Session) -> Sequence[Computo]:
        statement = select(Computo).order_by(Computo.created_at, Computo.id)
        return session.exec(statement).all()

    @staticmethod
    def get_computo(session: Session, computo_id: int) -> Computo | None:
        return session.get(Computo, computo_id)

    @staticmethod
    def import_documento(session: Session, payload: ComputoCreate) -> Computo:
        # Valida le varianti prima di scrivere qualsiasi riga
        build_snapshot(payload)

        computo = Computo(
            nome=payload.nome or payload.file_nome,
            file_nome=payload.file_nome,
            note=payload.note,
        )
        session.add(computo)
        session.flush()

        for gruppo_ordine, gruppo_in in enumerate(payload.gruppi):
            gruppo = GruppoLavorazioni(
                computo_id=computo.id,
                nome=gruppo_in.nome,
                ordine=gruppo_ordine,
                is_security_cost=gruppo_in.is_security_cost,
                accounting_type=gruppo_in.accounting_type,
            )
            session.add(gruppo)
            session.flush()
            for voce_ordine, voce_in in enumerate(gruppo_in.voci):
                voce = VoceComputo(
                    gruppo_id=gruppo.id,
                    ordine=voce_ordine,
                    codice=voce_in.codice,
                    descrizione=voce_in.descrizione,
                    unita_misura=voce_in.unita_misura,
                    quantita=voce_in.quantita,
                    prezzo_unitario=voce_in.prezzo_unitario,
                    incidenza_manodopera=voce_in.incidenza_manodopera,
                )
                session.add(voce)
                session.flush()
                for variante_ordine, variante_in in enumerate(voce_in.varianti):
                    session.add(
                        VarianteVoce(
                            voce_id=voce.id,
                            ordine=variante_ordine,
                            numero=variante_in.numero,
                            tipo=variante_in.tipo,
                            quantita=variante_in.quantita,
                            data=variante_in.data,
                            note=variante_in.note,
                        )
                    )

        session.commit()
        session.refresh(computo)
        logger.info(
            "Importato computo %s (%d gruppi)", computo.file_nome, len(payload.gruppi)
        )
        return computo

    @staticmethod
    def delete_computo(session: Session, computo_id: int) -> ComputoRead | None:
        computo = session.get(Computo, computo_id)
        if not computo:
            return None
        deleted = ComputoRead.model_validate(computo)
        gruppi = session.exec(
            select(GruppoLavorazioni).where(GruppoLavorazioni.computo_id == computo_id)
        ).all()
        gruppo_ids = [g.id for g in gruppi]
        voci = (
            session.exec(select(VoceComputo).where(VoceComputo.gruppo_id.in_(gruppo_ids))).all()
            if gruppo_ids
            else []
        )
        voce_ids = [v.id for v in voci]
        varianti = (
            session.exec(select(VarianteVoce).where(VarianteVoce.voce_id.in_(voce_ids))).all()
            if voce_ids
            else []
        )
        for row in [*varianti, *voci, *gruppi]:
            session.delete(row)
        session.delete(computo)
        session.commit()
        return deleted

    @staticmethod
    def load_snapshot(session: Session, computo_id: int) -> ComputoSnapshot:
        computo = session.get(Computo, computo_id)
        if not computo:
            raise ValueError("Computo non trovato")

        gruppi = session.exec(
            select(GruppoLavorazioni)
            .where(GruppoLavorazioni.computo_id == computo_id)
            .order_by(GruppoLavorazioni.ordine, GruppoLavorazioni.id)
        ).all()
        gruppo_ids = [g.id for g in gruppi]

        voci_by_gruppo: dict[int, list[VoceComputo]] = defaultdict(list)
        if gruppo_ids:
            voci_rows = session.exec(
                select(VoceComputo)
                .where(VoceComputo.gruppo_id.in_(gruppo_ids))
                .order_by(VoceComputo.ordine, VoceComputo.id)
            ).all()
            for voce in voci_rows:
                voci_by_gruppo[voce.gruppo_id].append(voce)

        voce_ids = [v.id for voci in voci_by_gruppo.values() for v in voci]
        varianti_by_voce: dict[int, list[VarianteSnapshot]] = defaultdict(list)
        if voce_ids:
            varianti_rows = session.exec(
                select(VarianteVoce)
                .where(VarianteVoce.voce_id.in_(voce_ids))
                .order_by(VarianteVoce.ordine, VarianteVoce.id)
            ).all()
            for variante in varianti_rows:
                varianti_by_voce[variante.voce_id].append(
                    VarianteSnapshot(
                        numero=variante.numero,
                        tipo=variante.tipo,
                        quantita=variante.quantita,
                        data=variante.data,
                        note=variante.note,
                    )
                )

        return ComputoSnapshot(
            id=computo.id,
            file_nome=computo.file_nome or computo.nome,
            gruppi=[
                GruppoSnapshot(
                    id=gruppo.id,
                    nome=gruppo.nome,
                    is_security_cost=gruppo.is_security_cost,
                    accounting_type=gruppo.accounting_type,
                    voci=[
                        VoceSnapshot(
                            id=voce.id,
                            codice=voce.codice,
                            descrizione=voce.descrizione,
                            unita_misura=voce.unita_misura,
                            quantita=voce.quantita,
                            prezzo_unitario=voce.prezzo_unitario,
                            incidenza_manodopera=voce.incidenza_manodopera,
                            varianti=varianti_by_voce.get(voce.id, []),
                        )
                        for voce in voci_by_gruppo.get(gruppo.id, [])
                    ],
                )
                for gruppo in gruppi
            ],
        )

    @staticmethod
    def load_snapshots(session: Session, computo_ids: Sequence[int] | None = None) -> list[ComputoSnapshot]:
        if not computo_ids:
            computo_ids = [c.id for c in ComputiService.list_computi(session)]
        return [ComputiService.load_snapshot(session, computo_id) for computo_id in computo_ids]

    @staticmethod
    def add_variante(session: Session, voce_id: int, payload: VarianteCreate) -> VarianteVoce:
        """Registra una nuova variante in coda: le varianti esistenti non si modificano."""
        voce = session.get(VoceComputo, voce_id)
        if not voce:
            raise ValueError("Voce non trovata")
        VarianteSnapshot(numero=payload.numero, tipo=payload.tipo, quantita=payload.quantita)

        esistenti = session.exec(
            select(VarianteVoce).where(VarianteVoce.voce_id == voce_id)
        ).all()
        variante = VarianteVoce(
            voce_id=voce_id,
            ordine=max((v.ordine for v in esistenti), default=-1) + 1,
            numero=payload.numero,
            tipo=payload.tipo,
            quantita=payload.quantita,
            data=payload.data,
            note=payload.note,
        )
        session.add(variante)
        ComputiService._touch_computo(session, voce.gruppo_id)
        session.commit()
        session.refresh(variante)
        return variante

    @staticmethod
    def toggle_group_security(session: Session, gruppo_id: int) -> RiepilogoComputo:
        """Inverte il flag oneri sicurezza e ricalcola l'intero computo dal DB."""
        gruppo = session.get(GruppoLavorazioni, gruppo_id)
        if not gruppo:
            raise GruppoNotFound(gruppo_id)
        gruppo.is_security_cost = not gruppo.is_security_cost
        session.add(gruppo)
        ComputiService._touch_computo(session, gruppo.id)
        session.commit()
        logger.info(
            "Gruppo %s: oneri sicurezza %s",
            gruppo.nome,
            "attivati" if gruppo.is_security_cost else "disattivati",
        )
        return aggregate(ComputiService.load_snapshot(session, gruppo.computo_id))

    @staticmethod
    def _touch_computo(session: Session, gruppo_id: int) -> None:
        gruppo = session.get(GruppoLavorazioni, gruppo_id)
        if not gruppo:
            return
        computo = session.get(Computo, gruppo.computo_id)
        if computo:
            computo.updated_at = datetime.utcnow()
            session.add(computo)
