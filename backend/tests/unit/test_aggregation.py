from __future__ import annotations

import unittest

from perizie.services.varianti import (
    ComputoSnapshot,
    GruppoNotFound,
    GruppoSnapshot,
    VarianteSnapshot,
    VoceSnapshot,
    aggregate,
    aggregate_all,
    aggregate_group,
    toggle_group_security,
)


def _voce(codice: str, quantita, prezzo, incidenza=None, varianti=()) -> VoceSnapshot:
    return VoceSnapshot(
        codice=codice,
        descrizione=f"Voce {codice}",
        unita_misura="m²",
        quantita=quantita,
        prezzo_unitario=prezzo,
        incidenza_manodopera=incidenza,
        varianti=varianti,
    )


def _computo() -> ComputoSnapshot:
    strutture = GruppoSnapshot(
        id=1,
        nome="Opere strutturali",
        voci=[
            _voce(
                "01.A01",
                100.0,
                10.0,
                incidenza=20.0,
                varianti=[
                    VarianteSnapshot(numero="1", tipo="increase", quantita=15.0),
                    VarianteSnapshot(numero="1", tipo="decrease", quantita=5.0),
                ],
            ),
            _voce("01.A02", 4.0, 25.0),
        ],
    )
    sicurezza = GruppoSnapshot(
        id=2,
        nome="Oneri della sicurezza",
        is_security_cost=True,
        voci=[_voce("99.S01", 1.0, 500.0)],
    )
    return ComputoSnapshot(file_nome="computo_strutture.xlsx", gruppi=[strutture, sicurezza], id=7)


class AggregateTestCase(unittest.TestCase):
    def test_document_total_includes_security_groups(self) -> None:
        riepilogo = aggregate(_computo())
        self.assertEqual([g.totale for g in riepilogo.gruppi], [1200.0, 500.0])
        self.assertEqual(riepilogo.totale, 1700.0)
        self.assertEqual(riepilogo.totale_sicurezza, 500.0)
        self.assertEqual(riepilogo.totale_lavori, 1200.0)
        self.assertAlmostEqual(riepilogo.costo_manodopera, 220.0)
        self.assertEqual(riepilogo.errori, ())

    def test_group_total_is_sum_of_item_totals(self) -> None:
        gruppo = aggregate_group(_computo().gruppi[0])
        self.assertEqual(
            gruppo.totale, sum(v.esito.nuovo_importo for v in gruppo.voci)
        )

    def test_empty_document_and_group_total_zero(self) -> None:
        vuoto = aggregate(ComputoSnapshot(file_nome="vuoto.xlsx"))
        self.assertEqual(vuoto.totale, 0.0)
        self.assertEqual(vuoto.gruppi, ())
        gruppo = aggregate_group(GruppoSnapshot(nome="Nessuna voce"))
        self.assertEqual(gruppo.totale, 0.0)
        self.assertEqual(gruppo.costo_manodopera, 0.0)

    def test_aggregation_is_idempotent(self) -> None:
        computo = _computo()
        self.assertEqual(aggregate(computo), aggregate(computo))

    def test_totals_are_additive_across_groups(self) -> None:
        computo = _computo()
        separati = sum(aggregate_group(g).totale for g in computo.gruppi)
        self.assertEqual(aggregate(computo).totale, separati)

    def test_invalid_items_are_excluded_and_reported(self) -> None:
        computo = ComputoSnapshot(
            file_nome="parziale.xlsx",
            gruppi=[
                GruppoSnapshot(
                    nome="Finiture",
                    voci=[_voce("02.B01", 10.0, 3.0), _voce("02.B02", 5.0, None)],
                )
            ],
        )
        riepilogo = aggregate(computo)
        self.assertEqual(riepilogo.totale, 30.0)
        self.assertEqual(len(riepilogo.errori), 1)
        self.assertEqual(riepilogo.errori[0].codice, "02.B02")
        voci = riepilogo.gruppi[0].voci
        self.assertTrue(voci[0].ok)
        self.assertFalse(voci[1].ok)

    def test_documents_are_aggregated_independently(self) -> None:
        primo = _computo()
        secondo = ComputoSnapshot(
            file_nome="impianti.xlsx",
            gruppi=[GruppoSnapshot(nome="Impianti", voci=[_voce("03.C01", 2.0, 50.0)])],
        )
        riepiloghi = aggregate_all([primo, secondo])
        self.assertEqual([r.totale for r in riepiloghi], [1700.0, 100.0])
        self.assertEqual(riepiloghi[0], aggregate(primo))


class ToggleGroupSecurityTestCase(unittest.TestCase):
    def test_recomputes_split_after_toggle(self) -> None:
        riepilogo = toggle_group_security(_computo(), 2)
        self.assertEqual(riepilogo.totale, 1700.0)
        self.assertEqual(riepilogo.totale_sicurezza, 0.0)
        self.assertEqual(riepilogo.totale_lavori, 1700.0)

    def test_unknown_group_raises(self) -> None:
        with self.assertRaises(GruppoNotFound):
            toggle_group_security(_computo(), 42)


if __name__ == "__main__":
    unittest.main()
