from __future__ import annotations

import unittest

from perizie.services.varianti import InvalidItemData, VarianteSnapshot, VoceSnapshot, reconcile


def _voce(
    *,
    quantita=100.0,
    prezzo=10.0,
    incidenza=None,
    varianti=(),
    codice="01.A01.001",
) -> VoceSnapshot:
    return VoceSnapshot(
        codice=codice,
        descrizione="Calcestruzzo per strutture di fondazione",
        unita_misura="m³",
        quantita=quantita,
        prezzo_unitario=prezzo,
        incidenza_manodopera=incidenza,
        varianti=varianti,
    )


class ReconcileTestCase(unittest.TestCase):
    def test_structural_works_scenario(self) -> None:
        voce = _voce(
            incidenza=20.0,
            varianti=(
                VarianteSnapshot(numero="1", tipo="increase", quantita=15.0),
                VarianteSnapshot(numero="1", tipo="decrease", quantita=5.0),
            ),
        )
        esito = reconcile(voce)
        self.assertEqual(esito.variazione_netta, 10.0)
        self.assertEqual(esito.nuova_quantita, 110.0)
        self.assertEqual(esito.nuovo_importo, 1100.0)
        self.assertAlmostEqual(esito.costo_manodopera, 220.0)

    def test_no_variations_keeps_base_values(self) -> None:
        esito = reconcile(_voce(quantita=37.25, prezzo=14.8))
        self.assertEqual(esito.variazione_netta, 0.0)
        self.assertEqual(esito.nuova_quantita, 37.25)
        self.assertEqual(esito.nuovo_importo, 37.25 * 14.8)

    def test_new_total_is_not_rounded(self) -> None:
        voce = _voce(
            quantita=3.333,
            prezzo=1.17,
            varianti=(VarianteSnapshot(numero="2", tipo="increase", quantita=0.111),),
        )
        esito = reconcile(voce)
        self.assertEqual(esito.nuovo_importo, esito.nuova_quantita * 1.17)

    def test_negative_new_quantity_is_not_clamped(self) -> None:
        voce = _voce(
            quantita=10.0,
            varianti=(VarianteSnapshot(numero="Perizia 1", tipo="decrease", quantita=25.0),),
        )
        esito = reconcile(voce)
        self.assertEqual(esito.nuova_quantita, -15.0)
        self.assertEqual(esito.nuovo_importo, -150.0)

    def test_labor_cost_is_zero_without_rate(self) -> None:
        self.assertEqual(reconcile(_voce()).costo_manodopera, 0.0)

    def test_zero_unit_price_is_valid(self) -> None:
        esito = reconcile(_voce(prezzo=0.0, incidenza=3.48))
        self.assertEqual(esito.nuovo_importo, 0.0)
        self.assertEqual(esito.costo_manodopera, 0.0)

    def test_labor_rate_bounds_are_inclusive(self) -> None:
        self.assertEqual(reconcile(_voce(incidenza=0.0)).costo_manodopera, 0.0)
        self.assertEqual(reconcile(_voce(incidenza=100.0)).costo_manodopera, 1000.0)

    def test_invalid_numeric_fields_raise(self) -> None:
        for campo, voce in (
            ("prezzo_unitario", _voce(prezzo=float("nan"))),
            ("prezzo_unitario", _voce(prezzo=None)),
            ("quantita", _voce(quantita=float("inf"))),
            ("quantita", _voce(quantita="dieci")),
            ("incidenza_manodopera", _voce(incidenza=float("nan"))),
            ("incidenza_manodopera", _voce(incidenza=150.0)),
            ("incidenza_manodopera", _voce(incidenza=-1.0)),
        ):
            with self.subTest(campo=campo, voce=voce):
                with self.assertRaises(InvalidItemData) as ctx:
                    reconcile(voce)
                self.assertEqual(ctx.exception.campo, campo)
                self.assertEqual(ctx.exception.codice, "01.A01.001")


if __name__ == "__main__":
    unittest.main()
