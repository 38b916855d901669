from __future__ import annotations

import unittest

from perizie.domain.computi.models import TipoVariazione
from perizie.services.varianti import (
    ComputoSnapshot,
    GruppoNotFound,
    GruppoSnapshot,
    InvalidVariationData,
    VarianteSnapshot,
    toggle_security,
)


class VarianteSnapshotTestCase(unittest.TestCase):
    def test_sign_comes_from_type(self) -> None:
        aumento = VarianteSnapshot(numero="1", tipo="increase", quantita=4.0)
        diminuzione = VarianteSnapshot(numero="1", tipo=TipoVariazione.diminuzione, quantita=4.0)
        self.assertIs(aumento.tipo, TipoVariazione.aumento)
        self.assertEqual(aumento.quantita_con_segno, 4.0)
        self.assertEqual(diminuzione.quantita_con_segno, -4.0)

    def test_rejects_negative_quantity(self) -> None:
        with self.assertRaises(InvalidVariationData):
            VarianteSnapshot(numero="1", tipo="increase", quantita=-1.0)

    def test_rejects_non_finite_quantity(self) -> None:
        with self.assertRaises(InvalidVariationData):
            VarianteSnapshot(numero="1", tipo="decrease", quantita=float("nan"))

    def test_rejects_unknown_type(self) -> None:
        with self.assertRaises(InvalidVariationData):
            VarianteSnapshot(numero="1", tipo="rettifica", quantita=1.0)

    def test_rejects_missing_round(self) -> None:
        with self.assertRaises(InvalidVariationData):
            VarianteSnapshot(numero="  ", tipo="increase", quantita=1.0)

    def test_numeric_round_is_stored_as_text(self) -> None:
        variante = VarianteSnapshot(numero=3, tipo="increase", quantita=0.0)
        self.assertEqual(variante.numero, "3")


class ToggleSecurityTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.computo = ComputoSnapshot(
            file_nome="computo.xlsx",
            gruppi=[
                GruppoSnapshot(nome="Opere strutturali", id="g1"),
                GruppoSnapshot(nome="Oneri sicurezza", id="g2"),
            ],
        )

    def test_returns_new_snapshot(self) -> None:
        toggled = toggle_security(self.computo, "g2")
        self.assertTrue(toggled.gruppi[1].is_security_cost)
        self.assertFalse(toggled.gruppi[0].is_security_cost)
        self.assertFalse(self.computo.gruppi[1].is_security_cost)

    def test_toggle_twice_restores_flag(self) -> None:
        toggled = toggle_security(toggle_security(self.computo, "g1"), "g1")
        self.assertEqual(toggled, self.computo)

    def test_unknown_group(self) -> None:
        with self.assertRaises(GruppoNotFound):
            toggle_security(self.computo, "g9")


if __name__ == "__main__":
    unittest.main()
