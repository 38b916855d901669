from __future__ import annotations

import asyncio
import unittest

from perizie.services import (
    PERPETUAL_LICENSE_DAYS,
    CollaboratorError,
    analizza_rischi,
    genera_licenza,
)
from perizie.services.collaboratori import is_perpetual
from perizie.services.varianti import ComputoSnapshot

COMPUTI = [ComputoSnapshot(file_nome="computo.xlsx")]


def _analyzer(result=None, error: Exception | None = None):
    async def analyzer(computi):
        if error is not None:
            raise error
        return result

    return analyzer


class AnalizzaRischiTestCase(unittest.TestCase):
    def test_not_performed_differs_from_no_risks(self) -> None:
        self.assertIsNone(asyncio.run(analizza_rischi(_analyzer(None), COMPUTI)))
        self.assertEqual(asyncio.run(analizza_rischi(_analyzer([]), COMPUTI)), [])

    def test_records_are_validated(self) -> None:
        rischi = asyncio.run(
            analizza_rischi(
                _analyzer(
                    [
                        {
                            "risk": "Aumento quantità calcestruzzo",
                            "impact": "Alto",
                            "likelihood": "Medio",
                            "suggestion": "Verificare le misure in cantiere",
                        }
                    ]
                ),
                COMPUTI,
            )
        )
        self.assertEqual(len(rischi), 1)
        self.assertEqual(rischi[0].impact, "Alto")

    def test_invalid_level_is_rejected(self) -> None:
        with self.assertRaises(CollaboratorError):
            asyncio.run(
                analizza_rischi(
                    _analyzer([{"risk": "x", "impact": "Critico", "likelihood": "Basso", "suggestion": ""}]),
                    COMPUTI,
                )
            )

    def test_analyzer_failure_is_isolated(self) -> None:
        with self.assertRaises(CollaboratorError):
            asyncio.run(analizza_rischi(_analyzer(error=ConnectionError("offline")), COMPUTI))


class GeneraLicenzaTestCase(unittest.TestCase):
    def test_key_is_returned(self) -> None:
        calls = []

        def generator(identity, days):
            calls.append((identity, days))
            return "KEY-123"

        self.assertEqual(genera_licenza(generator, " studio@example.it ", 365), "KEY-123")
        self.assertEqual(calls, [("studio@example.it", 365)])

    def test_perpetual_sentinel(self) -> None:
        self.assertEqual(PERPETUAL_LICENSE_DAYS, 9999)
        self.assertTrue(is_perpetual(9999))
        self.assertFalse(is_perpetual(365))

    def test_invalid_arguments(self) -> None:
        generator = lambda identity, days: "KEY"  # noqa: E731
        with self.assertRaises(ValueError):
            genera_licenza(generator, "studio", -1)
        with self.assertRaises(ValueError):
            genera_licenza(generator, "studio", "30")
        with self.assertRaises(ValueError):
            genera_licenza(generator, "  ", 30)

    def test_generator_failure(self) -> None:
        def generator(identity, days):
            raise RuntimeError("firma non disponibile")

        with self.assertRaises(CollaboratorError):
            genera_licenza(generator, "studio", 30)


if __name__ == "__main__":
    unittest.main()
