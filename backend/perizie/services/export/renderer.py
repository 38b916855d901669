"""Rendering raster dei report (collaboratore di cattura per l'export PDF)."""
from __future__ import annotations

from typing import Protocol, Sequence

from PIL import Image, ImageDraw, ImageFont

from perizie.services.varianti.projection import (
    PLACEHOLDER_ASSENTE,
    ReportComputo,
    RigaReport,
    format_cell,
    format_labor_rate,
    format_number,
)


class SurfaceCapture(Protocol):
    def capture_surface(self) -> Image.Image:
        ...


BASE_COLUMNS: tuple[tuple[str, int], ...] = (
    ("N.", 40),
    ("Art.", 110),
    ("Descrizione", 320),
    ("U.M.", 60),
    ("P. Unit.", 100),
    ("Q.tà Orig.", 100),
)
TAIL_COLUMNS: tuple[tuple[str, int], ...] = (
    ("Nuova Q.tà", 100),
    ("Nuovo Totale", 130),
    ("Inc. M.O. %", 90),
    ("Costo M.O.", 110),
)
ROUND_COLUMN_WIDTH = 130
ROW_HEIGHT = 22
TITLE_HEIGHT = 40
GROUP_HEIGHT = 30
DOCUMENT_GAP = 30
PADDING = 6
DESCRIPTION_CHARS = 48

WHITE = (255, 255, 255)
BLACK = (17, 24, 39)
GREY = (229, 231, 235)
SECURITY_GREEN = (220, 252, 231)
INCREASE = (22, 163, 74)
DECREASE = (220, 38, 38)


def _truncate(text: str | None, limit: int) -> str:
    text = (text or "").strip()
    if len(text) <= limit:
        return text
    return text[: limit - 1] + "…"


def _currency(value: float) -> str:
    return f"{format_number(value)} €"


class ReportRasterRenderer:
    """Disegna una o più tabelle di report su un'unica superficie bianca.

    ``scale`` moltiplica tutte le dimensioni come il fattore di cattura della
    vista originale (2 = doppia risoluzione).
    """

    def __init__(self, reports: Sequence[ReportComputo], scale: float = 2.0) -> None:
        if scale <= 0:
            raise ValueError("scale deve essere positivo")
        self.reports = list(reports)
        self.scale = scale
        self.font = ImageFont.load_default()

    def _columns(self, report: ReportComputo) -> list[tuple[str, int]]:
        rounds = [(header, ROUND_COLUMN_WIDTH) for header in report.intestazioni]
        return [*BASE_COLUMNS, *rounds, *TAIL_COLUMNS]

    def _report_height(self, report: ReportComputo) -> int:
        height = TITLE_HEIGHT
        for gruppo in report.gruppi:
            height += GROUP_HEIGHT + ROW_HEIGHT * (len(gruppo.righe) + 1)
        return height + DOCUMENT_GAP

    def surface_size(self) -> tuple[int, int]:
        width = max(
            (sum(w for _, w in self._columns(report)) for report in self.reports),
            default=sum(w for _, w in (*BASE_COLUMNS, *TAIL_COLUMNS)),
        )
        height = sum(self._report_height(report) for report in self.reports) or ROW_HEIGHT
        return int(width * self.scale), int(height * self.scale)

    def capture_surface(self) -> Image.Image:
        width, height = self.surface_size()
        image = Image.new("RGB", (width, height), WHITE)
        draw = ImageDraw.Draw(image)
        y = 0
        for report in self.reports:
            y = self._draw_report(draw, report, y)
        return image

    def _s(self, value: float) -> int:
        return int(round(value * self.scale))

    def _text(self, draw: ImageDraw.ImageDraw, x: float, y: float, text: str, fill=BLACK) -> None:
        draw.text((self._s(x + PADDING), self._s(y + PADDING)), text, fill=fill, font=self.font)

    def _draw_report(self, draw: ImageDraw.ImageDraw, report: ReportComputo, y: int) -> int:
        columns = self._columns(report)
        table_width = sum(w for _, w in columns)
        riepilogo = report.riepilogo
        self._text(draw, 0, y, f"File: {riepilogo.computo.file_nome}")
        self._text(
            draw,
            table_width - 320,
            y,
            f"Nuovo Importo Totale: {_currency(riepilogo.totale)}",
        )
        y += TITLE_HEIGHT

        for gruppo in report.gruppi:
            info = gruppo.riepilogo
            fill = SECURITY_GREEN if info.gruppo.is_security_cost else GREY
            draw.rectangle(
                [0, self._s(y), self._s(table_width), self._s(y + GROUP_HEIGHT)], fill=fill
            )
            label = info.gruppo.nome
            if info.gruppo.is_security_cost:
                label = f"{label}  [SICUREZZA]"
            self._text(draw, 0, y, label)
            self._text(draw, table_width - 200, y, _currency(info.totale))
            y += GROUP_HEIGHT

            x = 0
            for header, width in columns:
                self._text(draw, x, y, header)
                x += width
            y += ROW_HEIGHT

            for riga in gruppo.righe:
                self._draw_row(draw, columns, riga, y)
                y += ROW_HEIGHT
        return y + DOCUMENT_GAP

    def _draw_row(
        self,
        draw: ImageDraw.ImageDraw,
        columns: list[tuple[str, int]],
        riga: RigaReport,
        y: int,
    ) -> None:
        voce = riga.voce
        esito = riga.riepilogo.esito
        values: list[tuple[str, tuple[int, int, int]]] = [
            (str(riga.progressivo), BLACK),
            (voce.codice, BLACK),
            (_truncate(voce.descrizione, DESCRIPTION_CHARS), BLACK),
            (voce.unita_misura or "", BLACK),
            (_value_or_dash(voce.prezzo_unitario, _currency), BLACK),
            (_value_or_dash(voce.quantita, format_number), BLACK),
        ]
        for cella in riga.celle:
            color = BLACK
            if cella is not None:
                color = INCREASE if cella.netto >= 0 else DECREASE
            values.append((format_cell(cella), color))
        if esito is None:
            values.extend([(PLACEHOLDER_ASSENTE, DECREASE)] * 2)
            values.append((format_labor_rate(voce.incidenza_manodopera), BLACK))
            values.append((PLACEHOLDER_ASSENTE, DECREASE))
        else:
            values.append((format_number(esito.nuova_quantita), BLACK))
            values.append((_currency(esito.nuovo_importo), BLACK))
            values.append((format_labor_rate(voce.incidenza_manodopera), BLACK))
            values.append((_currency(esito.costo_manodopera), BLACK))

        x = 0
        for (_, width), (text, color) in zip(columns, values):
            self._text(draw, x, y, text, fill=color)
            x += width
        draw.line(
            [0, self._s(y + ROW_HEIGHT), self._s(x), self._s(y + ROW_HEIGHT)], fill=GREY
        )


def _value_or_dash(value: object, formatter) -> str:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return PLACEHOLDER_ASSENTE
    return formatter(value)
