"""Export PDF impaginato del computo metrico aggiornato."""
from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Sequence

from PIL import Image
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from perizie.core import settings

from .pagination import PageSlice, paginate
from .renderer import SurfaceCapture

logger = logging.getLogger(__name__)

USER_ERROR_MESSAGE = "Si è verificato un errore durante la generazione del PDF."


class ExportFailed(RuntimeError):
    """Cattura o codifica fallita: nessun file viene scritto."""

    user_message = USER_ERROR_MESSAGE


class ExportInProgress(RuntimeError):
    """Un export è già in corso per questo esportatore."""


def export_filename(today: date | None = None, prefix: str | None = None) -> str:
    today = today or datetime.utcnow().date()
    return f"{prefix or settings.export_file_prefix}_{today.isoformat()}.pdf"


class PdfPageBuilder:
    """Scrive una pagina per slice, con l'immagine intera traslata dell'offset."""

    def __init__(self, page_width_mm: float, page_height_mm: float) -> None:
        self.page_width_mm = page_width_mm
        self.page_height_mm = page_height_mm

    def build(self, image: Image.Image, slices: Sequence[PageSlice], target: Path) -> None:
        pdf = canvas.Canvas(
            str(target), pagesize=(self.page_width_mm * mm, self.page_height_mm * mm)
        )
        reader = ImageReader(image)
        for page in slices:
            # Origine ReportLab in basso a sinistra: il bordo superiore dell'immagine
            # sta a page_height - offset dal fondo pagina.
            bottom = page.page_height - page.image_height - page.offset
            pdf.drawImage(
                reader,
                0,
                bottom * mm,
                width=page.page_width * mm,
                height=page.image_height * mm,
            )
            pdf.showPage()
        pdf.save()


@dataclass
class _ExportJob:
    target: Path
    cancelled: threading.Event = field(default_factory=threading.Event)
    published: threading.Event = field(default_factory=threading.Event)


class PaginatedExporter:
    """Task di export a singolo volo: cattura, impagina, scrive in modo atomico.

    Il flag ``in_flight`` resta attivo finché il thread di lavoro non termina,
    anche quando il chiamante ha già ricevuto il timeout: una cattura lenta non
    può sovrapporsi alla successiva.
    """

    def __init__(
        self,
        page_size_mm: tuple[float, float] | None = None,
        timeout_seconds: float | None = None,
        file_prefix: str | None = None,
    ) -> None:
        width, height = page_size_mm or settings.page_geometry_mm
        self.builder = PdfPageBuilder(width, height)
        self.timeout_seconds = timeout_seconds or settings.export_timeout_seconds
        self.file_prefix = file_prefix or settings.export_file_prefix
        self._in_flight = False
        # Verifica annullamento + rename avvengono sotto questo lock
        self._publish_lock = threading.Lock()

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def export(
        self,
        capture: SurfaceCapture,
        destination_dir: Path,
        today: date | None = None,
    ) -> Path:
        if self._in_flight:
            raise ExportInProgress("Export PDF già in corso")
        self._in_flight = True
        job = _ExportJob(target=Path(destination_dir) / export_filename(today, self.file_prefix))
        loop = asyncio.get_running_loop()
        try:
            worker = loop.run_in_executor(None, self._export_sync, capture, job)
        except Exception:
            self._in_flight = False
            raise
        worker.add_done_callback(self._worker_done)

        try:
            done, _ = await asyncio.wait({worker}, timeout=self.timeout_seconds)
        except asyncio.CancelledError:
            self._cancel(job)
            raise

        if not done:
            if self._cancel(job):
                logger.warning("Export PDF completato oltre il timeout: %s", job.target.name)
                return job.target
            logger.error("Export PDF interrotto dopo %.0f secondi", self.timeout_seconds)
            raise ExportFailed("Timeout durante la generazione del PDF")

        exc = worker.exception()
        if exc is None:
            return worker.result()
        if isinstance(exc, ExportFailed):
            raise exc
        logger.error("Errore durante la generazione del PDF", exc_info=exc)
        raise ExportFailed(str(exc)) from exc

    def _cancel(self, job: _ExportJob) -> bool:
        """Annulla il job; True se il file era già stato pubblicato."""
        with self._publish_lock:
            if job.published.is_set():
                return True
            job.cancelled.set()
            return False

    def _worker_done(self, worker: asyncio.Future) -> None:
        self._in_flight = False
        if not worker.cancelled() and worker.exception() is not None:
            logger.debug("Thread di export terminato con errore: %s", worker.exception())

    def _export_sync(self, capture: SurfaceCapture, job: _ExportJob) -> Path:
        image = capture.capture_surface()
        if job.cancelled.is_set():
            raise ExportFailed("Export annullato")
        slices = paginate(
            image.height, image.width, self.builder.page_width_mm, self.builder.page_height_mm
        )

        target = job.target
        target.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            dir=target.parent, prefix=".export_", suffix=".pdf.part", delete=False
        ) as handle:
            temp_path = Path(handle.name)
        try:
            self.builder.build(image, slices, temp_path)
            with self._publish_lock:
                if job.cancelled.is_set():
                    raise ExportFailed("Export annullato")
                temp_path.replace(target)
                job.published.set()
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise

        logger.info("Export PDF completato: %s (%d pagine)", target.name, len(slices))
        return target
