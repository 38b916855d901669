from .pagination import PageSlice, paginate, scaled_height
from .pdf_exporter import (
    ExportFailed,
    ExportInProgress,
    PaginatedExporter,
    PdfPageBuilder,
    export_filename,
)
from .renderer import ReportRasterRenderer, SurfaceCapture

__all__ = [
    "ExportFailed",
    "ExportInProgress",
    "PageSlice",
    "PaginatedExporter",
    "PdfPageBuilder",
    "ReportRasterRenderer",
    "SurfaceCapture",
    "export_filename",
    "paginate",
    "scaled_height",
]
