from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PageSlice:
    """Una pagina dell'export: l'immagine intera traslata verso l'alto di ``-offset``."""
    index: int
    offset: float
    page_width: float
    page_height: float
    image_height: float


def scaled_height(surface_height: float, surface_width: float, page_width: float) -> float:
    """Altezza della superficie scalata alla larghezza pagina (aspect ratio invariato)."""
    return surface_height * page_width / surface_width


def paginate(
    surface_height: float,
    surface_width: float,
    page_width: float,
    page_height: float,
) -> list[PageSlice]:
    """Suddivide la superficie renderizzata in pagine di altezza fissa.

    La prima pagina ha offset 0; ogni pagina successiva sposta l'immagine di
    ``page_height`` verso l'alto finché resta contenuto non mostrato. Le
    righe a cavallo del bordo vengono solo tagliate visivamente, mai
    duplicate: il numero di pagine è ``ceil(altezza_scalata / page_height)``
    (almeno una).
    """
    for name, value in (
        ("surface_height", surface_height),
        ("surface_width", surface_width),
        ("page_width", page_width),
        ("page_height", page_height),
    ):
        if value <= 0:
            raise ValueError(f"{name} deve essere positivo (ricevuto {value})")

    image_height = scaled_height(surface_height, surface_width, page_width)

    slices = []
    offset = 0.0
    height_left = image_height
    while True:
        slices.append(
            PageSlice(
                index=len(slices),
                offset=offset,
                page_width=page_width,
                page_height=page_height,
                image_height=image_height,
            )
        )
        height_left -= page_height
        if height_left <= 0:
            break
        offset -= page_height
    return slices
