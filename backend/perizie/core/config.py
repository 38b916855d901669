from pathlib import Path
from typing import Literal
import sys

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_storage_root() -> Path:
    """Return the storage folder depending on the runtime (source vs PyInstaller)."""
    if getattr(sys, "frozen", False):
        # When bundled with PyInstaller, keep data next to the executable.
        return Path(sys.executable).resolve().parent / "storage"
    return Path(__file__).resolve().parent.parent.parent / "storage"


class Settings(BaseSettings):
    """Configurazione centrale dell'applicazione."""

    app_name: str = "Perizie Varianti Backend"
    api_v1_prefix: str = "/api/v1"
    debug: bool = False

    # Storage paths / database
    storage_root: Path = _default_storage_root()
    database_path: Path = Path("database.sqlite")
    database_url: str | None = Field(
        default=None,
        description="SQLAlchemy URL (fallback SQLite nello storage locale).",
    )
    db_pool_size: int = Field(default=10, description="Pool di connessioni DB (Postgres)")
    db_max_overflow: int = Field(
        default=20, description="Connessioni addizionali consentite oltre il pool"
    )

    cors_origins: list[str] | tuple[str, ...] | str | None = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ]
    )
    cors_allow_credentials: bool = True

    # Report varianti
    round_ordering: Literal["numeric", "lexicographic"] = Field(
        default="numeric",
        description=(
            "Ordinamento colonne varianti: 'numeric' confronta numericamente gli "
            "identificativi numerici, 'lexicographic' ordina come stringhe."
        ),
    )
    round_header_template: str = Field(
        default="Variant no. {numero}",
        description="Intestazione per identificativi di variante puramente numerici",
    )

    # Export PDF
    export_file_prefix: str = "Computo_Metrico_Aggiornato"
    export_page_size_mm: tuple[float, float] = Field(
        default=(210.0, 297.0), description="Formato pagina (larghezza, altezza) in mm"
    )
    export_landscape: bool = True
    export_capture_scale: float = Field(
        default=2.0, gt=0, description="Fattore di scala del raster catturato"
    )
    export_timeout_seconds: float = Field(
        default=120.0,
        gt=0,
        description="Tempo massimo per cattura + impaginazione prima di abortire l'export",
    )

    # Logging e observability
    structured_logging: bool = Field(
        default=True,
        description="Emette log JSON per integrazione con SIEM/ELK",
    )
    log_level: str = Field(default="INFO", description="Livello di log applicativo")

    model_config = SettingsConfigDict(
        env_prefix="PERIZIE_", env_file=".env", extra="ignore"
    )

    @property
    def effective_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        return f"sqlite:///{self.storage_root / self.database_path}"

    @property
    def export_dir(self) -> Path:
        return self.storage_root / "export"

    @property
    def page_geometry_mm(self) -> tuple[float, float]:
        """Larghezza e altezza effettive della pagina, ruotate se landscape."""
        width, height = self.export_page_size_mm
        if self.export_landscape:
            return max(width, height), min(width, height)
        return min(width, height), max(width, height)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_cors_origins(
        cls,
        value: str | list[str] | tuple[str, ...] | None,
    ) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            if not value.strip():
                return []
            return [item.strip() for item in value.split(",") if item.strip()]
        return list(value)


settings = Settings()

# Assicura che la cartella storage esista (per database + export)
settings.storage_root.mkdir(parents=True, exist_ok=True)
