from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Dict, List, Optional

from cuaderno.core.calificaciones import CORTES


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="CUADERNO_", case_sensitive=False
    )

    # Database
    database_url: str = "sqlite:///./cuaderno.db"

    # Environment
    debug: bool = False
    log_level: str = "INFO"

    # CORS
    allowed_origins: List[str] = ["*"]

    # Calificaciones
    nota_aprobatoria: float = 10.0
    topes_corte: Dict[int, float] = {1: 30.0, 2: 30.0, 3: 40.0}

    # Migración desde el almacenamiento anterior (JSON)
    legacy_data_path: Optional[str] = None

    @field_validator("topes_corte")
    @classmethod
    def topes_completos(cls, topes: Dict[int, float]) -> Dict[int, float]:
        if set(topes) != set(CORTES):
            raise ValueError("topes_corte debe definir los cortes 1, 2 y 3")
        if any(tope <= 0 for tope in topes.values()):
            raise ValueError("Cada tope de corte debe ser mayor que 0")
        return topes

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @property
    def is_memory_db(self) -> bool:
        """SQLite en memoria necesita una única conexión compartida"""
        return self.database_url in ("sqlite://", "sqlite:///:memory:")
