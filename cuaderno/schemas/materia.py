from pydantic import BaseModel, ConfigDict, field_validator
from typing import List, Optional
from datetime import datetime

from cuaderno.models.materia import PERIODO_POR_DEFECTO


class MateriaBase(BaseModel):
    nombre: str
    periodo: str = PERIODO_POR_DEFECTO

    @field_validator("nombre")
    @classmethod
    def nombre_requerido(cls, valor: str) -> str:
        valor = valor.strip()
        if not valor:
            raise ValueError("El nombre de la materia es requerido.")
        return valor


class MateriaCreate(MateriaBase):
    pass


class MateriaUpdate(BaseModel):
    nombre: Optional[str] = None
    periodo: Optional[str] = None


class Materia(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    nombre: str
    periodo: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PorcentajeCorte(BaseModel):
    corte: int
    asignado: float
    tope: Optional[float] = None
    restante: Optional[float] = None


class ResumenPorcentajes(BaseModel):
    cortes: List[PorcentajeCorte]
    total: float
    restante: float


class MateriaDetalle(Materia):
    porcentajes: ResumenPorcentajes
    total_estudiantes: int
    total_evaluaciones: int
