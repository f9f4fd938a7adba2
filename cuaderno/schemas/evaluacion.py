from pydantic import BaseModel, ConfigDict
from typing import Any, Optional
from datetime import datetime


class EvaluacionBase(BaseModel):
    nombre: str
    porcentaje: float
    corte: int


# La validación de campos y topes la hace cuaderno.core.validacion para
# devolver los mismos mensajes en alta y edición.
class EvaluacionCreate(BaseModel):
    nombre: Any = None
    porcentaje: Any = None
    corte: Any = 1


class EvaluacionUpdate(BaseModel):
    """Edición parcial: los campos omitidos conservan el valor guardado"""

    nombre: Any = None
    porcentaje: Any = None
    corte: Any = None


class Evaluacion(EvaluacionBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    materia_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
