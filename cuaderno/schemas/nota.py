from pydantic import BaseModel
from typing import Optional


class NotaUpdate(BaseModel):
    estudiante_id: str
    evaluacion_id: str
    # None borra la nota (queda sin calificar); NaN e Infinity se rechazan al guardar
    valor: Optional[float] = None


class Nota(BaseModel):
    estudiante_id: str
    evaluacion_id: str
    valor: Optional[float] = None
    calificado: bool
