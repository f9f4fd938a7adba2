from sqlalchemy import Column, Float, ForeignKey, String
from sqlalchemy.orm import relationship
from .base import BaseModel

from cuaderno.core.calificaciones import Puntaje, puntaje_desde_valor


class Nota(BaseModel):
    __tablename__ = "notas"

    estudiante_id = Column(String(30), ForeignKey("estudiantes.id"), primary_key=True)
    evaluacion_id = Column(String(50), ForeignKey("evaluaciones.id"), primary_key=True)
    # NULL = no calificado
    valor = Column(Float, nullable=True)

    # Relationships
    estudiante = relationship("Estudiante", back_populates="notas")
    evaluacion = relationship("Evaluacion", back_populates="notas")

    @property
    def puntaje(self) -> Puntaje:
        return puntaje_desde_valor(self.valor)
