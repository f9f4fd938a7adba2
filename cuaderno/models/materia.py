from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from .base import BaseModel

PERIODO_POR_DEFECTO = "Sin Período"


class Materia(BaseModel):
    __tablename__ = "materias"

    id = Column(String(50), primary_key=True)
    nombre = Column(String(200), nullable=False)
    periodo = Column(String(100), nullable=False, default=PERIODO_POR_DEFECTO)

    # Relationships
    evaluaciones = relationship("Evaluacion", back_populates="materia")
    inscripciones = relationship("Inscripcion", back_populates="materia")
