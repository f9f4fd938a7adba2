from sqlalchemy import Column, String, ForeignKey
from sqlalchemy.orm import relationship
from .base import BaseModel


class Inscripcion(BaseModel):
    __tablename__ = "inscripciones"

    estudiante_id = Column(String(30), ForeignKey("estudiantes.id"), primary_key=True)
    materia_id = Column(String(50), ForeignKey("materias.id"), primary_key=True)

    # Relationships
    estudiante = relationship("Estudiante", back_populates="inscripciones")
    materia = relationship("Materia", back_populates="inscripciones")
