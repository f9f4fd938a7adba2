from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from .base import BaseModel


class Estudiante(BaseModel):
    __tablename__ = "estudiantes"

    # Cédula
    id = Column(String(30), primary_key=True)
    nombre = Column(String(200), nullable=False)
    correo = Column(String(200), nullable=False, default="")

    # Relationships
    inscripciones = relationship("Inscripcion", back_populates="estudiante")
    notas = relationship("Nota", back_populates="estudiante")
