from sqlalchemy import Column, Float, Integer, ForeignKey, String, CheckConstraint
from sqlalchemy.orm import relationship
from .base import BaseModel


class Evaluacion(BaseModel):
    __tablename__ = "evaluaciones"
    __table_args__ = (CheckConstraint("corte IN (1, 2, 3)", name="ck_evaluacion_corte"),)

    id = Column(String(50), primary_key=True)
    materia_id = Column(String(50), ForeignKey("materias.id"), nullable=False, index=True)
    corte = Column(Integer, nullable=False)
    nombre = Column(String(200), nullable=False)
    porcentaje = Column(Float, nullable=False)

    # Relationships
    materia = relationship("Materia", back_populates="evaluaciones")
    notas = relationship("Nota", back_populates="evaluacion")
