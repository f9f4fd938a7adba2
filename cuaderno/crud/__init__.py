from .estudiante import estudiante
from .evaluacion import evaluacion
from .nota import nota
from .materia import materia
from .inscripcion import inscripcion

__all__ = ["estudiante", "evaluacion", "nota", "materia", "inscripcion"]
