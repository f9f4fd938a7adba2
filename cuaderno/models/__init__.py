from .estudiante import Estudiante
from .materia import Materia
from .evaluacion import Evaluacion
from .nota import Nota
from .inscripcion import Inscripcion

__all__ = ["Estudiante", "Materia", "Evaluacion", "Nota", "Inscripcion"]
