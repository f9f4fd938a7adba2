import uuid
from typing import List, Optional
from sqlalchemy.orm import Session

from cuaderno.core.calificaciones import (
    EstudianteDatos,
    EvaluacionPeso,
    InstantaneaMateria,
    NotaRegistro,
)
from cuaderno.crud.base import CRUDBase
from cuaderno.crud.estudiante import estudiante as crud_estudiante
from cuaderno.crud.evaluacion import evaluacion as crud_evaluacion
from cuaderno.crud.nota import nota as crud_nota
from cuaderno.models.materia import Materia
from cuaderno.schemas.materia import MateriaCreate, MateriaUpdate


def nuevo_id_materia() -> str:
    return f"materia-{uuid.uuid4().hex[:12]}"


class CRUDMateria(CRUDBase[Materia, MateriaCreate, MateriaUpdate]):
    def create(self, db: Session, *, obj_in: MateriaCreate) -> Materia:
        db_obj = Materia(id=nuevo_id_materia(), nombre=obj_in.nombre, periodo=obj_in.periodo)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def get_all(self, db: Session) -> List[Materia]:
        return db.query(Materia).order_by(Materia.nombre).all()

    def obtener_instantanea(self, db: Session, materia_id: str) -> Optional[InstantaneaMateria]:
        """Leer estudiantes, evaluaciones y notas actuales de la materia"""
        materia = self.get(db, materia_id)
        if materia is None:
            return None

        estudiantes = crud_estudiante.get_by_materia(db, materia_id)
        evaluaciones = crud_evaluacion.get_by_materia(db, materia_id)
        notas = crud_nota.get_by_materia(db, materia_id)

        return InstantaneaMateria(
            materia_id=materia.id,
            nombre=materia.nombre,
            periodo=materia.periodo,
            estudiantes=tuple(
                EstudianteDatos(id=e.id, nombre=e.nombre, correo=e.correo or "")
                for e in estudiantes
            ),
            evaluaciones=tuple(
                EvaluacionPeso(
                    id=ev.id, corte=ev.corte, nombre=ev.nombre, porcentaje=ev.porcentaje
                )
                for ev in evaluaciones
            ),
            notas=tuple(
                NotaRegistro(
                    estudiante_id=n.estudiante_id,
                    evaluacion_id=n.evaluacion_id,
                    puntaje=n.puntaje,
                )
                for n in notas
            ),
        )


materia = CRUDMateria(Materia)
