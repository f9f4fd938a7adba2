from typing import List
from sqlalchemy.orm import Session

from cuaderno.crud.base import CRUDBase
from cuaderno.models.estudiante import Estudiante
from cuaderno.models.inscripcion import Inscripcion
from cuaderno.schemas.estudiante import EstudianteCreate, EstudianteUpdate


class CRUDEstudiante(CRUDBase[Estudiante, EstudianteCreate, EstudianteUpdate]):
    def get_by_materia(self, db: Session, materia_id: str) -> List[Estudiante]:
        return (
            db.query(Estudiante)
            .join(Inscripcion, Inscripcion.estudiante_id == Estudiante.id)
            .filter(Inscripcion.materia_id == materia_id)
            .order_by(Estudiante.nombre)
            .all()
        )

    def guardar(self, db: Session, *, obj_in: EstudianteCreate) -> Estudiante:
        """Crear o reemplazar nombre/correo sin hacer commit"""
        db_obj = db.get(Estudiante, obj_in.id)
        if db_obj is None:
            db_obj = Estudiante(id=obj_in.id, nombre=obj_in.nombre, correo=obj_in.correo)
            db.add(db_obj)
        else:
            db_obj.nombre = obj_in.nombre
            db_obj.correo = obj_in.correo
        return db_obj


estudiante = CRUDEstudiante(Estudiante)
