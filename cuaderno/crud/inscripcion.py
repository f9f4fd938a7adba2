import logging
from typing import Iterable, List
from sqlalchemy.orm import Session

from cuaderno.core.exceptions import YaInscrito
from cuaderno.crud.estudiante import estudiante as crud_estudiante
from cuaderno.models.evaluacion import Evaluacion
from cuaderno.models.inscripcion import Inscripcion
from cuaderno.models.nota import Nota
from cuaderno.schemas.estudiante import EstudianteCreate

logger = logging.getLogger(__name__)


class CRUDInscripcion:
    def get_by_estudiante_materia(self, db: Session, estudiante_id: str, materia_id: str):
        return db.get(Inscripcion, (estudiante_id, materia_id))

    def _inscribir_sin_commit(
        self, db: Session, estudiante_id: str, materia_id: str, evaluacion_ids: List[str]
    ) -> bool:
        if self.get_by_estudiante_materia(db, estudiante_id, materia_id):
            return False
        db.add(Inscripcion(estudiante_id=estudiante_id, materia_id=materia_id))
        for evaluacion_id in evaluacion_ids:
            if db.get(Nota, (estudiante_id, evaluacion_id)) is None:
                db.add(Nota(estudiante_id=estudiante_id, evaluacion_id=evaluacion_id, valor=None))
        db.flush()
        return True

    def _evaluacion_ids(self, db: Session, materia_id: str) -> List[str]:
        return [
            ev_id
            for (ev_id,) in db.query(Evaluacion.id)
            .filter(Evaluacion.materia_id == materia_id)
            .all()
        ]

    def inscribir(self, db: Session, *, estudiante_in: EstudianteCreate, materia_id: str):
        """Inscribir un estudiante; falla si ya está inscrito en la materia"""
        if self.get_by_estudiante_materia(db, estudiante_in.id, materia_id):
            raise YaInscrito("Este estudiante ya está matriculado en esta materia.")
        try:
            estudiante = crud_estudiante.guardar(db, obj_in=estudiante_in)
            self._inscribir_sin_commit(
                db, estudiante_in.id, materia_id, self._evaluacion_ids(db, materia_id)
            )
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(estudiante)
        return estudiante

    def inscribir_varios(
        self, db: Session, *, estudiantes_in: Iterable[EstudianteCreate], materia_id: str
    ) -> int:
        """Crear o actualizar estudiantes e inscribirlos, ignorando duplicados"""
        nuevos = 0
        try:
            evaluacion_ids = self._evaluacion_ids(db, materia_id)
            for estudiante_in in estudiantes_in:
                crud_estudiante.guardar(db, obj_in=estudiante_in)
                db.flush()
                if self._inscribir_sin_commit(db, estudiante_in.id, materia_id, evaluacion_ids):
                    nuevos += 1
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info("%d estudiantes inscritos en %s", nuevos, materia_id)
        return nuevos

    def desinscribir(self, db: Session, *, estudiante_id: str, materia_id: str) -> bool:
        """Quitar la inscripción y las notas del estudiante en esa materia"""
        inscripcion = self.get_by_estudiante_materia(db, estudiante_id, materia_id)
        if inscripcion is None:
            return False
        try:
            evaluacion_ids = self._evaluacion_ids(db, materia_id)
            if evaluacion_ids:
                db.query(Nota).filter(
                    Nota.estudiante_id == estudiante_id,
                    Nota.evaluacion_id.in_(evaluacion_ids),
                ).delete(synchronize_session=False)
            db.delete(inscripcion)
            db.commit()
        except Exception:
            db.rollback()
            raise
        return True


inscripcion = CRUDInscripcion()
