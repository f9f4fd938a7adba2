import logging
import uuid
from typing import List
from sqlalchemy.orm import Session

from cuaderno.core.calificaciones import EvaluacionPeso
from cuaderno.core.validacion import EvaluacionPropuesta
from cuaderno.crud.base import CRUDBase
from cuaderno.models.evaluacion import Evaluacion
from cuaderno.models.inscripcion import Inscripcion
from cuaderno.models.nota import Nota
from cuaderno.schemas.evaluacion import EvaluacionCreate, EvaluacionUpdate

logger = logging.getLogger(__name__)


def nuevo_id_evaluacion() -> str:
    return f"eval-{uuid.uuid4().hex[:12]}"


class CRUDEvaluacion(CRUDBase[Evaluacion, EvaluacionCreate, EvaluacionUpdate]):
    def get_by_materia(self, db: Session, materia_id: str) -> List[Evaluacion]:
        return (
            db.query(Evaluacion)
            .filter(Evaluacion.materia_id == materia_id)
            .order_by(Evaluacion.corte, Evaluacion.nombre)
            .all()
        )

    def pesos_de_materia(self, db: Session, materia_id: str) -> List[EvaluacionPeso]:
        return [
            EvaluacionPeso(id=ev.id, corte=ev.corte, nombre=ev.nombre, porcentaje=ev.porcentaje)
            for ev in self.get_by_materia(db, materia_id)
        ]

    def crear(
        self, db: Session, *, materia_id: str, propuesta: EvaluacionPropuesta
    ) -> Evaluacion:
        """Crear la evaluación y una nota vacía para cada estudiante inscrito"""
        try:
            db_obj = Evaluacion(
                id=nuevo_id_evaluacion(),
                materia_id=materia_id,
                corte=propuesta.corte,
                nombre=propuesta.nombre,
                porcentaje=propuesta.porcentaje,
            )
            db.add(db_obj)
            db.flush()

            inscritos = (
                db.query(Inscripcion.estudiante_id)
                .filter(Inscripcion.materia_id == materia_id)
                .all()
            )
            for (estudiante_id,) in inscritos:
                db.add(Nota(estudiante_id=estudiante_id, evaluacion_id=db_obj.id, valor=None))

            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(db_obj)
        logger.info(
            "Evaluación %s creada en %s (%d notas vacías)",
            db_obj.id,
            materia_id,
            len(inscritos),
        )
        return db_obj

    def actualizar(
        self, db: Session, *, db_obj: Evaluacion, propuesta: EvaluacionPropuesta
    ) -> Evaluacion:
        return self.update(
            db,
            db_obj=db_obj,
            obj_in={
                "nombre": propuesta.nombre,
                "porcentaje": propuesta.porcentaje,
                "corte": propuesta.corte,
            },
        )

    def eliminar(self, db: Session, *, evaluacion_id: str) -> bool:
        """Eliminar la evaluación junto con sus notas en una sola transacción"""
        try:
            db.query(Nota).filter(Nota.evaluacion_id == evaluacion_id).delete(
                synchronize_session=False
            )
            borradas = (
                db.query(Evaluacion)
                .filter(Evaluacion.id == evaluacion_id)
                .delete(synchronize_session=False)
            )
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("No se pudo eliminar la evaluación %s", evaluacion_id)
            raise
        return borradas > 0


evaluacion = CRUDEvaluacion(Evaluacion)
