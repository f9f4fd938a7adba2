from typing import List, Optional
from sqlalchemy.orm import Session

from cuaderno.core.calificaciones import limitar_nota
from cuaderno.crud.base import CRUDBase
from cuaderno.models.evaluacion import Evaluacion
from cuaderno.models.nota import Nota
from cuaderno.schemas.nota import NotaUpdate


class CRUDNota(CRUDBase[Nota, NotaUpdate, NotaUpdate]):
    def get_by_materia(self, db: Session, materia_id: str) -> List[Nota]:
        return (
            db.query(Nota)
            .join(Evaluacion, Evaluacion.id == Nota.evaluacion_id)
            .filter(Evaluacion.materia_id == materia_id)
            .all()
        )

    def get_by_clave(
        self, db: Session, estudiante_id: str, evaluacion_id: str
    ) -> Optional[Nota]:
        return db.get(Nota, (estudiante_id, evaluacion_id))

    def actualizar_valor(
        self, db: Session, *, db_obj: Nota, valor: Optional[float]
    ) -> Nota:
        """Guardar la nota limitada a [0, 20]; ``None`` la deja sin calificar"""
        db_obj.valor = None if valor is None else limitar_nota(valor)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj


nota = CRUDNota(Nota)
