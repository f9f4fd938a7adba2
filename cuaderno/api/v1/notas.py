from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from cuaderno.config.database import get_db
from cuaderno.crud.nota import nota as crud_nota
from cuaderno.schemas.nota import Nota as NotaSchema, NotaUpdate

router = APIRouter()


@router.put("/", response_model=NotaSchema)
def update_nota(nota_in: NotaUpdate, db: Session = Depends(get_db)):
    """Registrar o borrar la nota de un estudiante en una evaluación"""
    nota = crud_nota.get_by_clave(db, nota_in.estudiante_id, nota_in.evaluacion_id)
    if nota is None:
        raise HTTPException(
            status_code=404,
            detail="Nota no encontrada: el estudiante no está inscrito en la materia",
        )

    try:
        nota = crud_nota.actualizar_valor(db, db_obj=nota, valor=nota_in.valor)
    except ValueError:
        raise HTTPException(status_code=422, detail="La nota debe ser un número entre 0 y 20")
    return NotaSchema(
        estudiante_id=nota.estudiante_id,
        evaluacion_id=nota.evaluacion_id,
        valor=nota.valor,
        calificado=nota.valor is not None,
    )
