import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from cuaderno.api.deps import error_http, get_materia_or_404, get_settings
from cuaderno.config.database import get_db
from cuaderno.config.settings import Settings
from cuaderno.core.exceptions import ErrorValidacion
from cuaderno.core.validacion import validar_evaluacion
from cuaderno.crud.evaluacion import evaluacion as crud_evaluacion
from cuaderno.models.materia import Materia
from cuaderno.schemas.evaluacion import (
    Evaluacion as EvaluacionSchema,
    EvaluacionCreate,
    EvaluacionUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/materias/{materia_id}/evaluaciones", response_model=List[EvaluacionSchema])
def get_evaluaciones(
    materia: Materia = Depends(get_materia_or_404),
    db: Session = Depends(get_db),
):
    """Evaluaciones de la materia ordenadas por corte y nombre"""
    return crud_evaluacion.get_by_materia(db, materia.id)


@router.post(
    "/materias/{materia_id}/evaluaciones",
    response_model=EvaluacionSchema,
    status_code=201,
)
def create_evaluacion(
    evaluacion_in: EvaluacionCreate,
    materia: Materia = Depends(get_materia_or_404),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Crear evaluación si respeta los topes de porcentaje"""
    try:
        propuesta = validar_evaluacion(
            evaluacion_in.nombre,
            evaluacion_in.porcentaje,
            evaluacion_in.corte,
            crud_evaluacion.pesos_de_materia(db, materia.id),
            topes=settings.topes_corte,
        )
    except ErrorValidacion as e:
        logger.info("Evaluación rechazada en %s: %s", materia.id, e.mensaje)
        raise error_http(e)

    return crud_evaluacion.crear(db, materia_id=materia.id, propuesta=propuesta)


@router.put("/evaluaciones/{evaluacion_id}", response_model=EvaluacionSchema)
def update_evaluacion(
    evaluacion_id: str,
    evaluacion_in: EvaluacionUpdate,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Editar evaluación sin contar su porcentaje anterior contra el tope"""
    evaluacion = crud_evaluacion.get(db, evaluacion_id)
    if evaluacion is None:
        raise HTTPException(status_code=404, detail="Evaluación no encontrada")

    cambios = evaluacion_in.model_dump(exclude_none=True)
    try:
        propuesta = validar_evaluacion(
            cambios.get("nombre", evaluacion.nombre),
            cambios.get("porcentaje", evaluacion.porcentaje),
            cambios.get("corte", evaluacion.corte),
            crud_evaluacion.pesos_de_materia(db, evaluacion.materia_id),
            editando_id=evaluacion.id,
            topes=settings.topes_corte,
        )
    except ErrorValidacion as e:
        raise error_http(e)

    return crud_evaluacion.actualizar(db, db_obj=evaluacion, propuesta=propuesta)


@router.delete("/evaluaciones/{evaluacion_id}", status_code=204)
def delete_evaluacion(evaluacion_id: str, db: Session = Depends(get_db)):
    """Eliminar evaluación y sus notas"""
    if not crud_evaluacion.eliminar(db, evaluacion_id=evaluacion_id):
        raise HTTPException(status_code=404, detail="Evaluación no encontrada")
