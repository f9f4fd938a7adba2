from typing import List
from urllib.parse import quote
from fastapi import APIRouter, Depends, HTTPException, Path
from fastapi.responses import Response
from sqlalchemy.orm import Session

from cuaderno.api.deps import error_http, get_instantanea, get_materia_or_404, get_settings
from cuaderno.config.database import get_db
from cuaderno.config.settings import Settings
from cuaderno.core.calificaciones import InstantaneaMateria, resumen_porcentajes
from cuaderno.core.exceptions import CorteSinEvaluaciones, NoEncontrado
from cuaderno.core import reportes
from cuaderno.crud.materia import materia as crud_materia
from cuaderno.models.materia import Materia
from cuaderno.schemas.materia import (
    Materia as MateriaSchema,
    MateriaCreate,
    MateriaDetalle,
    MateriaUpdate,
)
from cuaderno.schemas.reporte import CorreoSalida, ReporteSalida, TablaSalida

router = APIRouter()


@router.get("/", response_model=List[MateriaSchema])
def get_materias(db: Session = Depends(get_db)):
    """Lista de materias ordenadas por nombre"""
    return crud_materia.get_all(db)


@router.post("/", response_model=MateriaSchema, status_code=201)
def create_materia(materia_in: MateriaCreate, db: Session = Depends(get_db)):
    """Crear materia"""
    return crud_materia.create(db, obj_in=materia_in)


@router.get("/{materia_id}", response_model=MateriaDetalle)
def get_materia(
    instantanea: InstantaneaMateria = Depends(get_instantanea),
    materia: Materia = Depends(get_materia_or_404),
    settings: Settings = Depends(get_settings),
):
    """Ver materia con el resumen de porcentajes asignados"""
    return MateriaDetalle(
        id=materia.id,
        nombre=materia.nombre,
        periodo=materia.periodo,
        created_at=materia.created_at,
        updated_at=materia.updated_at,
        porcentajes=resumen_porcentajes(instantanea.evaluaciones, settings.topes_corte),
        total_estudiantes=len(instantanea.estudiantes),
        total_evaluaciones=len(instantanea.evaluaciones),
    )


@router.put("/{materia_id}", response_model=MateriaSchema)
def update_materia(
    materia_in: MateriaUpdate,
    materia: Materia = Depends(get_materia_or_404),
    db: Session = Depends(get_db),
):
    """Actualizar nombre o período"""
    return crud_materia.update(db, db_obj=materia, obj_in=materia_in)


@router.get("/{materia_id}/calificaciones", response_model=TablaSalida)
def get_tabla_calificaciones(instantanea: InstantaneaMateria = Depends(get_instantanea)):
    """Tabla de notas por evaluación, total por corte y nota final"""
    return TablaSalida.desde(instantanea.materia_id, reportes.construir_tabla(instantanea))


@router.get("/{materia_id}/reporte", response_model=ReporteSalida)
def get_reporte(
    instantanea: InstantaneaMateria = Depends(get_instantanea),
    settings: Settings = Depends(get_settings),
):
    """Estadísticas generales, por corte y por evaluación"""
    reporte = reportes.construir_reporte(instantanea, settings.nota_aprobatoria)
    return ReporteSalida.desde(instantanea.materia_id, settings.nota_aprobatoria, reporte)


@router.get("/{materia_id}/exportar")
def exportar_calificaciones(instantanea: InstantaneaMateria = Depends(get_instantanea)):
    """Descargar CSV con todas las calificaciones"""
    contenido = reportes.exportar_csv(instantanea)
    nombre = reportes.nombre_archivo_csv(instantanea)
    return Response(
        content=contenido,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(nombre)}"},
    )


@router.get("/{materia_id}/correo/evaluacion/{evaluacion_id}", response_model=CorreoSalida)
def get_correo_evaluacion(
    evaluacion_id: str,
    instantanea: InstantaneaMateria = Depends(get_instantanea),
):
    """Borrador de correo con las notas de una evaluación"""
    try:
        borrador = reportes.correo_por_evaluacion(instantanea, evaluacion_id)
    except NoEncontrado as e:
        raise HTTPException(status_code=404, detail=e.mensaje)
    return CorreoSalida.desde(borrador)


@router.get("/{materia_id}/correo/corte/{corte}", response_model=CorreoSalida)
def get_correo_corte(
    corte: int = Path(..., ge=1, le=3),
    instantanea: InstantaneaMateria = Depends(get_instantanea),
):
    """Borrador de correo con los totales de un corte"""
    try:
        borrador = reportes.correo_por_corte(instantanea, corte)
    except CorteSinEvaluaciones as e:
        raise error_http(e)
    return CorreoSalida.desde(borrador)
