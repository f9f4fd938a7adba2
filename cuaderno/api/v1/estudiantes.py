from typing import List
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import ValidationError
from sqlalchemy.orm import Session

from cuaderno.api.deps import error_http, get_materia_or_404
from cuaderno.config.database import get_db
from cuaderno.core.exceptions import ErrorImportacion, YaInscrito
from cuaderno.core.reportes import parsear_csv_estudiantes
from cuaderno.crud.estudiante import estudiante as crud_estudiante
from cuaderno.crud.inscripcion import inscripcion as crud_inscripcion
from cuaderno.models.materia import Materia
from cuaderno.schemas.estudiante import (
    Estudiante as EstudianteSchema,
    EstudianteCreate,
    EstudianteUpdate,
    ResultadoImportacion,
)

router = APIRouter()


@router.get("/materias/{materia_id}/estudiantes", response_model=List[EstudianteSchema])
def get_estudiantes_materia(
    materia: Materia = Depends(get_materia_or_404),
    db: Session = Depends(get_db),
):
    """Estudiantes inscritos en la materia"""
    return crud_estudiante.get_by_materia(db, materia.id)


@router.post(
    "/materias/{materia_id}/estudiantes",
    response_model=EstudianteSchema,
    status_code=201,
)
def inscribir_estudiante(
    estudiante_in: EstudianteCreate,
    materia: Materia = Depends(get_materia_or_404),
    db: Session = Depends(get_db),
):
    """Matricular un estudiante (se crea o actualiza por cédula)"""
    try:
        return crud_inscripcion.inscribir(db, estudiante_in=estudiante_in, materia_id=materia.id)
    except YaInscrito as e:
        raise error_http(e, status_code=409)


@router.post(
    "/materias/{materia_id}/estudiantes/importar",
    response_model=ResultadoImportacion,
)
def importar_estudiantes(
    archivo: UploadFile = File(...),
    materia: Materia = Depends(get_materia_or_404),
    db: Session = Depends(get_db),
):
    """Cargar estudiantes desde CSV ``cedula,nombre,correo`` con cabecera"""
    try:
        try:
            contenido = archivo.file.read().decode("utf-8-sig")
        except UnicodeDecodeError:
            raise ErrorImportacion("El archivo debe estar codificado en UTF-8.") from None
        datos = parsear_csv_estudiantes(contenido)
        estudiantes_in = []
        for e in datos:
            try:
                estudiantes_in.append(
                    EstudianteCreate(id=e.id, nombre=e.nombre, correo=e.correo)
                )
            except ValidationError:
                raise ErrorImportacion(f"Datos inválidos para la cédula {e.id}.") from None
    except ErrorImportacion as e:
        raise error_http(e)

    inscritos = crud_inscripcion.inscribir_varios(
        db, estudiantes_in=estudiantes_in, materia_id=materia.id
    )
    return ResultadoImportacion(
        cargados=len(estudiantes_in),
        inscritos=inscritos,
        mensaje=f"{len(estudiantes_in)} estudiantes cargados exitosamente.",
    )


@router.delete("/materias/{materia_id}/estudiantes/{estudiante_id}", status_code=204)
def desinscribir_estudiante(
    estudiante_id: str,
    materia: Materia = Depends(get_materia_or_404),
    db: Session = Depends(get_db),
):
    """Quitar al estudiante de la materia junto con sus notas"""
    if not crud_inscripcion.desinscribir(db, estudiante_id=estudiante_id, materia_id=materia.id):
        raise HTTPException(status_code=404, detail="El estudiante no está inscrito")


@router.put("/estudiantes/{estudiante_id}", response_model=EstudianteSchema)
def update_estudiante(
    estudiante_id: str,
    estudiante_in: EstudianteUpdate,
    db: Session = Depends(get_db),
):
    """Actualizar nombre o correo del estudiante"""
    estudiante = crud_estudiante.get(db, estudiante_id)
    if estudiante is None:
        raise HTTPException(status_code=404, detail="Estudiante no encontrado")
    return crud_estudiante.update(db, db_obj=estudiante, obj_in=estudiante_in)
