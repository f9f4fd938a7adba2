from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from cuaderno.config.database import get_db
from cuaderno.config.settings import Settings
from cuaderno.core.calificaciones import InstantaneaMateria
from cuaderno.core.exceptions import ErrorCuaderno, ErrorValidacion
from cuaderno.crud.materia import materia as crud_materia
from cuaderno.models.materia import Materia


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_materia_or_404(materia_id: str, db: Session = Depends(get_db)) -> Materia:
    materia = crud_materia.get(db, materia_id)
    if materia is None:
        raise HTTPException(status_code=404, detail="Materia no encontrada")
    return materia


def get_instantanea(materia_id: str, db: Session = Depends(get_db)) -> InstantaneaMateria:
    """Instantánea fresca de la materia, leída en cada request"""
    instantanea = crud_materia.obtener_instantanea(db, materia_id)
    if instantanea is None:
        raise HTTPException(status_code=404, detail="Materia no encontrada")
    return instantanea


def error_http(error: ErrorCuaderno, status_code: int = 400) -> HTTPException:
    detail = {"codigo": error.codigo, "mensaje": error.mensaje}
    if isinstance(error, ErrorValidacion) and error.restante is not None:
        detail["restante"] = round(error.restante, 2)
    return HTTPException(status_code=status_code, detail=detail)
