from typing import Any, Dict
from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from cuaderno.api.deps import error_http
from cuaderno.config.database import get_db
from cuaderno.core.exceptions import ErrorImportacion
from cuaderno.core.importador_legado import importar_respaldo

router = APIRouter()


@router.post("/importar")
def importar(datos: Dict[str, Any] = Body(...), db: Session = Depends(get_db)):
    """Importar un respaldo JSON del almacenamiento anterior"""
    try:
        conteo = importar_respaldo(db, datos)
    except ErrorImportacion as e:
        raise error_http(e)
    return {"message": "Importación completa", "importados": conteo}
