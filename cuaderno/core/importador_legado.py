import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cuaderno.core.calificaciones import limitar_nota
from cuaderno.core.exceptions import ErrorImportacion
from cuaderno.models.estudiante import Estudiante
from cuaderno.models.evaluacion import Evaluacion
from cuaderno.models.inscripcion import Inscripcion
from cuaderno.models.materia import Materia, PERIODO_POR_DEFECTO
from cuaderno.models.nota import Nota

logger = logging.getLogger(__name__)

COLECCIONES = ("students", "subjects", "evaluations", "grades", "enrollments")


def _lista(datos: Dict[str, Any], clave: str) -> List[Dict[str, Any]]:
    valor = datos.get(clave) or []
    if not isinstance(valor, list):
        raise ErrorImportacion(f"'{clave}' debe ser una lista")
    return valor


def _nuevo(db: Session, modelo, clave) -> bool:
    """INSERT OR IGNORE: solo se inserta lo que no existe"""
    return db.get(modelo, clave) is None


def importar_respaldo(db: Session, datos: Dict[str, Any]) -> Dict[str, int]:
    """Importar el respaldo JSON del almacenamiento anterior en una transacción.

    Claves esperadas: students, subjects, evaluations, grades, enrollments
    (campos en camelCase). Los registros existentes se ignoran.
    """
    if not isinstance(datos, dict):
        raise ErrorImportacion("El respaldo debe ser un objeto JSON")

    conteo = {clave: 0 for clave in COLECCIONES}
    try:
        logger.info("👨‍🎓 Importando estudiantes...")
        for s in _lista(datos, "students"):
            if _nuevo(db, Estudiante, s["id"]):
                db.add(Estudiante(id=s["id"], nombre=s["name"], correo=s.get("email") or ""))
                conteo["students"] += 1
        db.flush()

        logger.info("📚 Importando materias...")
        for s in _lista(datos, "subjects"):
            if _nuevo(db, Materia, s["id"]):
                db.add(
                    Materia(
                        id=s["id"],
                        nombre=s["name"],
                        periodo=s.get("period") or PERIODO_POR_DEFECTO,
                    )
                )
                conteo["subjects"] += 1
        db.flush()

        logger.info("📝 Importando evaluaciones...")
        for e in _lista(datos, "evaluations"):
            if _nuevo(db, Evaluacion, e["id"]):
                db.add(
                    Evaluacion(
                        id=e["id"],
                        materia_id=e["subjectId"],
                        corte=int(e["corte"]),
                        nombre=e["name"],
                        porcentaje=float(e["percentage"]),
                    )
                )
                conteo["evaluations"] += 1
        db.flush()

        logger.info("🔗 Importando inscripciones...")
        for i in _lista(datos, "enrollments"):
            if _nuevo(db, Inscripcion, (i["studentId"], i["subjectId"])):
                db.add(Inscripcion(estudiante_id=i["studentId"], materia_id=i["subjectId"]))
                conteo["enrollments"] += 1
        db.flush()

        logger.info("📊 Importando notas...")
        for g in _lista(datos, "grades"):
            if _nuevo(db, Nota, (g["studentId"], g["evaluationId"])):
                score = g.get("score")
                db.add(
                    Nota(
                        estudiante_id=g["studentId"],
                        evaluacion_id=g["evaluationId"],
                        valor=None if score is None else limitar_nota(float(score)),
                    )
                )
                conteo["grades"] += 1

        db.commit()
    except ErrorImportacion:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        raise ErrorImportacion("Respaldo inconsistente: referencias inexistentes") from e
    except (KeyError, TypeError, ValueError) as e:
        db.rollback()
        raise ErrorImportacion(f"Respaldo inválido: {e}") from e
    except Exception:
        db.rollback()
        logger.exception("❌ La importación falló, se revirtieron los cambios")
        raise

    logger.info("✅ Importación completa: %s", conteo)
    return conteo


def base_vacia(db: Session) -> bool:
    return db.query(Materia).first() is None and db.query(Estudiante).first() is None


def run_migration(db: Session, ruta: str) -> bool:
    """Migrar una sola vez: solo si la base está vacía y existe el archivo"""
    archivo = Path(ruta)
    if not archivo.exists():
        logger.warning("⚠️ No existe el respaldo %s, se omite la migración", ruta)
        return False
    if not base_vacia(db):
        logger.info("ℹ️ La base de datos ya contiene datos, no se migra")
        return False

    datos = json.loads(archivo.read_text(encoding="utf-8"))
    importar_respaldo(db, datos)
    return True
