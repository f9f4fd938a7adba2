import json

import pytest

from cuaderno.core.exceptions import ErrorImportacion
from cuaderno.core.importador_legado import importar_respaldo, run_migration
from cuaderno.models.materia import Materia
from cuaderno.models.nota import Nota

RESPALDO = {
    "students": [{"id": "V-1", "name": "Ana", "email": "ana@correo.com"}],
    "subjects": [{"id": "subject-1", "name": "Historia", "period": "2023-II"}],
    "evaluations": [
        {"id": "eval-1", "subjectId": "subject-1", "corte": 2, "name": "Ensayo", "percentage": 20}
    ],
    "enrollments": [{"studentId": "V-1", "subjectId": "subject-1"}],
    "grades": [{"studentId": "V-1", "evaluationId": "eval-1", "score": None}],
}


def test_import_keeps_ungraded(db):
    conteo = importar_respaldo(db, RESPALDO)
    assert conteo == {"students": 1, "subjects": 1, "evaluations": 1, "grades": 1, "enrollments": 1}
    assert db.get(Materia, "subject-1").periodo == "2023-II"
    assert db.get(Nota, ("V-1", "eval-1")).valor is None


def test_invalid_collection(db):
    with pytest.raises(ErrorImportacion):
        importar_respaldo(db, {"students": "no-es-lista"})


def test_missing_key_rolls_back(db):
    datos = {"subjects": [{"id": "s", "name": "Arte"}], "students": [{"name": "Sin cédula"}]}
    with pytest.raises(ErrorImportacion):
        importar_respaldo(db, datos)
    assert db.query(Materia).count() == 0


def test_migration_only_on_empty_database(db, tmp_path):
    ruta = tmp_path / "respaldo.json"
    ruta.write_text(json.dumps(RESPALDO), encoding="utf-8")

    assert run_migration(db, str(ruta)) is True
    assert run_migration(db, str(ruta)) is False
    assert db.query(Materia).count() == 1


def test_migration_without_file(db, tmp_path):
    assert run_migration(db, str(tmp_path / "no-existe.json")) is False


@pytest.mark.parametrize("score", ["NaN", "Infinity", float("nan")])
def test_non_finite_score_rejected(db, score):
    datos = dict(RESPALDO, grades=[{"studentId": "V-1", "evaluationId": "eval-1", "score": score}])
    with pytest.raises(ErrorImportacion):
        importar_respaldo(db, datos)
    assert db.query(Materia).count() == 0
    assert db.query(Nota).count() == 0
