import pytest
from fastapi.testclient import TestClient

from cuaderno.config.settings import Settings
from cuaderno.core.calificaciones import (
    Calificado,
    EstudianteDatos,
    EvaluacionPeso,
    InstantaneaMateria,
    NO_CALIFICADO,
    NotaRegistro,
)
from cuaderno.main import create_app


@pytest.fixture
def settings():
    """Base en memoria compartida por todas las sesiones del test"""
    return Settings(database_url="sqlite://", legacy_data_path=None, debug=False)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db(client, app):
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def materia(client):
    response = client.post(
        "/api/v1/materias/", json={"nombre": "Matemática I", "periodo": "2024-I"}
    )
    assert response.status_code == 201
    return response.json()


def crear_evaluacion(client, materia_id, nombre, porcentaje, corte):
    return client.post(
        f"/api/v1/materias/{materia_id}/evaluaciones",
        json={"nombre": nombre, "porcentaje": porcentaje, "corte": corte},
    )


def inscribir(client, materia_id, cedula, nombre, correo=None):
    return client.post(
        f"/api/v1/materias/{materia_id}/estudiantes",
        json={"id": cedula, "nombre": nombre, "correo": correo or f"{cedula}@correo.com"},
    )


def poner_nota(client, cedula, evaluacion_id, valor):
    return client.put(
        "/api/v1/notas/",
        json={"estudiante_id": cedula, "evaluacion_id": evaluacion_id, "valor": valor},
    )


@pytest.fixture
def instantanea():
    """Materia con evaluaciones en los cortes 1 y 3; el corte 2 queda vacío"""
    evaluaciones = (
        EvaluacionPeso(id="q1", corte=1, nombre="Quiz", porcentaje=10),
        EvaluacionPeso(id="p1", corte=1, nombre="Parcial 1", porcentaje=20),
        EvaluacionPeso(id="f3", corte=3, nombre="Final", porcentaje=40),
    )
    estudiantes = (
        EstudianteDatos(id="V-3", nombre="Carla", correo="carla@correo.com"),
        EstudianteDatos(id="V-1", nombre="Ana", correo="ana@correo.com"),
        EstudianteDatos(id="V-2", nombre="Beto", correo=""),
    )
    notas = (
        NotaRegistro("V-1", "q1", Calificado(20.0)),
        NotaRegistro("V-1", "p1", Calificado(15.0)),
        NotaRegistro("V-1", "f3", Calificado(18.0)),
        NotaRegistro("V-2", "q1", Calificado(0.0)),
        NotaRegistro("V-2", "p1", NO_CALIFICADO),
        NotaRegistro("V-2", "f3", Calificado(10.0)),
        NotaRegistro("V-3", "q1", Calificado(12.0)),
        NotaRegistro("V-3", "p1", Calificado(8.0)),
        NotaRegistro("V-3", "f3", NO_CALIFICADO),
    )
    return InstantaneaMateria(
        materia_id="materia-1",
        nombre="Física General",
        periodo="2024-I",
        estudiantes=estudiantes,
        evaluaciones=evaluaciones,
        notas=notas,
    )
