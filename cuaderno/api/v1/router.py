from fastapi import APIRouter

from cuaderno.api.v1 import estudiantes, evaluaciones, materias, notas, respaldo

api_router = APIRouter()

api_router.include_router(materias.router, prefix="/materias", tags=["📚 Materias"])
api_router.include_router(evaluaciones.router, tags=["📝 Evaluaciones"])
api_router.include_router(estudiantes.router, tags=["👨‍🎓 Estudiantes"])
api_router.include_router(notas.router, prefix="/notas", tags=["📊 Notas"])
api_router.include_router(respaldo.router, prefix="/respaldo", tags=["💾 Respaldo"])
