import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from cuaderno.api.v1.router import api_router
from cuaderno.config.database import close_db, crear_motor, crear_sesiones, init_db
from cuaderno.config.logging_config import configurar_logging
from cuaderno.config.settings import Settings
from cuaderno.core.importador_legado import run_migration

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


def initialize_app(app: FastAPI):
    """Inicializar base de datos y migración de datos antiguos"""
    settings: Settings = app.state.settings
    logger.info("🚀 Iniciando Cuaderno de Notas v%s...", VERSION)

    # 1. Base de datos
    logger.info("📊 Inicializando base de datos...")
    try:
        init_db(app.state.engine)
    except Exception as db_error:
        logger.error("❌ Error crítico en base de datos: %s", db_error)
        raise

    # 2. Migración única desde el respaldo JSON
    if settings.legacy_data_path:
        logger.info("🌱 Revisando migración desde %s...", settings.legacy_data_path)
        with app.state.session_factory() as db:
            if run_migration(db, settings.legacy_data_path):
                logger.info("✅ Datos antiguos migrados")

    logger.info("🎉 Cuaderno de Notas listo!")


@asynccontextmanager
async def lifespan(app: FastAPI):
    initialize_app(app)
    yield
    close_db(app.state.engine)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()
    configurar_logging(settings)

    app = FastAPI(
        title="Cuaderno de Notas API",
        description="""
    ## Cuaderno de Notas 🎓

    - 📚 Materias con evaluaciones agrupadas en tres cortes
    - 📝 Validación de porcentajes por corte y total
    - 📊 Notas de 0 a 20, totales por corte y nota final
    - 📈 Reportes estadísticos, exportación CSV y borradores de correo
    """,
        version=VERSION,
        lifespan=lifespan,
    )

    # El manejador de base de datos vive mientras viva la aplicación
    app.state.settings = settings
    app.state.engine = crear_motor(settings)
    app.state.session_factory = crear_sesiones(app.state.engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api/v1")

    @app.get("/", tags=["🏠 General"])
    def root():
        """Información general del sistema"""
        return {
            "message": f"Cuaderno de Notas API v{VERSION}",
            "status": "running",
            "docs": "/docs",
            "nota_aprobatoria": settings.nota_aprobatoria,
            "topes_corte": settings.topes_corte,
        }

    @app.get("/health", tags=["🏠 General"])
    def health_check(request: Request):
        """Verificación de salud"""
        health_data = {"status": "healthy", "service": "cuaderno-notas", "version": VERSION}
        try:
            with request.app.state.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            health_data["database"] = "ok"
        except Exception as e:
            logger.warning("⚠️ Base de datos no disponible: %s", e)
            health_data.update({"status": "degraded", "database": str(e)})
        return health_data

    return app


app = create_app()
