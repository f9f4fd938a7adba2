import logging
import time

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base, Session
from sqlalchemy.pool import StaticPool
from fastapi import Request

from .settings import Settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def crear_motor(settings: Settings) -> Engine:
    """Crear el motor de base de datos a partir de la configuración"""
    kwargs = {"echo": settings.debug, "pool_pre_ping": True}

    if settings.is_sqlite:
        kwargs["connect_args"] = {"check_same_thread": False}
        if settings.is_memory_db:
            kwargs["poolclass"] = StaticPool
    else:
        kwargs.update(pool_recycle=3600, pool_size=10, max_overflow=20)

    engine = create_engine(settings.database_url, **kwargs)

    if settings.is_sqlite:

        @event.listens_for(engine, "connect")
        def _activar_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def crear_sesiones(engine: Engine) -> sessionmaker:
    return sessionmaker(
        bind=engine, autocommit=False, autoflush=True, expire_on_commit=False
    )


def get_db(request: Request) -> Session:
    """Obtener una sesión de base de datos con manejo de errores adecuado"""
    db = request.app.state.session_factory()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def verificar_conexion(engine: Engine, max_retries: int = 5, delay: float = 2.0) -> bool:
    for attempt in range(max_retries):
        try:
            with engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                logger.info("Conexión a base de datos exitosa (intento %d)", attempt + 1)
                return True
        except Exception as e:
            logger.warning("Intento de conexión %d fallido: %s", attempt + 1, e)
            if attempt < max_retries - 1:
                time.sleep(delay)
    logger.error("Fallaron todos los intentos de conexión a la base de datos")
    return False


def init_db(engine: Engine):
    # Registrar los modelos en el metadata antes de crear tablas
    import cuaderno.models  # noqa: F401

    if not verificar_conexion(engine):
        raise RuntimeError("La base de datos no está disponible")

    Base.metadata.create_all(bind=engine)
    logger.info("Tablas de base de datos inicializadas")


def close_db(engine: Engine):
    engine.dispose()
    logger.info("Conexiones de base de datos cerradas")
