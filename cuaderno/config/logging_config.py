import logging

from .settings import Settings

FORMATO = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configurar_logging(settings: Settings):
    """Configurar el logging raíz una sola vez por proceso"""
    nivel = logging.DEBUG if settings.debug else settings.log_level.upper()
    logging.basicConfig(level=nivel, format=FORMATO)
    # El eco de SQL ya lo controla el motor con echo=debug
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
