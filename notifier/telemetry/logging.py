"""
Configuración de logging estructurado.
- Nivel INFO por defecto; LOG_LEVEL=DEBUG en desarrollo.
- Formato con timestamps y nombre del logger.
- Integra con Uvicorn (hereda handlers) para no duplicar.
"""
import logging
import os

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging() -> None:
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # Ajusta loggers de uvicorn para no duplicar formato
    for uv_logger in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(uv_logger).setLevel(level)
    # firebase-admin/google-auth son muy verbosos en DEBUG
    logging.getLogger("google").setLevel(max(logging.getLevelName(level), logging.INFO))
