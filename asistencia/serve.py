"""Run the API and the built frontend with uvicorn.

Usage:
    python -m asistencia.serve
"""
import logging

import uvicorn

from asistencia.core import config
from asistencia.core.logging_config import configure_logging

logger = logging.getLogger(__name__)


def main() -> None:
    configure_logging()
    logger.info("Servidor escuchando en http://localhost:%s", config.PORT)
    uvicorn.run("asistencia.main:app", host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    main()
