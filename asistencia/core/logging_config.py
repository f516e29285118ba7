import logging

from asistencia.core import config

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'


def configure_logging() -> None:
    logging.basicConfig(level=config.LOG_LEVEL, format=LOG_FORMAT)
