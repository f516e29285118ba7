"""Helpers shared by the entity routers."""

import logging

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from asistencia.core.errors import BadRequest, NotFound, ServerError

logger = logging.getLogger(__name__)

IN_USE_MESSAGE = 'Registro en uso'


class ApiModel(BaseModel):
    """Reads and writes camelCase JSON, as the frontend sends it."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def get_or_404(db: Session, model, row_id: int, message: str):
    row = db.get(model, row_id)
    if row is None:
        raise NotFound(message)
    return row


def ensure_reference(db: Session, model, row_id: int | None, message: str) -> None:
    """Reject a payload that points at a row that does not exist."""
    if row_id is None:
        return
    if db.get(model, row_id) is None:
        raise BadRequest(message)


def storage_failure(db: Session, exc: SQLAlchemyError, action: str) -> ServerError:
    db.rollback()
    logger.error('%s failed', action, exc_info=exc)
    return ServerError()


def integrity_failure(db: Session, exc: IntegrityError, message: str) -> BadRequest:
    db.rollback()
    logger.info('Rejected write: %s', exc.orig)
    return BadRequest(message)
