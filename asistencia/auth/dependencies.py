import logging
import re

from fastapi import Depends, Header, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from asistencia.auth import jwt_handler
from asistencia.core import config
from asistencia.core.errors import ServerError, Unauthorized
from asistencia.database import get_db
from asistencia.models.user import User

logger = logging.getLogger(__name__)

BEARER_PREFIX = 'bearer '


def parse_authorization(header_value: str | None) -> int:
    """Resolve the caller's user id from the Authorization header.

    A ``Bearer`` value must be a token from ``POST /api/token``. Any other
    value is read as a bare integer user id when legacy headers are
    allowed; that form proves nothing beyond knowing an id.
    """
    if not header_value or not header_value.strip():
        raise Unauthorized()

    value = header_value.strip()
    if value.lower().startswith(BEARER_PREFIX):
        user_id = jwt_handler.decode_user_id(value[len(BEARER_PREFIX):].strip())
        if user_id is None:
            raise Unauthorized()
        return user_id

    if not config.ALLOW_LEGACY_ID_HEADER:
        raise Unauthorized()

    if not re.fullmatch(r'\d+', value, re.ASCII):
        raise Unauthorized()
    return int(value)


def get_current_user_id(
    request: Request,
    authorization: str | None = Header(default=None),
    db: Session = Depends(get_db),
) -> int:
    user_id = parse_authorization(authorization)

    try:
        exists = db.query(User.id).filter(User.id == user_id).first()
    except SQLAlchemyError as exc:
        logger.exception('Could not verify user %s', user_id)
        raise ServerError() from exc

    if exists is None:
        raise Unauthorized()

    request.state.user_id = user_id
    return user_id
