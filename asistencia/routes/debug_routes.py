"""Development-only endpoints. Never registered when APP_ENV is production."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from asistencia.core.errors import ServerError
from asistencia.database import get_db
from asistencia.models.user import User

router = APIRouter(prefix='/debug', tags=['debug'])

logger = logging.getLogger(__name__)


def raw_row(user: User) -> dict:
    return {column.name: getattr(user, column.key) for column in User.__table__.columns}


@router.get('/users')
def dump_users(db: Session = Depends(get_db)):
    # Includes stored credential hashes; no authentication.
    try:
        users = db.query(User).order_by(User.id.asc()).all()
    except SQLAlchemyError as exc:
        logger.exception('Debug user dump failed')
        raise ServerError('Error en modo debug') from exc

    return [raw_row(user) for user in users]
