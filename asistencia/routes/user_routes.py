import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from asistencia.auth.dependencies import get_current_user_id
from asistencia.core.errors import NotFound, ServerError, Unauthorized
from asistencia.database import get_db
from asistencia.models.user import User
from asistencia.routes.auth_routes import PublicUser

router = APIRouter(tags=['users'])

logger = logging.getLogger(__name__)

DATABASE_ERROR = 'Database error'


@router.get('/users', response_model=list[PublicUser])
def list_users(
    _user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        users = db.query(User).order_by(User.id.asc()).all()
    except SQLAlchemyError as exc:
        logger.exception('Listing users failed')
        raise ServerError(DATABASE_ERROR) from exc

    return [user.public_projection() for user in users]


@router.get('/user/{email}', response_model=PublicUser)
def get_user_by_email(
    email: str,
    _user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        user = db.query(User).filter(User.email == email).first()
    except SQLAlchemyError as exc:
        logger.exception('User lookup failed')
        raise ServerError(DATABASE_ERROR) from exc

    if user is None:
        raise NotFound('Usuario no encontrado')
    return user.public_projection()


@router.get('/me', response_model=PublicUser)
def me(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        user = db.get(User, user_id)
    except SQLAlchemyError as exc:
        logger.exception('Current user lookup failed')
        raise ServerError(DATABASE_ERROR) from exc

    if user is None:
        raise Unauthorized()
    return user.public_projection()
