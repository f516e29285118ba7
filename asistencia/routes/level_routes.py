from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from asistencia.auth.dependencies import get_current_user_id
from asistencia.core.validation import OptionalText, RequiredText
from asistencia.database import get_db
from asistencia.models.level import Level
from asistencia.routes.common import (
    IN_USE_MESSAGE,
    ApiModel,
    get_or_404,
    integrity_failure,
    storage_failure,
)

router = APIRouter(prefix='/levels', tags=['levels'])

LEVEL_NOT_FOUND = 'Nivel no encontrado'
DUPLICATE_LEVEL = 'El nivel ya existe'


class LevelRequest(ApiModel):
    name: RequiredText
    description: OptionalText = None


class LevelResponse(ApiModel):
    id: int
    name: str
    description: str | None = None


@router.get('', response_model=list[LevelResponse])
def list_levels(db: Session = Depends(get_db)):
    try:
        return db.query(Level).order_by(Level.name.asc()).all()
    except SQLAlchemyError as exc:
        raise storage_failure(db, exc, 'Listing levels') from exc


@router.get('/{level_id}', response_model=LevelResponse)
def get_level(level_id: int, db: Session = Depends(get_db)):
    try:
        return get_or_404(db, Level, level_id, LEVEL_NOT_FOUND)
    except SQLAlchemyError as exc:
        raise storage_failure(db, exc, 'Level lookup') from exc


@router.post('', response_model=LevelResponse, status_code=status.HTTP_201_CREATED)
def create_level(
    data: LevelRequest,
    _user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        level = Level(name=data.name.strip(), description=data.description)
        db.add(level)
        db.commit()
        db.refresh(level)
        return level
    except IntegrityError as exc:
        raise integrity_failure(db, exc, DUPLICATE_LEVEL) from exc
    except SQLAlchemyError as exc:
        raise storage_failure(db, exc, 'Creating level') from exc


@router.put('/{level_id}', response_model=LevelResponse)
def update_level(
    level_id: int,
    data: LevelRequest,
    _user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        level = get_or_404(db, Level, level_id, LEVEL_NOT_FOUND)
        level.name = data.name.strip()
        level.description = data.description
        db.commit()
        db.refresh(level)
        return level
    except IntegrityError as exc:
        raise integrity_failure(db, exc, DUPLICATE_LEVEL) from exc
    except SQLAlchemyError as exc:
        raise storage_failure(db, exc, 'Updating level') from exc


@router.delete('/{level_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_level(
    level_id: int,
    _user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        level = get_or_404(db, Level, level_id, LEVEL_NOT_FOUND)
        db.delete(level)
        db.commit()
    except IntegrityError as exc:
        raise integrity_failure(db, exc, IN_USE_MESSAGE) from exc
    except SQLAlchemyError as exc:
        raise storage_failure(db, exc, 'Deleting level') from exc

    return Response(status_code=status.HTTP_204_NO_CONTENT)
