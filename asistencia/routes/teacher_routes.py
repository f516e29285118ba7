from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from asistencia.auth.dependencies import get_current_user_id
from asistencia.core.validation import OptionalText, RequiredText
from asistencia.database import get_db
from asistencia.models.teacher import Teacher
from asistencia.models.user import User
from asistencia.routes.common import (
    IN_USE_MESSAGE,
    ApiModel,
    ensure_reference,
    get_or_404,
    integrity_failure,
    storage_failure,
)

router = APIRouter(prefix='/teachers', tags=['teachers'])

TEACHER_NOT_FOUND = 'Profesor no encontrado'
UNKNOWN_USER = 'El usuario no existe'


class TeacherRequest(ApiModel):
    name: RequiredText
    email: OptionalText = None
    phone: OptionalText = None
    user_id: int | None = None


class TeacherResponse(ApiModel):
    id: int
    name: str
    email: str | None = None
    phone: str | None = None
    user_id: int | None = None


def _apply(teacher: Teacher, data: TeacherRequest) -> None:
    teacher.name = data.name.strip()
    teacher.email = data.email
    teacher.phone = data.phone
    teacher.user_id = data.user_id


@router.get('', response_model=list[TeacherResponse])
def list_teachers(db: Session = Depends(get_db)):
    try:
        return db.query(Teacher).order_by(Teacher.name.asc()).all()
    except SQLAlchemyError as exc:
        raise storage_failure(db, exc, 'Listing teachers') from exc


@router.get('/{teacher_id}', response_model=TeacherResponse)
def get_teacher(teacher_id: int, db: Session = Depends(get_db)):
    try:
        return get_or_404(db, Teacher, teacher_id, TEACHER_NOT_FOUND)
    except SQLAlchemyError as exc:
        raise storage_failure(db, exc, 'Teacher lookup') from exc


@router.post('', response_model=TeacherResponse, status_code=status.HTTP_201_CREATED)
def create_teacher(
    data: TeacherRequest,
    _user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        ensure_reference(db, User, data.user_id, UNKNOWN_USER)
        teacher = Teacher()
        _apply(teacher, data)
        db.add(teacher)
        db.commit()
        db.refresh(teacher)
        return teacher
    except IntegrityError as exc:
        raise integrity_failure(db, exc, UNKNOWN_USER) from exc
    except SQLAlchemyError as exc:
        raise storage_failure(db, exc, 'Creating teacher') from exc


@router.put('/{teacher_id}', response_model=TeacherResponse)
def update_teacher(
    teacher_id: int,
    data: TeacherRequest,
    _user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        teacher = get_or_404(db, Teacher, teacher_id, TEACHER_NOT_FOUND)
        ensure_reference(db, User, data.user_id, UNKNOWN_USER)
        _apply(teacher, data)
        db.commit()
        db.refresh(teacher)
        return teacher
    except IntegrityError as exc:
        raise integrity_failure(db, exc, UNKNOWN_USER) from exc
    except SQLAlchemyError as exc:
        raise storage_failure(db, exc, 'Updating teacher') from exc


@router.delete('/{teacher_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_teacher(
    teacher_id: int,
    _user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        teacher = get_or_404(db, Teacher, teacher_id, TEACHER_NOT_FOUND)
        db.delete(teacher)
        db.commit()
    except IntegrityError as exc:
        raise integrity_failure(db, exc, IN_USE_MESSAGE) from exc
    except SQLAlchemyError as exc:
        raise storage_failure(db, exc, 'Deleting teacher') from exc

    return Response(status_code=status.HTTP_204_NO_CONTENT)
