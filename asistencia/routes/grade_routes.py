from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from asistencia.auth.dependencies import get_current_user_id
from asistencia.core.validation import RequiredText
from asistencia.database import get_db
from asistencia.models.grade import Grade
from asistencia.models.level import Level
from asistencia.models.teacher import Teacher
from asistencia.routes.common import (
    IN_USE_MESSAGE,
    ApiModel,
    ensure_reference,
    get_or_404,
    integrity_failure,
    storage_failure,
)

router = APIRouter(prefix='/grades', tags=['grades'])

GRADE_NOT_FOUND = 'Grado no encontrado'
UNKNOWN_LEVEL = 'El nivel no existe'
UNKNOWN_TEACHER = 'El profesor no existe'
INVALID_REFERENCE = 'Referencia inválida'


class GradeRequest(ApiModel):
    name: RequiredText
    level_id: int
    teacher_id: int | None = None


class GradeResponse(ApiModel):
    id: int
    name: str
    level_id: int
    teacher_id: int | None = None


def _validate_references(db: Session, data: GradeRequest) -> None:
    ensure_reference(db, Level, data.level_id, UNKNOWN_LEVEL)
    ensure_reference(db, Teacher, data.teacher_id, UNKNOWN_TEACHER)


@router.get('', response_model=list[GradeResponse])
def list_grades(
    level_id: int | None = Query(default=None, alias='levelId'),
    db: Session = Depends(get_db),
):
    try:
        query = db.query(Grade)
        if level_id is not None:
            query = query.filter(Grade.level_id == level_id)
        return query.order_by(Grade.level_id.asc(), Grade.name.asc()).all()
    except SQLAlchemyError as exc:
        raise storage_failure(db, exc, 'Listing grades') from exc


@router.get('/{grade_id}', response_model=GradeResponse)
def get_grade(grade_id: int, db: Session = Depends(get_db)):
    try:
        return get_or_404(db, Grade, grade_id, GRADE_NOT_FOUND)
    except SQLAlchemyError as exc:
        raise storage_failure(db, exc, 'Grade lookup') from exc


@router.post('', response_model=GradeResponse, status_code=status.HTTP_201_CREATED)
def create_grade(
    data: GradeRequest,
    _user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        _validate_references(db, data)
        grade = Grade(name=data.name.strip(), level_id=data.level_id, teacher_id=data.teacher_id)
        db.add(grade)
        db.commit()
        db.refresh(grade)
        return grade
    except IntegrityError as exc:
        raise integrity_failure(db, exc, INVALID_REFERENCE) from exc
    except SQLAlchemyError as exc:
        raise storage_failure(db, exc, 'Creating grade') from exc


@router.put('/{grade_id}', response_model=GradeResponse)
def update_grade(
    grade_id: int,
    data: GradeRequest,
    _user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        grade = get_or_404(db, Grade, grade_id, GRADE_NOT_FOUND)
        _validate_references(db, data)
        grade.name = data.name.strip()
        grade.level_id = data.level_id
        grade.teacher_id = data.teacher_id
        db.commit()
        db.refresh(grade)
        return grade
    except IntegrityError as exc:
        raise integrity_failure(db, exc, INVALID_REFERENCE) from exc
    except SQLAlchemyError as exc:
        raise storage_failure(db, exc, 'Updating grade') from exc


@router.delete('/{grade_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_grade(
    grade_id: int,
    _user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        grade = get_or_404(db, Grade, grade_id, GRADE_NOT_FOUND)
        db.delete(grade)
        db.commit()
    except IntegrityError as exc:
        raise integrity_failure(db, exc, IN_USE_MESSAGE) from exc
    except SQLAlchemyError as exc:
        raise storage_failure(db, exc, 'Deleting grade') from exc

    return Response(status_code=status.HTTP_204_NO_CONTENT)
