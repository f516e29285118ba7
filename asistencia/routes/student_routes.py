from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from asistencia.auth.dependencies import get_current_user_id
from asistencia.core.validation import OptionalText, RequiredText
from asistencia.database import get_db
from asistencia.models.grade import Grade
from asistencia.models.student import Student
from asistencia.models.user import User
from asistencia.routes.common import (
    IN_USE_MESSAGE,
    ApiModel,
    ensure_reference,
    get_or_404,
    integrity_failure,
    storage_failure,
)

router = APIRouter(prefix='/students', tags=['students'])

STUDENT_NOT_FOUND = 'Estudiante no encontrado'
UNKNOWN_GRADE = 'El grado no existe'
UNKNOWN_USER = 'El usuario no existe'
INVALID_REFERENCE = 'Referencia inválida'


class StudentRequest(ApiModel):
    name: RequiredText
    grade_id: int
    code: OptionalText = None
    user_id: int | None = None


class StudentResponse(ApiModel):
    id: int
    name: str
    grade_id: int
    code: str | None = None
    user_id: int | None = None


def _apply(db: Session, student: Student, data: StudentRequest) -> None:
    ensure_reference(db, Grade, data.grade_id, UNKNOWN_GRADE)
    ensure_reference(db, User, data.user_id, UNKNOWN_USER)
    student.name = data.name.strip()
    student.grade_id = data.grade_id
    student.code = data.code
    student.user_id = data.user_id


@router.get('', response_model=list[StudentResponse])
def list_students(
    grade_id: int | None = Query(default=None, alias='gradeId'),
    db: Session = Depends(get_db),
):
    try:
        query = db.query(Student)
        if grade_id is not None:
            query = query.filter(Student.grade_id == grade_id)
        return query.order_by(Student.name.asc()).all()
    except SQLAlchemyError as exc:
        raise storage_failure(db, exc, 'Listing students') from exc


@router.get('/{student_id}', response_model=StudentResponse)
def get_student(student_id: int, db: Session = Depends(get_db)):
    try:
        return get_or_404(db, Student, student_id, STUDENT_NOT_FOUND)
    except SQLAlchemyError as exc:
        raise storage_failure(db, exc, 'Student lookup') from exc


@router.post('', response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
def create_student(
    data: StudentRequest,
    _user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        student = Student()
        _apply(db, student, data)
        db.add(student)
        db.commit()
        db.refresh(student)
        return student
    except IntegrityError as exc:
        raise integrity_failure(db, exc, INVALID_REFERENCE) from exc
    except SQLAlchemyError as exc:
        raise storage_failure(db, exc, 'Creating student') from exc


@router.put('/{student_id}', response_model=StudentResponse)
def update_student(
    student_id: int,
    data: StudentRequest,
    _user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        student = get_or_404(db, Student, student_id, STUDENT_NOT_FOUND)
        _apply(db, student, data)
        db.commit()
        db.refresh(student)
        return student
    except IntegrityError as exc:
        raise integrity_failure(db, exc, INVALID_REFERENCE) from exc
    except SQLAlchemyError as exc:
        raise storage_failure(db, exc, 'Updating student') from exc


@router.delete('/{student_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_student(
    student_id: int,
    _user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        student = get_or_404(db, Student, student_id, STUDENT_NOT_FOUND)
        db.delete(student)
        db.commit()
    except IntegrityError as exc:
        raise integrity_failure(db, exc, IN_USE_MESSAGE) from exc
    except SQLAlchemyError as exc:
        raise storage_failure(db, exc, 'Deleting student') from exc

    return Response(status_code=status.HTTP_204_NO_CONTENT)
