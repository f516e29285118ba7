from datetime import date

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from asistencia.auth.dependencies import get_current_user_id
from asistencia.core.errors import BadRequest
from asistencia.core.validation import OptionalText, RequiredText
from asistencia.database import get_db
from asistencia.models.attendance import ATTENDANCE_STATUSES, AttendanceRecord
from asistencia.models.student import Student
from asistencia.routes.common import (
    ApiModel,
    ensure_reference,
    get_or_404,
    integrity_failure,
    storage_failure,
)

router = APIRouter(prefix='/attendance', tags=['attendance'])

RECORD_NOT_FOUND = 'Registro de asistencia no encontrado'
UNKNOWN_STUDENT = 'El estudiante no existe'
INVALID_STATUS = 'Estado inválido'
DUPLICATE_RECORD = 'Ya existe un registro de asistencia para esa fecha'


class AttendanceRequest(ApiModel):
    student_id: int
    date: date
    status: RequiredText
    notes: OptionalText = None


class AttendanceResponse(ApiModel):
    id: int
    student_id: int
    date: date
    status: str
    notes: str | None = None
    recorded_by: int | None = None


def normalize_status(raw_status: str) -> str:
    normalized = raw_status.strip().lower()
    if normalized not in ATTENDANCE_STATUSES:
        raise BadRequest(INVALID_STATUS)
    return normalized


def _find_duplicate(db: Session, student_id: int, day: date, exclude_id: int | None = None):
    query = db.query(AttendanceRecord.id).filter(
        AttendanceRecord.student_id == student_id,
        AttendanceRecord.date == day,
    )
    if exclude_id is not None:
        query = query.filter(AttendanceRecord.id != exclude_id)
    return query.first()


@router.get('', response_model=list[AttendanceResponse])
def list_attendance(
    student_id: int | None = Query(default=None, alias='studentId'),
    grade_id: int | None = Query(default=None, alias='gradeId'),
    day: date | None = Query(default=None, alias='date'),
    _user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        query = db.query(AttendanceRecord)
        if student_id is not None:
            query = query.filter(AttendanceRecord.student_id == student_id)
        if grade_id is not None:
            query = query.join(Student, Student.id == AttendanceRecord.student_id).filter(
                Student.grade_id == grade_id
            )
        if day is not None:
            query = query.filter(AttendanceRecord.date == day)
        return query.order_by(AttendanceRecord.date.desc(), AttendanceRecord.student_id.asc()).all()
    except SQLAlchemyError as exc:
        raise storage_failure(db, exc, 'Listing attendance') from exc


@router.get('/{record_id}', response_model=AttendanceResponse)
def get_attendance_record(
    record_id: int,
    _user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        return get_or_404(db, AttendanceRecord, record_id, RECORD_NOT_FOUND)
    except SQLAlchemyError as exc:
        raise storage_failure(db, exc, 'Attendance lookup') from exc


@router.post('', response_model=AttendanceResponse, status_code=status.HTTP_201_CREATED)
def create_attendance_record(
    data: AttendanceRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    record_status = normalize_status(data.status)

    try:
        ensure_reference(db, Student, data.student_id, UNKNOWN_STUDENT)
        if _find_duplicate(db, data.student_id, data.date) is not None:
            raise BadRequest(DUPLICATE_RECORD)

        record = AttendanceRecord(
            student_id=data.student_id,
            date=data.date,
            status=record_status,
            notes=data.notes,
            recorded_by=user_id,
        )
        db.add(record)
        db.commit()
        db.refresh(record)
        return record
    except IntegrityError as exc:
        raise integrity_failure(db, exc, DUPLICATE_RECORD) from exc
    except SQLAlchemyError as exc:
        raise storage_failure(db, exc, 'Creating attendance record') from exc


@router.put('/{record_id}', response_model=AttendanceResponse)
def update_attendance_record(
    record_id: int,
    data: AttendanceRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    record_status = normalize_status(data.status)

    try:
        record = get_or_404(db, AttendanceRecord, record_id, RECORD_NOT_FOUND)
        ensure_reference(db, Student, data.student_id, UNKNOWN_STUDENT)
        if _find_duplicate(db, data.student_id, data.date, exclude_id=record.id) is not None:
            raise BadRequest(DUPLICATE_RECORD)

        record.student_id = data.student_id
        record.date = data.date
        record.status = record_status
        record.notes = data.notes
        record.recorded_by = user_id
        db.commit()
        db.refresh(record)
        return record
    except IntegrityError as exc:
        raise integrity_failure(db, exc, DUPLICATE_RECORD) from exc
    except SQLAlchemyError as exc:
        raise storage_failure(db, exc, 'Updating attendance record') from exc


@router.delete('/{record_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_attendance_record(
    record_id: int,
    _user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        record = get_or_404(db, AttendanceRecord, record_id, RECORD_NOT_FOUND)
        db.delete(record)
        db.commit()
    except SQLAlchemyError as exc:
        raise storage_failure(db, exc, 'Deleting attendance record') from exc

    return Response(status_code=status.HTTP_204_NO_CONTENT)
