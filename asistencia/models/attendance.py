"""Attendance model definitions."""

from sqlalchemy import Column, Date, ForeignKey, Integer, String, UniqueConstraint
from asistencia.database import Base

ATTENDANCE_STATUSES = ('present', 'absent', 'late', 'excused')


class AttendanceRecord(Base):
    """Represents one student's attendance on one day."""
    __tablename__ = "attendance"
    __table_args__ = (
        UniqueConstraint('student_id', 'date', name='uq_attendance_student_date'),
    )

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False)
    notes = Column(String(500))
    recorded_by = Column(Integer, ForeignKey("users.id"))
