"""Student model definitions."""

from sqlalchemy import Column, Integer, String, ForeignKey
from asistencia.database import Base


class Student(Base):
    """Represents a student enrolled in a grade."""
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    code = Column(String(50))
    grade_id = Column(Integer, ForeignKey("grades.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"))
