"""Grade model definitions."""

from sqlalchemy import Column, Integer, String, ForeignKey
from asistencia.database import Base


class Grade(Base):
    """Represents a grade (class group) within a level."""
    __tablename__ = "grades"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    level_id = Column(Integer, ForeignKey("levels.id"), nullable=False, index=True)
    teacher_id = Column(Integer, ForeignKey("teachers.id"))
