"""Teacher model definitions."""

from sqlalchemy import Column, Integer, String, ForeignKey
from asistencia.database import Base


class Teacher(Base):
    """Represents a teacher, optionally linked to a user account."""
    __tablename__ = "teachers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255))
    phone = Column(String(50))
    user_id = Column(Integer, ForeignKey("users.id"))
