"""User model definitions."""

from sqlalchemy import Column, Integer, String
from asistencia.database import Base

ROLES = ('teacher', 'student', 'admin')


class User(Base):
    """Represents an application user."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)  # bcrypt hash
    recovery_word = Column(String(255), nullable=False)  # bcrypt hash
    role = Column(String(20), nullable=False)  # teacher/student/admin

    def public_projection(self) -> dict:
        return {'id': self.id, 'name': self.name, 'email': self.email, 'role': self.role}
