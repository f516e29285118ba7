"""Level model definitions."""

from sqlalchemy import Column, Integer, String
from asistencia.database import Base


class Level(Base):
    """Represents a school level, e.g. primary or secondary."""
    __tablename__ = "levels"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(String(255))
