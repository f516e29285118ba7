import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy.exc import SQLAlchemyError

from asistencia.core import config
from asistencia.core.cors import PreflightCORSMiddleware, cors_options
from asistencia.core.errors import register_error_handlers
from asistencia.core.logging_config import configure_logging
from asistencia.database import Base, engine, ensure_schema
from asistencia.models import attendance, grade, level, student, teacher, user  # noqa: F401
from asistencia.routes import (
    attendance_routes,
    auth_routes,
    debug_routes,
    grade_routes,
    level_routes,
    student_routes,
    teacher_routes,
    user_routes,
)
from asistencia.spa import mount_frontend

logger = logging.getLogger(__name__)

API_PREFIX = '/api'


def initialize_database() -> None:
    try:
        Base.metadata.create_all(bind=engine)
        ensure_schema()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')


@asynccontextmanager
async def lifespan(_app: FastAPI):
    initialize_database()
    yield


def create_app() -> FastAPI:
    configure_logging()
    config.validate_runtime_config()

    app = FastAPI(title='Asistencia API', lifespan=lifespan)

    app.add_middleware(PreflightCORSMiddleware, **cors_options())
    register_error_handlers(app)

    app.include_router(auth_routes.router, prefix=API_PREFIX)
    app.include_router(user_routes.router, prefix=API_PREFIX)
    app.include_router(teacher_routes.router, prefix=API_PREFIX)
    app.include_router(level_routes.router, prefix=API_PREFIX)
    app.include_router(grade_routes.router, prefix=API_PREFIX)
    app.include_router(student_routes.router, prefix=API_PREFIX)
    app.include_router(attendance_routes.router, prefix=API_PREFIX)

    if config.is_production():
        logger.info('Production mode: debug endpoints disabled')
    else:
        app.include_router(debug_routes.router, prefix=API_PREFIX)

    mount_frontend(app)
    return app


app = create_app()
