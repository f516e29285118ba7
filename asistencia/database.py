import sqlite3
from threading import Lock

from sqlalchemy import create_engine, event, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from asistencia.core import config


@event.listens_for(Engine, 'connect')
def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute('PRAGMA foreign_keys=ON')
        cursor.close()


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        # Handlers run in the threadpool, so sessions may change threads.
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


engine = create_engine(config.DATABASE_URL, **_engine_options(config.DATABASE_URL))

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_schema_checked = False

UNIQUE_INDEXES = (
    ('users', 'uq_users_email', ('email',)),
    ('attendance', 'uq_attendance_student_date', ('student_id', 'date')),
)


def _unique_column_sets(inspector, table_name: str) -> set[tuple[str, ...]]:
    column_sets = {
        tuple(index['column_names'])
        for index in inspector.get_indexes(table_name)
        if index.get('unique')
    }
    column_sets.update(
        tuple(constraint['column_names'])
        for constraint in inspector.get_unique_constraints(table_name)
    )
    return column_sets


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def ensure_schema() -> None:
    """Add the uniqueness guards to tables created before they existed."""
    global _schema_checked

    if _schema_checked:
        return

    with _schema_lock:
        if _schema_checked:
            return

        inspector = inspect(engine)
        table_names = set(inspector.get_table_names())

        with engine.begin() as connection:
            for table_name, index_name, columns in UNIQUE_INDEXES:
                if table_name not in table_names:
                    continue
                if columns in _unique_column_sets(inspector, table_name):
                    continue
                connection.execute(
                    text(f'CREATE UNIQUE INDEX IF NOT EXISTS {index_name} ON {table_name}({", ".join(columns)})')
                )

        _schema_checked = True
