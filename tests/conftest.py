import os

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')
os.environ.setdefault('BCRYPT_ROUNDS', '4')

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from asistencia.auth import recovery_tokens  # noqa: E402
from asistencia.database import Base  # noqa: E402
from asistencia.models import attendance, grade, level, student, teacher, user  # noqa: E402,F401
from asistencia.routes.auth_routes import SignupRequest, signup  # noqa: E402


class FakeClock:
    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def db():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def recovery_store(monkeypatch: pytest.MonkeyPatch, clock: FakeClock):
    store = recovery_tokens.RecoveryTokenStore(ttl_seconds=15 * 60, clock=clock)
    monkeypatch.setattr(recovery_tokens, 'store', store)
    return store


@pytest.fixture
def make_user(db):
    def _make_user(
        email: str = 'a@x.com',
        password: str = 'p',
        recovery_word: str = 'r',
        role: str = 'student',
        name: str = 'A',
    ) -> dict:
        request = SignupRequest(
            name=name,
            email=email,
            password=password,
            recoveryWord=recovery_word,
            role=role,
        )
        return signup(request, db=db)['user']

    return _make_user
