import pytest
from sqlalchemy.exc import OperationalError

from asistencia.auth.passwords import verify_secret
from asistencia.core.errors import NotFound, ServerError
from asistencia.routes.debug_routes import dump_users
from asistencia.routes.user_routes import get_user_by_email, list_users, me


class _BrokenSession:
    def query(self, *_args, **_kwargs):
        raise OperationalError('SELECT * FROM users', {}, Exception('database is down'))


def test_list_users_returns_public_projections_in_id_order(db, make_user) -> None:
    make_user(email='b@x.com', name='B', role='teacher')
    make_user(email='a@x.com', name='A')

    users = list_users(_user_id=1, db=db)

    assert users == [
        {'id': 1, 'name': 'B', 'email': 'b@x.com', 'role': 'teacher'},
        {'id': 2, 'name': 'A', 'email': 'a@x.com', 'role': 'student'},
    ]


def test_get_user_by_email_returns_projection(db, make_user) -> None:
    make_user()

    assert get_user_by_email('a@x.com', _user_id=1, db=db) == {
        'id': 1,
        'name': 'A',
        'email': 'a@x.com',
        'role': 'student',
    }


def test_get_user_by_email_returns_not_found_for_unknown_email(db, make_user) -> None:
    make_user()

    with pytest.raises(NotFound) as exception_info:
        get_user_by_email('nobody@x.com', _user_id=1, db=db)

    assert exception_info.value.status_code == 404
    assert exception_info.value.message == 'Usuario no encontrado'


def test_list_users_reports_database_error() -> None:
    with pytest.raises(ServerError) as exception_info:
        list_users(_user_id=1, db=_BrokenSession())

    assert exception_info.value.message == 'Database error'


def test_me_returns_the_caller(db, make_user) -> None:
    make_user()
    second = make_user(email='b@x.com', name='B', role='admin')

    assert me(user_id=second['id'], db=db) == second


def test_debug_dump_returns_raw_rows(db, make_user) -> None:
    make_user()

    rows = dump_users(db=db)

    assert len(rows) == 1
    assert set(rows[0]) == {'id', 'name', 'email', 'password', 'recovery_word', 'role'}
    assert verify_secret('p', rows[0]['password'])


def test_debug_dump_reports_its_own_error_message() -> None:
    with pytest.raises(ServerError) as exception_info:
        dump_users(db=_BrokenSession())

    assert exception_info.value.status_code == 500
    assert exception_info.value.message == 'Error en modo debug'
