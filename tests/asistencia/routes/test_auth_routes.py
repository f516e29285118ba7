import pytest
from pydantic import ValidationError
from sqlalchemy.exc import OperationalError

from asistencia.auth.dependencies import parse_authorization
from asistencia.auth.passwords import verify_secret
from asistencia.core.errors import (
    DuplicateEmail,
    InvalidCredentials,
    InvalidRecovery,
    InvalidRole,
    InvalidToken,
    ServerError,
)
from asistencia.models.user import User
from asistencia.routes import auth_routes
from asistencia.routes.auth_routes import (
    LoginRequest,
    RecoverPasswordRequest,
    ResetPasswordRequest,
    SignupRequest,
    issue_access_token,
    login,
    recover_password,
    reset_password,
    signup,
)
from asistencia.routes.user_routes import get_user_by_email


def _signup_request(**overrides) -> SignupRequest:
    payload = {
        'name': 'A',
        'email': 'a@x.com',
        'password': 'p',
        'recoveryWord': 'r',
        'role': 'student',
    }
    payload.update(overrides)
    return SignupRequest(**payload)


def _recover(db, email: str = 'a@x.com', recovery_word: str = 'r') -> str:
    request = RecoverPasswordRequest(email=email, recoveryWord=recovery_word)
    return recover_password(request, db=db)['token']


def test_signup_returns_public_projection_of_new_user(db) -> None:
    response = signup(_signup_request(), db=db)

    assert response == {'user': {'id': 1, 'name': 'A', 'email': 'a@x.com', 'role': 'student'}}


def test_signup_stores_hashed_credentials(db) -> None:
    signup(_signup_request(), db=db)

    stored = db.query(User).filter(User.email == 'a@x.com').one()
    assert stored.password != 'p'
    assert verify_secret('p', stored.password)
    assert verify_secret('r', stored.recovery_word)


def test_signups_with_distinct_emails_get_distinct_ids(db) -> None:
    emails = ['a@x.com', 'b@x.com', 'c@x.com']

    ids = [signup(_signup_request(email=email), db=db)['user']['id'] for email in emails]

    assert len(set(ids)) == len(emails)
    for user_id, email in zip(ids, emails):
        assert get_user_by_email(email, _user_id=user_id, db=db)['id'] == user_id


def test_signup_with_existing_email_fails_and_creates_no_row(db) -> None:
    signup(_signup_request(), db=db)

    with pytest.raises(DuplicateEmail) as exception_info:
        signup(_signup_request(name='Otro'), db=db)

    assert exception_info.value.status_code == 400
    assert exception_info.value.message == 'El email ya existe'
    assert db.query(User).count() == 1


def test_signup_rejects_unknown_role(db) -> None:
    with pytest.raises(InvalidRole) as exception_info:
        signup(_signup_request(role='janitor'), db=db)

    assert exception_info.value.status_code == 400
    assert exception_info.value.message == 'Rol inválido'
    assert db.query(User).count() == 0


@pytest.mark.parametrize('role', ['teacher', 'student', 'admin'])
def test_signup_accepts_each_role(db, role: str) -> None:
    response = signup(_signup_request(role=role), db=db)

    assert response['user']['role'] == role


@pytest.mark.parametrize('missing_field', ['name', 'email', 'password', 'recoveryWord', 'role'])
def test_signup_request_requires_every_field(missing_field: str) -> None:
    payload = {'name': 'A', 'email': 'a@x.com', 'password': 'p', 'recoveryWord': 'r', 'role': 'student'}
    del payload[missing_field]

    with pytest.raises(ValidationError):
        SignupRequest(**payload)


def test_request_models_reject_blank_strings() -> None:
    with pytest.raises(ValidationError):
        LoginRequest(email='   ', password='p')

    with pytest.raises(ValidationError):
        ResetPasswordRequest(token='abc', password='')


def test_login_returns_user_for_matching_credentials(db, make_user) -> None:
    make_user()

    response = login(LoginRequest(email='a@x.com', password='p'), db=db)

    assert response == {'user': {'id': 1, 'name': 'A', 'email': 'a@x.com', 'role': 'student'}}


@pytest.mark.parametrize(
    ('email', 'password'),
    [
        ('a@x.com', 'wrong'),
        ('nobody@x.com', 'p'),
        ('A@X.COM', 'p'),
    ],
)
def test_login_mismatch_never_says_which_field_was_wrong(db, make_user, email: str, password: str) -> None:
    make_user()

    with pytest.raises(InvalidCredentials) as exception_info:
        login(LoginRequest(email=email, password=password), db=db)

    assert exception_info.value.status_code == 401
    assert exception_info.value.message == 'Credenciales incorrectas'


def test_issue_access_token_returns_bearer_token_accepted_by_the_gate(db, make_user) -> None:
    user = make_user()

    response = issue_access_token(LoginRequest(email='a@x.com', password='p'), db=db)

    assert response['token_type'] == 'bearer'
    assert response['user'] == user
    assert parse_authorization(f"Bearer {response['access_token']}") == user['id']


def test_recover_password_rejects_wrong_recovery_word(db, make_user, recovery_store) -> None:
    make_user()

    with pytest.raises(InvalidRecovery) as exception_info:
        _recover(db, recovery_word='wrong')

    assert exception_info.value.status_code == 401
    assert exception_info.value.message == 'Datos incorrectos'
    assert len(recovery_store) == 0


def test_recover_password_rejects_unknown_email(db, recovery_store) -> None:
    with pytest.raises(InvalidRecovery):
        _recover(db, email='nobody@x.com')


def test_recover_then_reset_changes_the_password(db, make_user, recovery_store) -> None:
    make_user()
    token = _recover(db)

    response = reset_password(ResetPasswordRequest(token=token, password='nueva'), db=db)

    assert response == {'success': True}
    with pytest.raises(InvalidCredentials):
        login(LoginRequest(email='a@x.com', password='p'), db=db)
    assert login(LoginRequest(email='a@x.com', password='nueva'), db=db)['user']['id'] == 1


def test_reset_token_is_accepted_exactly_once(db, make_user, recovery_store) -> None:
    make_user()
    token = _recover(db)
    reset_password(ResetPasswordRequest(token=token, password='nueva'), db=db)

    with pytest.raises(InvalidToken) as exception_info:
        reset_password(ResetPasswordRequest(token=token, password='otra'), db=db)

    assert exception_info.value.status_code == 400
    assert exception_info.value.message == 'Token inválido'
    assert login(LoginRequest(email='a@x.com', password='nueva'), db=db)['user']['id'] == 1


def test_reset_rejects_token_after_expiry(db, make_user, recovery_store, clock) -> None:
    make_user()
    token = _recover(db)

    clock.advance(15 * 60 + 0.5)

    with pytest.raises(InvalidToken):
        reset_password(ResetPasswordRequest(token=token, password='nueva'), db=db)
    assert login(LoginRequest(email='a@x.com', password='p'), db=db)['user']['id'] == 1


def test_reset_rejects_token_that_was_never_issued(db, recovery_store) -> None:
    with pytest.raises(InvalidToken):
        reset_password(ResetPasswordRequest(token='made-up', password='nueva'), db=db)


def test_reset_rejects_token_for_user_that_no_longer_exists(db, recovery_store) -> None:
    token = recovery_store.issue(user_id=999)

    with pytest.raises(InvalidToken):
        reset_password(ResetPasswordRequest(token=token, password='nueva'), db=db)


def test_reset_keeps_token_usable_when_storage_fails(
    db,
    make_user,
    recovery_store,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    make_user()
    token = _recover(db)

    def _failing_hash(_secret: str) -> str:
        raise OperationalError('UPDATE users', {}, Exception('database is down'))

    with monkeypatch.context() as patch:
        patch.setattr(auth_routes, 'hash_secret', _failing_hash)
        with pytest.raises(ServerError) as exception_info:
            reset_password(ResetPasswordRequest(token=token, password='nueva'), db=db)

    assert exception_info.value.status_code == 500
    assert exception_info.value.message == 'Error en el servidor'
    assert reset_password(ResetPasswordRequest(token=token, password='nueva'), db=db) == {'success': True}
