import logging

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from asistencia.auth import jwt_handler
from asistencia.auth import recovery_tokens
from asistencia.auth.passwords import hash_secret, verify_secret
from asistencia.core.errors import (
    DuplicateEmail,
    InvalidCredentials,
    InvalidRecovery,
    InvalidRole,
    InvalidToken,
    ServerError,
)
from asistencia.core.validation import RequiredText
from asistencia.database import get_db
from asistencia.models.user import ROLES, User

router = APIRouter(tags=['auth'])

logger = logging.getLogger(__name__)


class PublicUser(BaseModel):
    id: int
    name: str
    email: str
    role: str

    model_config = ConfigDict(from_attributes=True)


class UserEnvelope(BaseModel):
    user: PublicUser


class LoginRequest(BaseModel):
    email: RequiredText
    password: RequiredText


class SignupRequest(BaseModel):
    name: RequiredText
    email: RequiredText
    password: RequiredText
    recovery_word: RequiredText = Field(alias='recoveryWord')
    role: RequiredText

    model_config = ConfigDict(populate_by_name=True)


class RecoverPasswordRequest(BaseModel):
    email: RequiredText
    recovery_word: RequiredText = Field(alias='recoveryWord')

    model_config = ConfigDict(populate_by_name=True)


class ResetPasswordRequest(BaseModel):
    token: RequiredText
    password: RequiredText


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = 'bearer'
    user: PublicUser


class RecoveryTokenResponse(BaseModel):
    token: str


class ResetPasswordResponse(BaseModel):
    success: bool


def authenticate(db: Session, email: str, password: str) -> User:
    try:
        user = db.query(User).filter(User.email == email).first()
    except SQLAlchemyError as exc:
        logger.exception('Login lookup failed')
        raise ServerError() from exc

    # Same error for an unknown email and a wrong password.
    if user is None or not verify_secret(password, user.password):
        raise InvalidCredentials()
    return user


@router.post('/login', response_model=UserEnvelope)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    user = authenticate(db, data.email, data.password)
    return {'user': user.public_projection()}


@router.post('/token', response_model=TokenResponse)
def issue_access_token(data: LoginRequest, db: Session = Depends(get_db)):
    user = authenticate(db, data.email, data.password)
    return {
        'access_token': jwt_handler.create_access_token(user.id),
        'token_type': 'bearer',
        'user': user.public_projection(),
    }


@router.post('/signup', response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
def signup(data: SignupRequest, db: Session = Depends(get_db)):
    if data.role not in ROLES:
        raise InvalidRole()

    try:
        # Fast path only; the unique index on users.email is the real guard.
        if db.query(User.id).filter(User.email == data.email).first() is not None:
            raise DuplicateEmail()

        user = User(
            name=data.name,
            email=data.email,
            password=hash_secret(data.password),
            recovery_word=hash_secret(data.recovery_word),
            role=data.role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateEmail() from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Signup failed')
        raise ServerError() from exc

    logger.info('Created user %s with role %s', user.id, user.role)
    return {'user': user.public_projection()}


@router.post('/recover-password', response_model=RecoveryTokenResponse)
def recover_password(data: RecoverPasswordRequest, db: Session = Depends(get_db)):
    try:
        user = db.query(User).filter(User.email == data.email).first()
    except SQLAlchemyError as exc:
        logger.exception('Recovery lookup failed')
        raise ServerError() from exc

    if user is None or not verify_secret(data.recovery_word, user.recovery_word):
        raise InvalidRecovery()

    token = recovery_tokens.store.issue(user.id)
    logger.info('Issued recovery token for user %s', user.id)
    return {'token': token}


@router.post('/reset-password', response_model=ResetPasswordResponse)
def reset_password(data: ResetPasswordRequest, db: Session = Depends(get_db)):
    grant = recovery_tokens.store.consume(data.token)
    if grant is None:
        raise InvalidToken()

    try:
        updated = db.query(User).filter(User.id == grant.user_id).update(
            {User.password: hash_secret(data.password)},
            synchronize_session=False,
        )
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        recovery_tokens.store.restore(data.token, grant)
        logger.exception('Password reset failed for user %s', grant.user_id)
        raise ServerError() from exc

    if not updated:
        raise InvalidToken()

    logger.info('Password reset for user %s', grant.user_id)
    return {'success': True}
