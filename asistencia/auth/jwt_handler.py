from datetime import datetime, timedelta, timezone

import jwt

from asistencia.core import config


def create_access_token(user_id: int, expires_minutes: int | None = None) -> str:
    issued_at = datetime.now(timezone.utc)
    expire = issued_at + timedelta(minutes=expires_minutes or config.JWT_EXPIRES_MINUTES)
    payload = {"sub": str(user_id), "exp": expire, "iat": issued_at}
    return jwt.encode(payload, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_user_id(token: str) -> int | None:
    """Return the user id a valid token was issued for, or None."""
    try:
        payload = jwt.decode(token, config.JWT_SECRET_KEY, algorithms=[config.JWT_ALGORITHM])
    except jwt.PyJWTError:
        return None

    subject = str(payload.get("sub") or "")
    if not (subject.isascii() and subject.isdigit()):
        return None
    return int(subject)
