import bcrypt

from asistencia.core import config

# bcrypt only looks at the first 72 bytes and newer releases reject longer input.
BCRYPT_MAX_BYTES = 72


def _encode(secret: str) -> bytes:
    return secret.encode('utf-8')[:BCRYPT_MAX_BYTES]


def hash_secret(secret: str) -> str:
    salt = bcrypt.gensalt(rounds=config.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_encode(secret), salt).decode('utf-8')


def verify_secret(secret: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(_encode(secret), hashed.encode('utf-8'))
    except ValueError:
        # Stored value is not a bcrypt hash.
        return False
