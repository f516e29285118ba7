import os
from pathlib import Path

from dotenv import load_dotenv


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if value is None:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./asistencia.db")

CORS_ORIGINS = _get_list(
    os.getenv("CORS_ORIGINS"),
    default=["https://jricica.github.io", "http://localhost:5173"],
)

FRONTEND_DIST_DIR = Path(
    os.getenv("FRONTEND_DIST_DIR", str(Path(__file__).resolve().parents[2] / "dist"))
)

RECOVERY_TOKEN_TTL_MINUTES = int(os.getenv("RECOVERY_TOKEN_TTL_MINUTES", "15"))

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", "60"))

# Bare integer user ids in the Authorization header, as the frontend sends them.
ALLOW_LEGACY_ID_HEADER = _get_bool(os.getenv("ALLOW_LEGACY_ID_HEADER"), default=True)

BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))


def is_production() -> bool:
    return APP_ENV.strip().lower() in {"prod", "production"}


def validate_runtime_config() -> None:
    if is_production() and JWT_SECRET_KEY == "change-me":
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
