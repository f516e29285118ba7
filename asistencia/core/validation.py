from typing import Annotated

from pydantic import AfterValidator, BeforeValidator


def _require_text(value: str) -> str:
    if not value.strip():
        raise ValueError('Field must not be blank.')
    return value


def _blank_to_none(value):
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


# Present and not just whitespace. The value itself is left untouched.
RequiredText = Annotated[str, AfterValidator(_require_text)]

# Trimmed, with empty strings stored as NULL.
OptionalText = Annotated[str | None, BeforeValidator(_blank_to_none)]
