import re
from typing import Optional

from todoapp.errors import ServiceError
from todoapp.models.todo import MAX_DESCRIPTION_LENGTH, MAX_TITLE_LENGTH
from todoapp.models.user import (
    MAX_EMAIL_LENGTH,
    MAX_PASSWORD_LENGTH,
    MAX_USERNAME_LENGTH,
    MIN_EMAIL_LENGTH,
    MIN_PASSWORD_LENGTH,
    MIN_USERNAME_LENGTH,
)

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]+$")
EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9+_.-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")

# largest value a signed 64-bit INTEGER column can hold
MAX_ID = 2**63 - 1
MAX_PASSWORD_BYTES = 72


def require_id(value: Optional[int], label: str) -> int:
    if value is None:
        raise ServiceError.invalid(f"{label} ID cannot be null")
    if value <= 0:
        raise ServiceError.invalid(f"{label} ID must be positive")
    if value > MAX_ID:
        raise ServiceError.invalid(f"{label} ID must not exceed {MAX_ID}")
    return value


def require_text(value: Optional[str], message: str) -> str:
    """Return ``value`` stripped, or raise when it is missing or blank."""
    if value is None or not value.strip():
        raise ServiceError.invalid(message)
    return value.strip()


def normalize_username(username: Optional[str]) -> str:
    username = require_text(username, "Username cannot be empty")
    if not MIN_USERNAME_LENGTH <= len(username) <= MAX_USERNAME_LENGTH:
        raise ServiceError.invalid(
            f"Username length must be between {MIN_USERNAME_LENGTH} and {MAX_USERNAME_LENGTH} characters"
        )
    if not USERNAME_PATTERN.match(username):
        raise ServiceError.invalid("Username can only contain letters, numbers, and underscores")
    return username


def normalize_email(email: Optional[str]) -> str:
    email = require_text(email, "Email cannot be empty").lower()
    if not MIN_EMAIL_LENGTH <= len(email) <= MAX_EMAIL_LENGTH:
        raise ServiceError.invalid(
            f"Email length must be between {MIN_EMAIL_LENGTH} and {MAX_EMAIL_LENGTH} characters"
        )
    if not EMAIL_PATTERN.match(email):
        raise ServiceError.invalid("Invalid email format")
    return email


def check_password(password: Optional[str]) -> str:
    # passwords are hashed as given, never trimmed
    if password is None or not password.strip():
        raise ServiceError.invalid("Password cannot be empty")
    if not MIN_PASSWORD_LENGTH <= len(password) <= MAX_PASSWORD_LENGTH:
        raise ServiceError.invalid(
            f"Password length must be between {MIN_PASSWORD_LENGTH} and {MAX_PASSWORD_LENGTH} characters"
        )
    # bcrypt ignores everything past the first 72 bytes
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ServiceError.invalid(f"Password cannot exceed {MAX_PASSWORD_BYTES} bytes")
    return password


def normalize_title(title: Optional[str]) -> str:
    title = require_text(title, "Todo title cannot be empty")
    if len(title) > MAX_TITLE_LENGTH:
        raise ServiceError.invalid(f"Todo title length must be between 1 and {MAX_TITLE_LENGTH} characters")
    return title


def normalize_description(description: Optional[str]) -> Optional[str]:
    if description is None:
        return None
    description = description.strip()
    if len(description) > MAX_DESCRIPTION_LENGTH:
        raise ServiceError.invalid(f"Todo description cannot exceed {MAX_DESCRIPTION_LENGTH} characters")
    return description
