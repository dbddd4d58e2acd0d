"""Stateless CSRF tokens for the submission form."""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from quotebook.config import Settings, settings

CSRF_PURPOSE = "csrf"


def issue_token(config: Settings | None = None) -> str:
    config = config or settings
    expire = datetime.now(timezone.utc) + timedelta(minutes=config.csrf_expire_minutes)
    payload = {"purpose": CSRF_PURPOSE, "exp": expire}
    return jwt.encode(payload, config.secret_key, algorithm=config.csrf_algorithm)


def verify_token(token: Any, config: Settings | None = None) -> bool:
    # multipart bodies can carry an UploadFile under the token name
    if not token or not isinstance(token, str):
        return False
    config = config or settings
    try:
        payload = jwt.decode(token, config.secret_key, algorithms=[config.csrf_algorithm])
    except JWTError:
        return False
    return payload.get("purpose") == CSRF_PURPOSE
