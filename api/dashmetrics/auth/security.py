from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from fastapi import HTTPException

from .. import config

ALGORITHM = "HS256"


def create_admin_access_token(
    *,
    admin_id: str,
    email: str,
    role: str,
    ttl_minutes: int = 60,
) -> str:
    if not config.JWT_SECRET:
        raise HTTPException(status_code=500, detail="JWT secret not configured")
    now = datetime.now(timezone.utc)
    exp = now + timedelta(minutes=max(5, int(ttl_minutes)))
    payload: dict[str, Any] = {
        "sub": admin_id,
        "email": email,
        "role": role,
        "scope": "admin",
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, config.JWT_SECRET, algorithm=ALGORITHM)


def decode_admin_access_token(token: str) -> dict[str, Any]:
    if not config.JWT_SECRET:
        raise HTTPException(status_code=500, detail="JWT secret not configured")
    try:
        payload = jwt.decode(token, config.JWT_SECRET, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError as exc:
        raise HTTPException(status_code=401, detail="Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise HTTPException(status_code=401, detail="Invalid token") from exc
    if not isinstance(payload, dict) or payload.get("scope") != "admin":
        raise HTTPException(status_code=401, detail="Invalid admin token")
    return payload
