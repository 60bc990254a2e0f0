from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from fastapi import Depends, Header, HTTPException
import jwt

from .config import settings


@dataclass(frozen=True)
class AuthContext:
    user_id: str
    username: str
    is_admin: bool


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash.
        return False


def create_access_token(user_id: str, username: str, is_admin: bool = False) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "username": username,
        "is_admin": is_admin,
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt_exp_minutes),
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> AuthContext:
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError as exc:
        raise HTTPException(status_code=401, detail="Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise HTTPException(status_code=401, detail="Invalid token") from exc

    user_id = payload.get("sub")
    username = payload.get("username")
    is_admin = bool(payload.get("is_admin", False))
    if not user_id or not username:
        raise HTTPException(status_code=401, detail="Malformed token payload")

    return AuthContext(user_id=user_id, username=username, is_admin=is_admin)


def get_bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing Authorization header")

    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid Authorization header")
    return parts[1].strip()


def auth_context_from_header(authorization: Optional[str] = Header(default=None)) -> AuthContext:
    token = get_bearer_token(authorization)
    return decode_token(token)


def require_admin(auth: AuthContext = Depends(auth_context_from_header)) -> AuthContext:
    if not auth.is_admin:
        raise HTTPException(status_code=403, detail="Administrator role required")
    return auth
