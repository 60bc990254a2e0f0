from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException
from sqlalchemy import select

from ..db import get_db
from ..models import Role, User
from ..reference_data import ROLE_ADMIN
from ..schemas import LoginRequest, LoginResponse
from ..security import create_access_token, verify_password

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger("muac.auth")


@router.post("/login", response_model=LoginResponse)
async def login(payload: LoginRequest) -> LoginResponse:
    with get_db() as session:
        row = session.execute(
            select(User.id, User.username, User.password_hash, User.active, Role.name)
            .join(Role, User.role_id == Role.id)
            .where(User.username == payload.username)
        ).first()

    if row is None or not verify_password(payload.password, row.password_hash):
        logger.info("Login rejected", extra={"event": "login_rejected", "reason": "bad_credentials"})
        raise HTTPException(status_code=401, detail="Invalid username or password")
    if row.active is False:
        raise HTTPException(status_code=403, detail="Account is disabled")

    is_admin = row.name == ROLE_ADMIN
    return LoginResponse(
        user_id=row.id,
        username=row.username,
        is_admin=is_admin,
        access_token=create_access_token(row.id, row.username, is_admin=is_admin),
    )
