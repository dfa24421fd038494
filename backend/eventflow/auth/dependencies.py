"""FastAPI dependencies resolving the caller's identity.

Token sources, in order: the ``jwt`` cookie, then ``Authorization: Bearer``.
Every failure is a 401; there is no session store or revocation list, so a
valid token stays valid until it expires.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from jose import JWTError
from sqlalchemy.orm import Session

from eventflow.config import settings
from eventflow.database import get_db
from eventflow.models.user import User, UserRole
from eventflow.services.event_lifecycle import as_utc
from eventflow.auth.security import decode_access_token

logger = logging.getLogger(__name__)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def extract_token(request: Request) -> Optional[str]:
    """Cookie first; a bearer header only when no cookie token is present."""
    token = request.cookies.get(settings.JWT_COOKIE_NAME)
    if not token:
        authorization = request.headers.get("Authorization")
        if authorization:
            parts = authorization.split(" ")
            if len(parts) == 2 and parts[0] == "Bearer":
                token = parts[1]
    return token or None


def _resolve_user(token: str, db: Session) -> User:
    try:
        claims = decode_access_token(token)
    except JWTError:
        raise _unauthorized("Token inválido")

    user_id = claims.get("userId")
    if not user_id:
        raise _unauthorized("Token inválido")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise _unauthorized("Usuário não encontrado")
    return user


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    token = extract_token(request)
    if not token:
        raise _unauthorized("Não autenticado")
    return _resolve_user(token, db)


def get_current_user_optional(request: Request, db: Session = Depends(get_db)) -> Optional[User]:
    token = extract_token(request)
    if not token:
        return None
    try:
        return _resolve_user(token, db)
    except HTTPException:
        return None


def require_not_banned(user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> User:
    """403 while banned; an expired temporary ban is lifted on the spot."""
    if not user.is_banned:
        return user

    if user.banned_until and datetime.now(timezone.utc) > as_utc(user.banned_until):
        user.is_banned = False
        user.banned_at = None
        user.banned_until = None
        user.ban_reason = None
        db.commit()
        logger.info("Temporary ban for user %s expired and was lifted", user.id)
        return user

    reason = user.ban_reason or "Não especificado"
    if user.banned_until:
        until = as_utc(user.banned_until).strftime("%d/%m/%Y")
        detail = f"Conta suspensa até {until}. Motivo: {reason}"
    else:
        detail = f"Conta banida permanentemente. Motivo: {reason}"
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.is_banned:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Usuário banido")
    if user.role != UserRole.admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Acesso restrito a administradores")
    return user
