"""Registration, login (password and Google) and the caller's own profile."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from eventflow.auth import google
from eventflow.auth.dependencies import get_current_user
from eventflow.auth.security import create_access_token, hash_password, verify_password
from eventflow.config import settings
from eventflow.database import get_db
from eventflow.models.user import User
from eventflow.schemas.auth import (
    AuthResponse,
    GoogleLoginRequest,
    LoginRequest,
    PasswordUpdate,
    ProfileOut,
    ProfileUpdate,
    RegisterRequest,
)
from eventflow.services import account_service

logger = logging.getLogger(__name__)
router = APIRouter()


def _issue_session(response: Response, user: User) -> AuthResponse:
    token = create_access_token(user.id)
    response.set_cookie(
        key=settings.JWT_COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="lax",
        max_age=settings.JWT_EXPIRES_MINUTES * 60,
    )
    return AuthResponse(id=user.id, name=user.name, email=user.email, token=token)


def _find_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.lower()).first()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, response: Response, db: Session = Depends(get_db)):
    if _find_by_email(db, payload.email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email já cadastrado")

    user = User(name=payload.name, email=payload.email.lower(), password_hash=hash_password(payload.password))
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s", user.id)
    return _issue_session(response, user)


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db)):
    user = _find_by_email(db, payload.email)
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Credenciais inválidas")
    logger.info("User %s logged in", user.id)
    return _issue_session(response, user)


@router.post("/google", response_model=AuthResponse)
def google_login(payload: GoogleLoginRequest, response: Response, db: Session = Depends(get_db)):
    """Sign in with a Google ID token, creating the account on first use."""
    if not google.is_configured():
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Login com Google não configurado")

    identity = google.verify_google_id_token(payload.credential)
    if identity is None or not identity.email:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token do Google inválido")
    if not identity.email_verified:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Email do Google não verificado")

    user = _find_by_email(db, identity.email)
    if user is None:
        user = User(name=identity.name, email=identity.email.lower(), password_hash=None)
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info("Created user %s from Google sign-in", user.id)
    else:
        logger.info("User %s logged in with Google", user.id)
    return _issue_session(response, user)


@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(settings.JWT_COOKIE_NAME)
    return {"ok": True}


@router.get("/profile", response_model=ProfileOut)
def get_profile(user: User = Depends(get_current_user)):
    return user


@router.patch("/profile", response_model=ProfileOut)
def update_profile(payload: ProfileUpdate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    if payload.name is None and payload.email is None:
        raise HTTPException(status_code=400, detail="Informe nome ou email para atualizar")

    if payload.email is not None:
        email = payload.email.lower()
        existing = _find_by_email(db, email)
        if existing and existing.id != user.id:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email já está em uso")
        user.email = email
    if payload.name is not None:
        user.name = payload.name

    db.commit()
    db.refresh(user)
    logger.info("Updated profile of user %s", user.id)
    return user


@router.patch("/password")
def change_password(payload: PasswordUpdate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    if not verify_password(payload.current_password, user.password_hash):
        raise HTTPException(status_code=400, detail="Senha atual incorreta")

    user.password_hash = hash_password(payload.new_password)
    db.commit()
    logger.info("Changed password of user %s", user.id)
    return {"message": "Senha alterada com sucesso"}


@router.delete("/account")
def delete_account(
    response: Response,
    password: Optional[str] = Query(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete the caller's account. Password accounts must confirm their password."""
    if user.password_hash and not verify_password(password or "", user.password_hash):
        raise HTTPException(status_code=400, detail="Senha incorreta")

    account_service.delete_account(db, user)
    response.delete_cookie(settings.JWT_COOKIE_NAME)
    return {"message": "Conta excluída com sucesso"}
