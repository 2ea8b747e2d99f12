# crm/api/auth.py
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from crm.api.deps import get_bearer_token, get_current_user
from crm.core.db import get_db
from crm.models.user import User
from crm.schemas.auth import LoginRequest, RegisterRequest, TokenResponse
from crm.schemas.common import Ok
from crm.schemas.user import UserRead
from crm.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    user, token = AuthService(db).register(data)
    db.commit()
    return TokenResponse(token=token, user=UserRead.model_validate(user))


@router.post("/login", response_model=TokenResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    user, token = AuthService(db).login(data)
    db.commit()
    return TokenResponse(token=token, user=UserRead.model_validate(user))


@router.post("/logout", response_model=Ok)
def logout(
    token: str = Depends(get_bearer_token),
    _user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    AuthService(db).logout(token)
    db.commit()
    return Ok()


@router.get("/me", response_model=UserRead)
def me(user: User = Depends(get_current_user)):
    return user
