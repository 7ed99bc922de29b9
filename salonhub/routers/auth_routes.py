# salonhub/routers/auth_routes.py

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import Session, select

from salonhub.db import get_session
from salonhub.models import User
from salonhub.schemas import Token, UserCreate, UserPublic
from salonhub.auth import get_current_user, hash_password, verify_password, create_access_token

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["auth"],
)


@router.post("/auth/login", response_model=Token)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    session: Session = Depends(get_session),
):
    # OAuth2 "password" flow sends the email in the username field
    user = session.exec(
        select(User).where(User.email == form_data.username)
    ).first()

    if user is None or not verify_password(form_data.password, user.password_hash):
        logger.warning(f"Failed login for {form_data.username}")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_access_token({"sub": user.email})
    return {"access_token": token, "token_type": "bearer"}


@router.post("/users", status_code=201, response_model=UserPublic)
def register(
    user: UserCreate,
    session: Session = Depends(get_session),
):
    existing = session.exec(
        select(User).where(User.email == user.email)
    ).first()
    if existing is not None:
        raise HTTPException(status_code=409, detail="Email already registered")

    db_user = User(
        email=user.email,
        password_hash=hash_password(user.password),
        role=user.role.value,
    )
    session.add(db_user)
    session.commit()
    session.refresh(db_user)  # fills db_user.id

    logger.info(f"Registered {db_user.role} account {db_user.email}")
    return db_user


@router.get("/me", response_model=UserPublic)
def me(current_user: dict = Depends(get_current_user)):
    return {
        "id": current_user["id"],
        "email": current_user["email"],
        "role": current_user["role"],
    }
