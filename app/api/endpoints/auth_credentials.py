# app/api/endpoints/auth_credentials.py

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from config.database import get_db
from app.models.auth_models import User
from app.schemas.auth_schema import AuthRequest
from app.utils.security import hash_password, jwt_for_user, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(data: AuthRequest, db: Session = Depends(get_db)):
    # 1) Verifica se já existe usuário
    existing_user = db.query(User).filter_by(email=data.email).first()
    if existing_user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="E-mail já cadastrado."
        )

    # 2) Cria o usuário no banco local
    user = User(
        email=data.email,
        password_hash=hash_password(data.password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("novo usuário cadastrado: id=%s", user.id)

    return {
        "msg": "Usuário criado com sucesso.",
        "user_id": user.id,
        "email": user.email
    }

@router.post("/login")
def login(data: AuthRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter_by(email=data.email).first()
    if not user or not verify_password(data.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Credenciais inválidas")

    token = jwt_for_user(email=user.email, role=user.role)

    return {
        "access_token": token,
        "token_type": "bearer",
        "user_id": user.id,
        "role": user.role,
    }
