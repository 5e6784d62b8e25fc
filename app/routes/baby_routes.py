from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.models.baby_model import Baby
from app.models.auth_models import User
from app.schemas.baby_schema import BabyCreate, BabyUpdate, BabyResponse
from app.services.reminder_scheduler import ReminderScheduler
from config.database import get_db
from app.dependencies.auth import get_current_user
from app.dependencies.reminders import get_reminder_scheduler
from typing import List

router = APIRouter(prefix="/babies", tags=["babies"])


def get_owned_baby(db: Session, baby_id: int, user: User) -> Baby:
    baby = db.query(Baby).filter_by(id=baby_id, user_id=user.id).first()
    if not baby:
        raise HTTPException(status_code=404, detail="Bebê não encontrado.")
    return baby


# POST: cria novo bebê
@router.post("", status_code=201)
def create_baby(
    baby: BabyCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    new_baby = Baby(
        user_id=current_user.id,
        name=baby.name,
        birth_date=baby.birth_date,
        birth_weight_grams=baby.birth_weight_grams,
        gender=baby.gender
    )
    db.add(new_baby)
    db.commit()
    db.refresh(new_baby)

    return {
        "msg": "Bebê cadastrado com sucesso.",
        "baby_id": new_baby.id,
        "name": new_baby.name
    }

# GET: busca os bebês do usuário logado
@router.get("/me", response_model=List[BabyResponse])
def get_my_babies(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    babies = db.query(Baby).filter(Baby.user_id == current_user.id).all()
    return babies

# PUT: atualiza um bebê específico (se for do usuário)
@router.put("/{baby_id}", response_model=BabyResponse)
def update_baby(
    baby_id: int,
    baby_data: BabyUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    baby = get_owned_baby(db, baby_id, current_user)

    baby.name = baby_data.name or baby.name
    baby.birth_date = baby_data.birth_date or baby.birth_date
    baby.birth_weight_grams = baby_data.birth_weight_grams or baby.birth_weight_grams
    baby.gender = baby_data.gender or baby.gender

    db.commit()
    db.refresh(baby)
    return baby

# DELETE: remove o bebê, seus eventos e agendas de lembrete
@router.delete("/{baby_id}")
def delete_baby(
    baby_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),
):
    baby = get_owned_baby(db, baby_id, current_user)

    db.delete(baby)
    db.commit()
    scheduler.state.remove_baby(baby_id)

    return {"msg": "Bebê excluído com sucesso."}
