from fastapi import APIRouter, Depends, HTTPException, Body, Query
from sqlalchemy.orm import Session
from datetime import datetime
from app.models.event_model import Event
from app.models.auth_models import User
from app.routes.baby_routes import get_owned_baby
from app.schemas.event_schema import EventCreate, EventUpdate, EventRead
from app.schemas.summary_schema import ActivitySummary
from app.services.reminder_scheduler import MARK_FOR_EVENT_TYPE, ReminderScheduler
from config.database import get_db
from app.dependencies.auth import get_current_user
from app.dependencies.reminders import get_reminder_scheduler
from app.utils.activity_summary import generate_activity_summary
from app.utils.time_utils import to_naive_utc
from typing import List, Optional, Union

router = APIRouter(prefix="/events", tags=["events"])

@router.post("", status_code=201)
def create_event(
    # o body pode ser um único EventCreate ou uma lista de EventCreate.
    events: Union[EventCreate, List[EventCreate]] = Body(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),
):
    """
    Se receber um objeto único (EventCreate), cria um único registro.
    Se receber uma lista de EventCreate, cria múltiplos registros em batch.
    Eventos de mamada, fralda e sono atualizam a última atividade dos lembretes.
    """
    if isinstance(events, list):
        event_list = events
    else:
        event_list = [events]

    created = []  # para retornar dados de cada evento criado

    for ev_data in event_list:
        get_owned_baby(db, ev_data.baby_id, current_user)

        new_event = Event(
            user_id=current_user.id,
            baby_id=ev_data.baby_id,
            type=ev_data.type,
            timestamp=ev_data.timestamp,
            end_time=ev_data.end_time,
            notes=ev_data.notes,
            details=ev_data.details,
        )
        db.add(new_event)
        db.flush()  # garante que new_event.id seja atribuído antes do commit
        created.append({"event_id": new_event.id, "type": new_event.type})

    db.commit()

    # só depois do commit: marca "agora" como última atividade
    for ev_data in event_list:
        mark = MARK_FOR_EVENT_TYPE.get(ev_data.type)
        if mark:
            scheduler.state.update_activity(current_user.id, ev_data.baby_id, mark)

    return {
        "msg": "Eventos registrados com sucesso.",
        "created": created,
    }

@router.get("", response_model=List[EventRead])
def list_events(
    baby_id: Optional[int] = Query(None),
    type: Optional[str] = Query(None),
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(Event).filter(Event.user_id == current_user.id)
    if baby_id is not None:
        query = query.filter(Event.baby_id == baby_id)
    if type:
        query = query.filter(Event.type == type)
    if start:
        query = query.filter(Event.timestamp >= to_naive_utc(start))
    if end:
        query = query.filter(Event.timestamp <= to_naive_utc(end))
    return query.order_by(Event.timestamp.desc()).all()

@router.get("/summary", response_model=ActivitySummary)
def activity_summary(
    baby_id: int = Query(...),
    days: int = Query(7, ge=1, le=31),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Resumo de mamadas, fraldas e sono dos últimos dias (padrão 7, hoje incluso),
    com totais, média diária e tipos de mamada.
    """
    get_owned_baby(db, baby_id, current_user)
    return generate_activity_summary(db, baby_id, days=days)

@router.put("/{event_id}")
def update_event(
    event_id: int,
    event_update: EventUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    event = db.query(Event).filter_by(id=event_id, user_id=current_user.id).first()

    if not event:
        raise HTTPException(status_code=404, detail="Evento não encontrado.")

    event.type = event_update.type or event.type
    event.timestamp = event_update.timestamp or event.timestamp
    if event_update.end_time is not None:
        event.end_time = event_update.end_time
    if event_update.notes is not None:
        event.notes = event_update.notes
    if event_update.details is not None:
        event.details = event_update.details

    db.commit()
    db.refresh(event)

    return {
        "msg": "Evento atualizado com sucesso.",
        "event_id": event.id,
        "type": event.type,
        "timestamp": event.timestamp
    }


@router.delete("/{event_id}")
def delete_event(
    event_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    event = db.query(Event).filter_by(id=event_id, user_id=current_user.id).first()

    if not event:
        raise HTTPException(status_code=404, detail="Evento não encontrado.")

    db.delete(event)
    db.commit()

    return {"msg": "Evento excluído com sucesso."}
