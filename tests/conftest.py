"""Fixtures compartilhadas: banco SQLite em memória, cliente HTTP e agendador limpo."""

import os

os.environ.setdefault("JWT_SECRET", "segredo-de-teste")
os.environ.setdefault("REMINDERS_ENABLED", "false")

from datetime import timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from config.database import Base, get_db
from app.models import auth_models, baby_model, event_model, notification_schedule_model  # noqa: F401
from app.services.notification_dispatcher import NotificationDispatcher, ReminderInbox
from app.services.reminder_scheduler import ReminderScheduler
from app.utils.quiet_hours import INTERVAL


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False, autocommit=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def scheduler():
    # UTC + janela "interval" para os testes não dependerem do relógio da máquina
    return ReminderScheduler(
        dispatcher=NotificationDispatcher(),
        quiet_policy=INTERVAL,
        zone=timezone.utc,
        inbox=ReminderInbox(max_size=10),
    )


@pytest.fixture
def client(engine, scheduler):
    from main import app

    TestingSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)

    def override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    previous = app.state.reminder_scheduler
    app.state.reminder_scheduler = scheduler
    yield TestClient(app)
    app.dependency_overrides.clear()
    app.state.reminder_scheduler = previous


def _signup_and_login(client, email, password="senha-segura"):
    resp = client.post("/api/auth/signup", json={"email": email, "password": password})
    assert resp.status_code == 201, resp.text
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    body = resp.json()
    return {"Authorization": f"Bearer {body['access_token']}"}, body["user_id"]


@pytest.fixture
def auth(client):
    """Cabeçalho de autenticação e id de um usuário recém-cadastrado."""
    return _signup_and_login(client, "mae@example.com")


@pytest.fixture
def other_auth(client):
    return _signup_and_login(client, "outro@example.com")


@pytest.fixture
def baby_id(client, auth):
    headers, _ = auth
    resp = client.post(
        "/api/babies",
        json={"name": "Alice", "birth_date": "2025-06-15", "gender": "female"},
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["baby_id"]
