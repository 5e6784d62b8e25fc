import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, APIRouter
from fastapi.middleware.cors import CORSMiddleware

from app.api.endpoints.auth_credentials import router as auth_cred_routes

from app.routes.baby_routes import router as baby_routes
from app.routes.event_routes import router as event_routes
from app.routes.notification_routes import router as notification_routes
from app.services.reminder_errors import DataUnavailable
from app.services.reminder_scheduler import build_reminder_scheduler

from config.database import SessionLocal, init_db
from config.logging_config import setup_logging
from config.settings import CORS_ORIGINS, REMINDERS_ENABLED

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    scheduler = app.state.reminder_scheduler

    db = SessionLocal()
    try:
        scheduler.hydrate(db)
    except DataUnavailable as exc:
        # segue com o cache vazio; as rotas vão preenchendo
        logger.warning("não foi possível carregar os lembretes: %s", exc)
    finally:
        db.close()

    if REMINDERS_ENABLED:
        scheduler.start(app)
    yield
    await app.state.reminder_scheduler.stop(app)


# Cria a instância do FastAPI
app = FastAPI(
    title="Baby Diary API",
    version="0.1.0",
    description="Backend para registro de mamadas, fraldas e sono do bebê, com lembretes",
    lifespan=lifespan,
)

# Configura CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# estado dos lembretes vive no app, não em variáveis globais
app.state.reminder_scheduler = build_reminder_scheduler()

# Cria o roteador principal com prefixo /api
routerAPI = APIRouter(prefix="/api")

routerAPI.include_router(auth_cred_routes)
routerAPI.include_router(baby_routes)
routerAPI.include_router(event_routes)
routerAPI.include_router(notification_routes)
# Anexa o roteador à aplicação principal
app.include_router(routerAPI)


@app.get("/", tags=["Root"])
async def read_root():
    return {"status": "Baby Diary API está no ar!"}
