#config/settings

import os
from dotenv import load_dotenv

# Carregar as variáveis do arquivo .env
load_dotenv()

# Configurações JWT
JWT_SECRET = os.getenv("JWT_SECRET", "troque-este-segredo")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_DAYS = int(os.getenv("ACCESS_TOKEN_DAYS", "3"))


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./babydiary.db")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Lembretes (feed / diaper / sleep)
REMINDERS_ENABLED = os.getenv("REMINDERS_ENABLED", "true").lower() in ("1", "true", "yes")
REMINDER_CHECK_INTERVAL_SECONDS = float(os.getenv("REMINDER_CHECK_INTERVAL_SECONDS", "300"))  # 5 minutos
REMINDER_QUIET_HOURS_POLICY = os.getenv("REMINDER_QUIET_HOURS_POLICY", "legacy")  # legacy | interval
REMINDER_MIN_REFIRE_MINUTES = int(os.getenv("REMINDER_MIN_REFIRE_MINUTES", "0"))  # 0 = repete a cada tick
REMINDER_TIMEZONE = os.getenv("REMINDER_TIMEZONE") or None  # None = fuso local do processo
REMINDER_INBOX_SIZE = int(os.getenv("REMINDER_INBOX_SIZE", "50"))
