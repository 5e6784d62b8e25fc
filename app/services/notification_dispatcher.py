# app/services/notification_dispatcher.py

import logging
import threading
from collections import defaultdict, deque
from typing import Callable, Deque, Dict, List

from app.services.reminder_errors import DeliveryFailure
from app.utils.reminder_evaluator import ReminderIntent

logger = logging.getLogger(__name__)

Listener = Callable[[ReminderIntent], None]


class NotificationDispatcher:
    """
    Entrega cada lembrete para os ouvintes registrados.

    No máximo uma vez: se um ouvinte falha, a notificação é descartada só
    para ele, sem nova tentativa.
    """

    def __init__(self):
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        if not callable(listener):
            raise TypeError("listener precisa ser chamável")
        self._listeners.append(listener)

        def unsubscribe() -> None:
            self._listeners = [l for l in self._listeners if l is not listener]

        return unsubscribe

    def dispatch(self, intent: ReminderIntent) -> int:
        """Retorna quantos ouvintes receberam a notificação."""
        delivered = 0
        for listener in list(self._listeners):
            try:
                listener(intent)
                delivered += 1
            except DeliveryFailure as exc:
                logger.warning(
                    "entrega recusada: %s baby=%s: %s", intent.activity_type, intent.baby_id, exc
                )
            except Exception:
                logger.exception(
                    "erro ao entregar lembrete %s baby=%s", intent.activity_type, intent.baby_id
                )
        return delivered


def log_listener(intent: ReminderIntent) -> None:
    logger.info(
        "lembrete: user=%s baby=%s tipo=%s título=%r",
        intent.user_id,
        intent.baby_id,
        intent.activity_type,
        intent.title,
    )


class ReminderInbox:
    """Caixa de entrada por usuário, consumida pelo app via polling."""

    def __init__(self, max_size: int = 50):
        if max_size <= 0:
            raise ValueError("max_size precisa ser > 0")
        self._lock = threading.Lock()
        self._max_size = max_size
        self._pending: Dict[int, Deque[dict]] = defaultdict(lambda: deque(maxlen=self._max_size))

    def __call__(self, intent: ReminderIntent) -> None:
        with self._lock:
            self._pending[intent.user_id].append(intent.to_payload())

    def drain(self, user_id: int) -> List[dict]:
        with self._lock:
            items = self._pending.pop(user_id, None)
        return list(items) if items else []

    def clear(self) -> None:
        with self._lock:
            self._pending.clear()
