# app/services/reminder_errors.py


class ReminderError(Exception):
    """Erro base dos lembretes. Nenhum deles derruba o agendador."""


class DataUnavailable(ReminderError):
    """Leitura de agenda ou marcas de atividade falhou; pula a agenda neste tick."""


class InvalidSchedule(ReminderError):
    """Intervalos ou horas da agenda fora do permitido."""


class DeliveryFailure(ReminderError):
    """O canal de entrega recusou a notificação; ela é descartada sem nova tentativa."""
