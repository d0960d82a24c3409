# notifier/services/dispatcher.py
"""
Dispatcher de notificaciones de reportes.

Por cada escritura de un reporte: resuelve el usuario dueño, obtiene su token
de FCM y envía una sola notificación push. Es un relé de solo lectura: no
escribe reportes ni usuarios y no guarda estado entre invocaciones.

Errores:
- Reporte borrado, sin userId o usuario sin token: no-op, se registra y termina bien.
- Fallo al leer el usuario: se propaga (UserLookupError); el host decide si reentrega.
- Fallo del envío push: se registra y se descarta; la invocación termina bien.
"""
import logging
from typing import Literal, Optional, Protocol

from opentelemetry import trace
from pydantic import BaseModel

from ..models.report import Report, ReportWriteEvent
from ..models.user import User, UserNotFoundError
from .push import PushPayload, PushSender

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

NOTIFICATION_TITLE = "Report Update"
DEFAULT_REPORT_TITLE = "Cleanliness Issue"

DispatchStatus = Literal["deleted", "missing_user_id", "missing_token", "sent", "send_failed"]


class DispatchResult(BaseModel):
    report_id: str
    status: DispatchStatus
    message_id: Optional[str] = None
    error: Optional[str] = None


class UserLookup(Protocol):
    async def get_by_id(self, user_id: str) -> Optional[User]: ...


def build_report_notification(report: Report, token: str) -> PushPayload:
    title = report.title or DEFAULT_REPORT_TITLE
    return PushPayload(
        token=token,
        title=NOTIFICATION_TITLE,
        body=f"Your report '{title}' has been updated.",
    )


class NotificationDispatcher:
    def __init__(self, users: UserLookup, push: PushSender) -> None:
        self.users = users
        self.push = push

    async def handle(self, event: ReportWriteEvent) -> DispatchResult:
        with tracer.start_as_current_span("report_notification") as span:
            span.set_attribute("report.id", event.report_id)
            result = await self._handle(event)
            span.set_attribute("notification.status", result.status)
            return result

    async def _handle(self, event: ReportWriteEvent) -> DispatchResult:
        report = event.after_report()
        if report is None:
            logger.info("Reporte %s borrado; no se envía notificación", event.report_id)
            return DispatchResult(report_id=event.report_id, status="deleted")

        if not report.user_id:
            logger.warning("Reporte %s sin userId; no se envía notificación", report.id)
            return DispatchResult(report_id=report.id, status="missing_user_id")

        # Un fallo aquí (red/disponibilidad) hace fallar la invocación
        user = await self.users.get_by_id(report.user_id)
        if user is None:
            raise UserNotFoundError(report.user_id)

        if not user.fcm_token:
            logger.warning("Usuario %s sin token FCM (reporte %s)", user.id, report.id)
            return DispatchResult(report_id=report.id, status="missing_token")

        payload = build_report_notification(report, user.fcm_token)
        try:
            message_id = await self.push.send(payload)
        except Exception as e:
            # best-effort: sin reintentos ni reentrega
            logger.exception(f"Error enviando notificación del reporte {report.id}: {e}")
            return DispatchResult(report_id=report.id, status="send_failed", error=str(e))

        logger.info(f"Notificación enviada para reporte {report.id}: {message_id}")
        return DispatchResult(report_id=report.id, status="sent", message_id=message_id)
