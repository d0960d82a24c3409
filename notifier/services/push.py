"""
Envío de notificaciones push.
- FCMPushSender: Firebase Cloud Messaging vía firebase-admin (producción).
- LogPushSender: solo registra el payload; para desarrollo y pruebas (PUSH_PROVIDER=log).
La app de Firebase se inicializa una vez en el lifespan y se inyecta al sender.
"""
import logging
import uuid
from typing import Optional, Protocol

import firebase_admin
from anyio import to_thread
from firebase_admin import credentials, messaging
from pydantic import BaseModel

from ..core.config import Settings

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "report-notifier"


class PushPayload(BaseModel):
    token: str
    title: str
    body: str
    data: dict[str, str] | None = None

    def to_message(self) -> messaging.Message:
        return messaging.Message(
            notification=messaging.Notification(title=self.title, body=self.body),
            token=self.token,
            data=self.data,
        )

    def preview(self) -> dict:
        # nunca registrar el token completo
        return {"title": self.title, "body": self.body, "token": self.token[:8] + "..."}


class PushSender(Protocol):
    async def send(self, payload: PushPayload) -> str:
        """Entrega el payload y devuelve el id de mensaje del proveedor. Lanza si falla."""
        ...


class FCMPushSender:
    def __init__(self, app: firebase_admin.App) -> None:
        self.app = app

    async def send(self, payload: PushPayload) -> str:
        message = payload.to_message()
        # messaging.send es bloqueante (HTTP); no bloquear el event loop
        return await to_thread.run_sync(lambda: messaging.send(message, app=self.app))


class LogPushSender:
    async def send(self, payload: PushPayload) -> str:
        message_id = f"preview-{uuid.uuid4().hex[:12]}"
        logger.info("Push (solo log) %s: %s", message_id, payload.preview())
        return message_id


def init_firebase_app(credentials_path: Optional[str] = None, project_id: Optional[str] = None) -> firebase_admin.App:
    """
    Inicializa la app de Firebase una sola vez por proceso.
    Sin ruta de credenciales usa Application Default Credentials.
    """
    try:
        return firebase_admin.get_app(FIREBASE_APP_NAME)
    except ValueError:
        pass  # aún no inicializada

    cred = credentials.Certificate(credentials_path) if credentials_path else credentials.ApplicationDefault()
    options = {"projectId": project_id} if project_id else None
    return firebase_admin.initialize_app(cred, options, name=FIREBASE_APP_NAME)


def build_push_sender(settings: Settings) -> PushSender:
    provider = settings.PUSH_PROVIDER.lower()
    if provider == "log":
        return LogPushSender()
    if provider == "fcm":
        app = init_firebase_app(settings.FIREBASE_CREDENTIALS or None, settings.FIREBASE_PROJECT_ID or None)
        return FCMPushSender(app)
    raise ValueError(f"PUSH_PROVIDER desconocido: {settings.PUSH_PROVIDER!r} (usa 'fcm' o 'log')")
