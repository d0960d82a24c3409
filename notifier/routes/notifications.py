"""
Envío manual de una notificación push, útil para verificar credenciales y tokens.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from ..core.deps import current_push_sender
from ..services.push import PushPayload, PushSender

router = APIRouter()
logger = logging.getLogger(__name__)

class NotifyIn(BaseModel):
    title: str
    body: str
    token: str   # token FCM del dispositivo

@router.post("/test", summary="Probar envío de notificación")
async def test_notify(payload: NotifyIn, push: PushSender = Depends(current_push_sender)):
    try:
        message_id = await push.send(PushPayload(**payload.model_dump()))
    except Exception as e:
        logger.warning("Envío de prueba fallido: %s", e)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Fallo del proveedor push: {e}")
    return {"status": "sent", "message_id": message_id}
