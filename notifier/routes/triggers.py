from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from ..core.deps import current_dispatcher
from ..models.report import ReportWriteEvent
from ..models.user import UserLookupError
from ..services.dispatcher import NotificationDispatcher

router = APIRouter()

class ReportWriteIn(BaseModel):
    before: dict[str, Any] | None = None
    after: dict[str, Any] | None = None   # None = reporte borrado

@router.post("/reports/{report_id}", summary="Trigger de escritura de un reporte")
async def report_written(
    report_id: str,
    payload: ReportWriteIn,
    dispatcher: NotificationDispatcher = Depends(current_dispatcher),
):
    """
    Entrada HTTP del trigger (push de un host externo con before/after).
    Si falla la lectura del usuario responde 503 para que el host reentregue.
    """
    event = ReportWriteEvent(report_id=report_id, before=payload.before, after=payload.after)
    try:
        result = await dispatcher.handle(event)
    except UserLookupError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    return result.model_dump()
