"""
Host del trigger: observa el change stream de la colección de reportes y ejecuta
una invocación del dispatcher por cada escritura.
- Cada evento corre en su propia tarea asyncio (invocaciones independientes).
- La política de reentrega vive aquí, no en el dispatcher: TRIGGER_MAX_ATTEMPTS
  intentos con espera lineal; 1 = sin reentrega.
- Si el stream se cae, se reanuda desde el último resume token; tras un
  invalidate se reabre con start_after.
"""
import asyncio
import logging
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from ..models.report import WRITE_OPERATIONS, ReportWriteEvent
from ..services.dispatcher import DispatchResult, NotificationDispatcher

logger = logging.getLogger(__name__)

PIPELINE = [{"$match": {"operationType": {"$in": list(WRITE_OPERATIONS)}}}]


class ReportChangeWatcher:
    def __init__(
        self,
        collection: AsyncIOMotorCollection,
        dispatcher: NotificationDispatcher,
        *,
        max_attempts: int = 1,
        retry_delay: float = 1.0,
        reconnect_delay: float = 5.0,
    ) -> None:
        self.collection = collection
        self.dispatcher = dispatcher
        self.max_attempts = max(1, max_attempts)
        self.retry_delay = retry_delay
        self.reconnect_delay = reconnect_delay
        self._resume_token: Optional[Any] = None
        self._start_after: Optional[Any] = None
        self._runner: Optional[asyncio.Task] = None
        self._inflight: set[asyncio.Task] = set()

    def start(self) -> None:
        if self._runner is None:
            self._runner = asyncio.create_task(self._watch())

    async def stop(self) -> None:
        """
        Detiene el stream y espera las invocaciones en curso.
        """
        if self._runner is not None:
            self._runner.cancel()
            await asyncio.gather(self._runner, return_exceptions=True)
            self._runner = None
        if self._inflight:
            await asyncio.gather(*self._inflight, return_exceptions=True)

    async def _watch(self) -> None:
        while True:
            try:
                # tras un invalidate solo se permite start_after, no resume_after
                async with self.collection.watch(
                    PIPELINE,
                    full_document="updateLookup",
                    full_document_before_change="whenAvailable",
                    resume_after=self._resume_token,
                    start_after=self._start_after,
                ) as stream:
                    logger.info("Observando cambios en '%s'", self.collection.name)
                    async for change in stream:
                        if change.get("operationType") == "invalidate":
                            self._start_after, self._resume_token = stream.resume_token, None
                            continue
                        self._start_after, self._resume_token = None, stream.resume_token
                        event = ReportWriteEvent.from_change(change)
                        if event is not None:
                            self.submit(event)
                logger.info("Change stream cerrado; reabriendo en %ss", self.reconnect_delay)
            except PyMongoError as e:
                logger.error("Change stream interrumpido: %s; reintento en %ss", e, self.reconnect_delay)
            except Exception:
                logger.exception("Error inesperado en el change stream; reintento en %ss", self.reconnect_delay)
            await asyncio.sleep(self.reconnect_delay)

    def submit(self, event: ReportWriteEvent) -> asyncio.Task:
        task = asyncio.create_task(self.deliver(event))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    async def deliver(self, event: ReportWriteEvent) -> Optional[DispatchResult]:
        for attempt in range(1, self.max_attempts + 1):
            try:
                return await self.dispatcher.handle(event)
            except Exception as e:
                logger.error(
                    "Invocación fallida para reporte %s (intento %d/%d): %s",
                    event.report_id, attempt, self.max_attempts, e,
                )
                if attempt < self.max_attempts:
                    await asyncio.sleep(self.retry_delay * attempt)

        logger.error("Reporte %s descartado tras %d intento(s)", event.report_id, self.max_attempts)
        return None
