# notifier/models/report.py
"""
Reportes creados por la app móvil y eventos de escritura sobre ellos.
El notificador solo los lee; nunca los modifica.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

# Tipos de cambio del change stream que representan una escritura del reporte
WRITE_OPERATIONS = ("insert", "update", "replace", "delete")


class Report(BaseModel):
    id: str
    user_id: Optional[str] = Field(default=None, alias="userId")
    title: Optional[str] = None

    class Config:
        populate_by_name = True
        extra = "allow"

    @field_validator("user_id", "title", mode="before")
    @classmethod
    def _blank_to_none(cls, v: Any) -> Optional[str]:
        # userId puede venir como ObjectId; valores falsy ("", 0, False) cuentan como ausentes
        if not v:
            return None
        return str(v)


class ReportWriteEvent(BaseModel):
    """
    Estado antes/después de un reporte en una escritura (create/update/delete).
    `after` es None cuando el reporte fue borrado.
    """
    report_id: str
    before: Optional[Dict[str, Any]] = None
    after: Optional[Dict[str, Any]] = None

    @property
    def deleted(self) -> bool:
        return self.after is None

    def after_report(self) -> Optional[Report]:
        if self.after is None:
            return None
        data = {k: v for k, v in self.after.items() if k != "_id"}
        return Report.model_validate({**data, "id": self.report_id})

    @classmethod
    def from_change(cls, change: Mapping[str, Any]) -> Optional["ReportWriteEvent"]:
        """
        Convierte un documento del change stream de Mongo.
        - insert/update/replace: `fullDocument` (en update viene de updateLookup).
        - delete, o update cuyo documento ya no existe: sin estado `after`.
        - `fullDocumentBeforeChange` solo existe si la colección tiene pre-images.
        Devuelve None para operaciones que no son escrituras (drop, invalidate...).
        """
        op = change.get("operationType")
        if op not in WRITE_OPERATIONS:
            return None

        key = (change.get("documentKey") or {}).get("_id")
        after = None if op == "delete" else change.get("fullDocument")
        return cls(
            report_id=str(key),
            before=change.get("fullDocumentBeforeChange"),
            after=after,
        )
