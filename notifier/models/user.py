# notifier/models/user.py
from __future__ import annotations

from typing import Any, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel, Field, field_validator
from pymongo.errors import PyMongoError

from ..core.config import settings


class UserLookupError(Exception):
    """No se pudo leer el usuario dueño del reporte (red, disponibilidad...)."""


class UserNotFoundError(UserLookupError):
    def __init__(self, user_id: str) -> None:
        super().__init__(f"Usuario {user_id} no encontrado")
        self.user_id = user_id


# ---------- Pydantic ----------
class User(BaseModel):
    id: str = Field(..., alias="_id")
    fcm_token: Optional[str] = Field(default=None, alias="fcmToken")

    class Config:
        populate_by_name = True
        extra = "ignore"

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, v: Any) -> str:
        return str(v)

    @field_validator("fcm_token", mode="before")
    @classmethod
    def _blank_token(cls, v: Any) -> Optional[str]:
        return v or None


# ---------- Repo (solo lectura) ----------
class UserRepo:
    def __init__(self, db: AsyncIOMotorDatabase, collection: str | None = None) -> None:
        self.col = db[collection or settings.USERS_COLLECTION]

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """
        Busca por _id. Acepta ids de texto y, si el valor es un ObjectId válido
        de 24 caracteres, también su forma ObjectId.
        Los errores del driver se propagan como UserLookupError.
        """
        candidates: list[Any] = [user_id]
        if len(user_id) == 24 and ObjectId.is_valid(user_id):
            candidates.append(ObjectId(user_id))

        try:
            doc = await self.col.find_one({"_id": {"$in": candidates}}, {"fcmToken": 1})
        except PyMongoError as e:
            raise UserLookupError(f"Error leyendo usuario {user_id}: {e}") from e

        if not doc:
            return None
        return User.model_validate(doc)
