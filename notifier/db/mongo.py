# notifier/db/mongo.py
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from ..core.config import settings

_client: AsyncIOMotorClient | None = None
_db: AsyncIOMotorDatabase | None = None


def connect_to_mongo() -> AsyncIOMotorDatabase:
    """
    Crea el cliente de Mongo una sola vez por proceso. Lee MONGO_URI y MONGO_DB de settings.
    El cliente es perezoso: no abre conexión hasta la primera operación.
    El notificador solo lee (users) y observa (reports); no crea índices.
    """
    global _client, _db
    if _client is not None:
        return _db

    _client = AsyncIOMotorClient(settings.MONGO_URI, uuidRepresentation="standard")
    _db = _client[settings.MONGO_DB]
    return _db


def disconnect_from_mongo() -> None:
    global _client, _db
    if _client is not None:
        _client.close()
    _client = None
    _db = None

