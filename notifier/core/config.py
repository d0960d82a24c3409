"""
Configuración central del notificador (fuente única de verdad).
Lee variables de entorno y expone un objeto Settings tipado.
"""
import os
from pydantic import BaseModel, Field


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Settings(BaseModel):
    MONGO_URI: str = Field(default_factory=lambda: os.getenv("MONGO_URI", "mongodb://localhost:27017"))
    MONGO_DB: str  = Field(default_factory=lambda: os.getenv("MONGO_DB", "reports_app"))
    REPORTS_COLLECTION: str = Field(default_factory=lambda: os.getenv("REPORTS_COLLECTION", "reports"))
    USERS_COLLECTION: str = Field(default_factory=lambda: os.getenv("USERS_COLLECTION", "users"))

    # Push: "fcm" (firebase-admin) | "log" (solo registra, para desarrollo)
    PUSH_PROVIDER: str = Field(default_factory=lambda: os.getenv("PUSH_PROVIDER", "fcm"))
    FIREBASE_CREDENTIALS: str = Field(default_factory=lambda: os.getenv("FIREBASE_CREDENTIALS", ""))
    FIREBASE_PROJECT_ID: str = Field(default_factory=lambda: os.getenv("FIREBASE_PROJECT_ID", ""))

    # Host del trigger (change stream)
    WATCH_REPORTS: bool = Field(default_factory=lambda: _env_bool("WATCH_REPORTS", "true"))
    TRIGGER_MAX_ATTEMPTS: int = Field(default_factory=lambda: int(os.getenv("TRIGGER_MAX_ATTEMPTS", "1")))
    TRIGGER_RETRY_DELAY: float = Field(default_factory=lambda: float(os.getenv("TRIGGER_RETRY_DELAY", "1.0")))

    CORS_ORIGINS: list[str] = Field(default_factory=lambda: ["*"])

settings = Settings()
