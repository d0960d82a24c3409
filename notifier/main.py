# notifier/main.py
"""
App FastAPI: CORS, lifespan (startup/shutdown), routers + middleware de trazas.
El lifespan crea una sola vez el cliente de Mongo, el sender push y el dispatcher,
y arranca el watcher del change stream de reportes.
"""
import logging, time

# ⬇️ antes de importar settings: carga .env
from dotenv import load_dotenv, find_dotenv
load_dotenv(find_dotenv(), override=True)

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .core.config import settings
from .db.mongo import connect_to_mongo, disconnect_from_mongo
from .models.user import UserRepo
from .routes import notifications, triggers
from .services.dispatcher import NotificationDispatcher
from .services.push import build_push_sender
from .tasks.worker import ReportChangeWatcher
from .telemetry.logging import setup_logging
from .telemetry.otel import setup_otel

http_logger = logging.getLogger("notifier.http")

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    setup_otel()
    db = connect_to_mongo()
    watcher = None
    try:
        push_sender = build_push_sender(settings)
        dispatcher = NotificationDispatcher(users=UserRepo(db), push=push_sender)
        app.state.push_sender = push_sender
        app.state.dispatcher = dispatcher

        if settings.WATCH_REPORTS:
            watcher = ReportChangeWatcher(
                db[settings.REPORTS_COLLECTION],
                dispatcher,
                max_attempts=settings.TRIGGER_MAX_ATTEMPTS,
                retry_delay=settings.TRIGGER_RETRY_DELAY,
            )
            watcher.start()
        yield
    finally:
        if watcher is not None:
            await watcher.stop()
        disconnect_from_mongo()

app = FastAPI(title="Report Notifier", version="0.1.0", lifespan=lifespan)

# ---------------- CORS ----------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------- Middleware de trazas ----------------
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    try:
        response = await call_next(request)
        dur = round(time.time() - start, 4)
        http_logger.info(f"{request.method} {request.url.path} -> {response.status_code} in {dur}s")
        return response
    except Exception as e:
        dur = round(time.time() - start, 4)
        http_logger.exception(f"{request.method} {request.url.path} EXC after {dur}s: {e}")
        raise

# ---------------- Healthcheck ----------------
@app.get("/health", tags=["misc"])
async def health():
    return {"ok": True}

# ---------------- Routers ----------------
app.include_router(triggers.router,      prefix="/triggers",      tags=["triggers"])
app.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
