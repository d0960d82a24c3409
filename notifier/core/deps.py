"""
Dependencias comunes para FastAPI.
El dispatcher y el sender push se crean en el lifespan y viven en app.state.
"""
from fastapi import Request

from ..services.dispatcher import NotificationDispatcher
from ..services.push import PushSender


def current_dispatcher(request: Request) -> NotificationDispatcher:
    return request.app.state.dispatcher

def current_push_sender(request: Request) -> PushSender:
    return request.app.state.push_sender
