from posbakum.web.routers.admin import router as admin_router
from posbakum.web.routers.assistant import router as assistant_router
from posbakum.web.routers.auth import router as auth_router
from posbakum.web.routers.queue import router as queue_router
from posbakum.web.routers.settings import router as settings_router
from posbakum.web.routers.tickets import router as tickets_router
from posbakum.web.routers.visitor import router as visitor_router

__all__ = [
    "admin_router",
    "assistant_router",
    "auth_router",
    "queue_router",
    "settings_router",
    "tickets_router",
    "visitor_router",
]
