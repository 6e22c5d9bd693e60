from .editor import router as cascade_router
from .history import router as history_router
from .items import router as items_router
from .menu import router as menu_router
from .settings import router as settings_router
from .stylesheet import router as stylesheet_router
from .transfer import router as transfer_router

__all__ = [
    "cascade_router",
    "history_router",
    "items_router",
    "menu_router",
    "settings_router",
    "stylesheet_router",
    "transfer_router",
]
