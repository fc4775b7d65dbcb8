"""
API V1 Endpoints Package
Exports routers used by main app
"""
from .applications import router as applications_router
from .files import router as files_router
from .admin_cleanup import router as admin_cleanup_router

__all__ = [
    "applications_router",
    "files_router",
    "admin_cleanup_router",
]
