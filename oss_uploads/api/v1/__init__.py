"""
API v1 路由
"""
from .uploads import router as uploads_router
from .admin import router as admin_router

__all__ = [
    'uploads_router',
    'admin_router',
]
