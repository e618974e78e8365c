"""
API Routers / API 路由
"""

from .projects import router as projects_router
from .books import router as books_router
from .documents import router as documents_router

__all__ = [
    "projects_router",
    "books_router",
    "documents_router",
]
