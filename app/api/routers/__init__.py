"""
app/api/routers package marker.
"""

from app.api.routers.analytics import router as analytics_router
from app.api.routers.imports import router as imports_router
from app.api.routers.records import router as records_router
from app.api.routers.timelines import router as timelines_router
from app.api.routers.transforms import router as transforms_router

__all__ = [
    "analytics_router",
    "imports_router",
    "records_router",
    "timelines_router",
    "transforms_router",
]
