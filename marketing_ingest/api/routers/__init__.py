"""
marketing_ingest/api/routers package marker.
"""

from marketing_ingest.api.routers.notes_router import router as notes_router
from marketing_ingest.api.routers.upload_router import router as upload_router

__all__ = [
    "notes_router",
    "upload_router",
]
