# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - storage.py: Raw signed upload/download URLs for storage paths
# - files.py: Idea documents (file manager)
# - images.py: Idea image gallery
# - validation.py: AI idea validation
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import storage
from . import files
from . import images
from . import validation

__all__ = [
    "health",
    "storage",
    "files",
    "images",
    "validation",
]
