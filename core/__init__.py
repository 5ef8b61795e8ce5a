# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the storage pipeline and idea validation logic:
# - models/: Pydantic schemas for rows and results
# - services/: Paths, signing, uploads, metadata, privacy, retrieval
# - context.py: Builds and owns every client and service for one app
#
# Code in this package should NOT import from FastAPI routers.
# This keeps the logic testable and reusable.
# =============================================================================
