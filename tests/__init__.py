# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the FundYourIdea API:
# - conftest.py: In-memory Supabase/storage fakes and a wired AppContext
# - test_paths.py, test_privacy.py: Pure path and visibility rules
# - test_signing_service.py, test_upload_service.py: Storage backend edges
# - test_*_service.py: Service flows end to end against the fakes
# - test_api.py: HTTP endpoints through TestClient
#
# Run tests with: pytest
# =============================================================================
