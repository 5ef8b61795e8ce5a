# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Supabase client factory and PostgREST helpers
# - s3_client.py: boto3 S3 client factory for signed URLs
# - utils.py: Shared utilities (UUID comparison, URL redaction, timestamps)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClientError, create_supabase_client, is_no_rows_error
from lib.s3_client import create_s3_client
from lib.utils import normalize_uuid, now_millis, redact_url, same_user

__all__ = [
    # Supabase
    "SupabaseClientError",
    "create_supabase_client",
    "is_no_rows_error",
    # S3
    "create_s3_client",
    # Utils
    "normalize_uuid",
    "now_millis",
    "redact_url",
    "same_user",
]
