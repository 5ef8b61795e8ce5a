# =============================================================================
# lib/s3_client.py - S3 Client Factory
# =============================================================================
# Builds the boto3 S3 client used to mint signed upload/download URLs.
# Works with AWS S3 and S3-compatible services (set S3_ENDPOINT_URL).
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

import boto3
from botocore.config import Config as BotoConfig

from app.config import Settings

logger = logging.getLogger(__name__)


def create_s3_client(settings: Settings) -> Any:
    """
    Create a boto3 S3 client from settings.

    Signature V4 is forced so that every presigned URL carries an
    X-Amz-Signature query parameter. Custom endpoints use path-style
    addressing, which is what most S3-compatible services expect.

    Args:
        settings: Application settings (credentials are required fields)

    Returns:
        botocore S3 client
    """
    config_kwargs: dict[str, Any] = {"signature_version": "s3v4"}
    client_kwargs: dict[str, Any] = {
        "region_name": settings.AWS_REGION,
        "aws_access_key_id": settings.AWS_ACCESS_KEY_ID,
        "aws_secret_access_key": settings.AWS_SECRET_ACCESS_KEY,
    }

    if settings.S3_ENDPOINT_URL:
        client_kwargs["endpoint_url"] = settings.S3_ENDPOINT_URL
        config_kwargs["s3"] = {"addressing_style": "path"}

    client = boto3.session.Session().client(
        "s3",
        config=BotoConfig(**config_kwargs),
        **client_kwargs,
    )

    logger.info(
        f"S3 client initialized: bucket={settings.AWS_S3_BUCKET} "
        f"region={settings.AWS_REGION} endpoint={settings.S3_ENDPOINT_URL or 'aws'}"
    )
    return client
