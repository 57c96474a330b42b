"""
S3 service for registration attachments.

Provides a lazy-initialized boto3 client and helpers for storing files
uploaded with registration forms.
"""

import logging
import os
import uuid

from aldrich_site.utils.slugify import safe_filename

logger = logging.getLogger(__name__)

ATTACHMENT_PREFIX = "signups"

# Lazy-initialized S3 client
_s3_client = None


def _get_config():
    """Read S3 configuration from environment at call time (not import time)."""
    return {
        "access_key_id": os.getenv("AWS_ACCESS_KEY_ID"),
        "secret_access_key": os.getenv("AWS_SECRET_ACCESS_KEY"),
        "bucket": os.getenv("AWS_S3_BUCKET"),
        "region": os.getenv("AWS_S3_REGION", "us-east-1"),
    }


def _get_s3_client():
    """Get or create the boto3 S3 client. Lazy-imports boto3 to avoid import-time dependency."""
    global _s3_client
    if _s3_client is None:
        cfg = _get_config()
        if not all([cfg["access_key_id"], cfg["secret_access_key"], cfg["bucket"]]):
            raise ValueError(
                "AWS S3 environment variables not configured. "
                "Set AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY, and AWS_S3_BUCKET."
            )
        import boto3

        _s3_client = boto3.client(
            "s3",
            aws_access_key_id=cfg["access_key_id"],
            aws_secret_access_key=cfg["secret_access_key"],
            region_name=cfg["region"],
        )
    return _s3_client


def attachment_key(program_slug: str, filename: str) -> str:
    """
    Storage key for a registration attachment.

    Format: signups/{program_slug}/{uuid}-{filename}. The random prefix keeps
    two uploads of the same filename from overwriting each other.
    """
    return f"{ATTACHMENT_PREFIX}/{program_slug}/{uuid.uuid4()}-{safe_filename(filename)}"


async def upload_attachment(
    program_slug: str,
    filename: str,
    file_bytes: bytes,
    content_type: str = "application/octet-stream",
) -> str:
    """
    Upload one registration attachment to S3.

    Args:
        program_slug: Registration program the file belongs to
        filename: Original filename from the form
        file_bytes: Raw file content
        content_type: MIME type for the uploaded object

    Returns:
        The object key (stored on the submission, not a public URL)
    """
    client = _get_s3_client()
    cfg = _get_config()
    key = attachment_key(program_slug, filename)

    client.put_object(
        Bucket=cfg["bucket"],
        Key=key,
        Body=file_bytes,
        ContentType=content_type or "application/octet-stream",
    )

    logger.info("Uploaded registration attachment to S3: %s", key)
    return key
