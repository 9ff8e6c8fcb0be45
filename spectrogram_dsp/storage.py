import logging
import os
import uuid
from pathlib import Path
from typing import Optional

try:  # Optional dependency handling
    import boto3  # type: ignore
except Exception:  # pragma: no cover - boto3 may not be installed in some envs
    boto3 = None  # type: ignore

logger = logging.getLogger("spectrogram_dsp.storage")


def _bucket_and_region() -> tuple[Optional[str], Optional[str]]:
    bucket = os.getenv("SPECTROGRAM_S3_BUCKET") or os.getenv("S3_BUCKET")
    region = os.getenv("SPECTROGRAM_S3_REGION") or os.getenv("AWS_REGION")
    return bucket, region


def _get_s3_client():
    """Return a configured S3 client or None if not available.

    Without boto3 or the bucket/region env vars, rendered images stay on
    the local filesystem and callers get plain paths back.
    """

    if boto3 is None:
        return None

    bucket, region = _bucket_and_region()
    if not bucket or not region:
        return None

    session = boto3.session.Session()
    return session.client("s3", region_name=region)


def upload_file_to_s3(
    local_path: str,
    *,
    key_prefix: Optional[str] = None,
    content_type: str = "image/png",
) -> str:
    """Upload a rendered image to S3 and return its URL.

    If S3 is not configured, this simply returns the original local path.
    """

    client = _get_s3_client()
    bucket, region = _bucket_and_region()

    if client is None or not bucket or not region:
        return local_path

    path = Path(local_path)
    prefix = (key_prefix or os.getenv("SPECTROGRAM_S3_PREFIX") or "spectrograms/").rstrip("/")
    object_key = f"{prefix}/{uuid.uuid4().hex}_{path.name}"

    client.upload_file(str(path), bucket, object_key, ExtraArgs={"ContentType": content_type})
    logger.info("[IO] uploaded %s to s3://%s/%s", path.name, bucket, object_key)

    try:
        path.unlink()
    except OSError:
        logger.warning("[IO] could not remove local copy %s after upload", path)

    return f"https://{bucket}.s3.{region}.amazonaws.com/{object_key}"
