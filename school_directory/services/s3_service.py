import logging
import re
import time
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from typing import Optional

from school_directory.core.config import Settings
from school_directory.core.constants import ALLOWED_IMAGE_TYPES
from school_directory.core.exceptions import (
    PayloadTooLargeError,
    StoreUnavailableError,
    UnsupportedMediaTypeError,
)

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]+")

def parse_size_to_bytes(size_str: str) -> int:
    size_str = size_str.strip().upper()
    units = (('TB', 1024 ** 4), ('GB', 1024 ** 3), ('MB', 1024 ** 2), ('KB', 1024))
    for suffix, multiplier in units:
        if size_str.endswith(suffix):
            return int(float(size_str[:-2]) * multiplier)
    return int(size_str)

class S3Service:
    def __init__(self, settings: Settings, s3_client=None):
        self.s3_client = s3_client or boto3.client('s3', region_name=settings.AWS_REGION)
        self.bucket_name = settings.S3_BUCKET_NAME
        self.region = settings.AWS_REGION
        self.key_prefix = settings.S3_IMAGE_PREFIX.strip('/')
        self.public_base_url = settings.S3_PUBLIC_BASE_URL.rstrip('/') if settings.S3_PUBLIC_BASE_URL else None
        self.max_upload_size = parse_size_to_bytes(settings.MAX_BLOB_UPLOAD_SIZE)

    def build_key(self, filename: Optional[str]) -> str:
        safe_name = _UNSAFE_KEY_CHARS.sub('-', filename or 'image').strip('-') or 'image'
        return f"{self.key_prefix}/{int(time.time() * 1000)}-{safe_name}"

    def public_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{key}"

    def upload_image(self, file: bytes, filename: Optional[str], content_type: Optional[str]) -> str:
        content_type = (content_type or '').lower()
        if content_type not in ALLOWED_IMAGE_TYPES:
            raise UnsupportedMediaTypeError(f"Unsupported image type: {content_type or 'unknown'}")
        if len(file) > self.max_upload_size:
            raise PayloadTooLargeError(
                f"Image must be less than {self.max_upload_size / 1024 / 1024:.1f} MB"
            )

        key = self.build_key(filename)
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=file,
                ContentType=content_type,
                ACL='public-read'
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to upload image {key}: {e}")
            raise StoreUnavailableError("Image storage is unavailable") from e

        logger.info(f"Uploaded image {key} ({len(file)} bytes)")
        return self.public_url(key)
