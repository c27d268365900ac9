import boto3
from botocore.exceptions import ClientError, NoCredentialsError
from typing import Optional
from urllib.parse import unquote
import logging

from .config import settings
from .exceptions import StorageError

logger = logging.getLogger(__name__)

_MISSING_OBJECT_CODES = {"NoSuchKey", "404", "NotFound"}


class S3Service:
    def __init__(self):
        try:
            # Configure S3 client with optional endpoint URL for MinIO / LocalStack
            client_config = {
                'aws_access_key_id': settings.AWS_ACCESS_KEY_ID,
                'aws_secret_access_key': settings.AWS_SECRET_ACCESS_KEY,
                'region_name': settings.AWS_REGION
            }

            if settings.AWS_ENDPOINT_URL:
                client_config['endpoint_url'] = settings.AWS_ENDPOINT_URL

            self.s3_client = boto3.client('s3', **client_config)
            self.bucket_name = settings.S3_BUCKET_NAME

        except NoCredentialsError:
            logger.error("AWS credentials not found")
            raise StorageError("AWS credentials not configured")
        except Exception as e:
            logger.error(f"Failed to initialize S3 client: {e}")
            raise StorageError("Failed to initialize S3 service") from e

    def resolve_object_key(self, object_name_or_url: str) -> str:
        """
        Turn a stored object reference into a bucket key.

        References may be percent-encoded (``%20`` for spaces, UTF-8 escapes for
        non-ASCII names) and may be full URLs of the form
        ``http://host/<bucket>/<key>``.
        """
        key = unquote(object_name_or_url)

        if key.startswith("http://") or key.startswith("https://"):
            marker = f"/{self.bucket_name}/"
            if marker in key:
                key = key.split(marker, 1)[1]
            else:
                logger.warning(f"Could not find bucket in object URL, using as-is: {key}")

        return key

    def download_bytes(self, object_name_or_url: str) -> Optional[bytes]:
        """
        Download an object's content.

        Returns None when the object does not exist. Other client errors are
        raised as StorageError.
        """
        key = self.resolve_object_key(object_name_or_url)
        logger.debug(f"Downloading object from S3: {key}")

        try:
            response = self.s3_client.get_object(Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            error_code = e.response.get('Error', {}).get('Code', '')
            if error_code in _MISSING_OBJECT_CODES:
                logger.warning(f"Object {key} not found in bucket {self.bucket_name}")
                return None
            logger.error(f"S3 download failed: {error_code} - {e}")
            raise StorageError(f"Failed to download {key}: {error_code}") from e

        body = response['Body']
        try:
            return body.read()
        finally:
            body.close()


_s3_service: Optional[S3Service] = None


def get_s3_service() -> S3Service:
    """Lazily create the shared S3 service."""
    global _s3_service
    if _s3_service is None:
        _s3_service = S3Service()
    return _s3_service
