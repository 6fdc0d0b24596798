"""Object storage upload

The scheduler only depends on the Uploader protocol. S3Uploader implements
it for any S3-compatible endpoint (AWS, MinIO, Wasabi).
"""

from pathlib import Path
from typing import Any, Optional, Protocol

import boto3
from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import BotoCoreError, ClientError

from dbdump.exceptions import ConfigurationError, UploadError
from dbdump.logger import Logger


class Uploader(Protocol):
    """Puts a local file into a bucket under a key"""

    def put(self, bucket: str, key: str, local_path: Path) -> None: ...


class S3Uploader:
    """Upload artifacts to S3-compatible object storage"""

    def __init__(
        self,
        endpoint: str,
        access_key: str,
        secret_key: str,
        region: str = "us-east-1",
        secure: bool = True,
        logger: Optional[Logger] = None,
        client: Any = None,
    ) -> None:
        """
        Args:
            endpoint: Host[:port] or full URL of the S3 endpoint
            access_key: Access key id
            secret_key: Secret access key
            region: Region name
            secure: Use https when ``endpoint`` has no scheme
            logger: Optional logger
            client: Pre-built S3 client (tests)

        Raises:
            ConfigurationError: boto3 rejects the endpoint
        """
        self.endpoint_url = endpoint_url(endpoint, secure)
        self.logger = logger
        if client is None:
            try:
                client = boto3.client(
                    "s3",
                    endpoint_url=self.endpoint_url,
                    aws_access_key_id=access_key,
                    aws_secret_access_key=secret_key,
                    region_name=region,
                )
            except ValueError as e:
                raise ConfigurationError(
                    f"Invalid S3 endpoint: {e}",
                    details={"endpoint": self.endpoint_url},
                ) from e
        self.client = client

    def put(self, bucket: str, key: str, local_path: Path) -> None:
        """Upload ``local_path`` to ``s3://bucket/key``

        Raises:
            UploadError: Upload failed for any reason
        """
        local_path = Path(local_path)
        if not local_path.is_file():
            raise UploadError(
                f"Artifact to upload not found: {local_path}",
                details={"bucket": bucket, "key": key},
            )

        try:
            self.client.upload_file(str(local_path), bucket, key)
        except (ClientError, BotoCoreError, S3UploadFailedError) as e:
            raise UploadError(
                f"Failed to upload {local_path.name} to {bucket}: {e}",
                details={"bucket": bucket, "key": key},
            ) from e

        if self.logger is not None:
            self.logger.info(f"Uploaded to s3://{bucket}/{key}", size=local_path.stat().st_size)

    def verify(self, bucket: str) -> bool:
        """Check credentials and bucket access

        Returns:
            True if the bucket is reachable
        """
        try:
            self.client.head_bucket(Bucket=bucket)
        except (ClientError, BotoCoreError) as e:
            if self.logger is not None:
                self.logger.warning("S3 bucket check failed", bucket=bucket, endpoint=self.endpoint_url, error=str(e))
            return False

        if self.logger is not None:
            self.logger.info("S3 connection OK", bucket=bucket, endpoint=self.endpoint_url)
        return True


def endpoint_url(endpoint: str, secure: bool = True) -> str:
    """Normalise an endpoint given as ``host[:port]`` or URL"""
    endpoint = endpoint.strip().rstrip("/")
    if "://" in endpoint:
        return endpoint
    scheme = "https" if secure else "http"
    return f"{scheme}://{endpoint}"


def object_key(prefix: str, local_path: Path) -> str:
    """Bucket key for an artifact: optional prefix plus the file name"""
    prefix = prefix.strip("/")
    name = Path(local_path).name
    return f"{prefix}/{name}" if prefix else name
