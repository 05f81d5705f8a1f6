"""
S3 report source.

Streams a report object from Amazon S3 so CI pipelines can hand over
reports published to a bucket instead of a local file.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import IO, Any, Iterator

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from depcheck.errors import ReportNotFoundError, ReportUnreadableError
from depcheck.loader.base import ReportSource

logger = logging.getLogger(__name__)

_MISSING_CODES = ("NoSuchKey", "NoSuchBucket", "404")


def _error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "Unknown")


class S3ReportSource(ReportSource):
    """
    Report stored as an S3 object.

    Attributes:
        bucket: S3 bucket name
        key: Object key of the report
        region: AWS region
    """

    def __init__(self, bucket: str, key: str, region: str = "us-east-1") -> None:
        """
        Initialize the source.

        Args:
            bucket: S3 bucket name
            key: Object key of the report
            region: AWS region (default: "us-east-1")
        """
        self.bucket = bucket
        self.key = key.lstrip("/")
        self.region = region
        self._client: Any = None

    @classmethod
    def from_url(cls, url: str, region: str = "us-east-1") -> S3ReportSource:
        """
        Create from an s3://bucket/key URL.

        Raises:
            ValueError: If the URL has no bucket or no key
        """
        if not url.startswith("s3://"):
            raise ValueError(f"Not an S3 URL: {url}")
        bucket, _, key = url[len("s3://"):].partition("/")
        if not bucket or not key:
            raise ValueError(f"S3 URL must name a bucket and a key: {url}")
        return cls(bucket=bucket, key=key, region=region)

    @property
    def location(self) -> str:
        return f"s3://{self.bucket}/{self.key}"

    def _get_s3_client(self) -> Any:
        """Get or create S3 client."""
        if self._client is None:
            self._client = boto3.client("s3", region_name=self.region)
        return self._client

    def exists(self) -> bool:
        try:
            self._get_s3_client().head_object(Bucket=self.bucket, Key=self.key)
        except ClientError as e:
            if _error_code(e) in _MISSING_CODES:
                return False
            raise ReportUnreadableError(
                self.location, f"Cannot access {self.location}: {_error_code(e)}"
            ) from e
        return True

    @contextmanager
    def open(self) -> Iterator[IO[bytes]]:
        try:
            response = self._get_s3_client().get_object(Bucket=self.bucket, Key=self.key)
        except ClientError as e:
            error_code = _error_code(e)
            if error_code in _MISSING_CODES:
                raise ReportNotFoundError(self.location) from e
            if error_code == "AccessDenied":
                raise ReportUnreadableError(
                    self.location, f"Access denied when reading {self.location}"
                ) from e
            raise ReportUnreadableError(
                self.location, f"Cannot read {self.location}: {error_code}"
            ) from e
        except BotoCoreError as e:
            raise ReportUnreadableError(
                self.location, f"Cannot read {self.location}: {e}"
            ) from e

        body = response["Body"]
        logger.debug(f"Opened report {self.location}")
        try:
            yield body
        finally:
            body.close()
