# src/imagepost/services/storage.py

"""
Object storage capability used by the post service.

The service only needs two things from a bucket: write bytes at a key and
list keys. Anything satisfying ObjectStorage can be plugged in, which is how
tests run the gateway against an in-memory store.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from opentelemetry import trace

from imagepost.exceptions import StorageError
from imagepost.metrics import storage_writes_total

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class ObjectStorage(Protocol):
    def put_object(self, key: str, data: bytes, content_type: Optional[str] = None) -> str:  # returns uri
        ...

    def list_keys(self, prefix: str = "") -> List[str]:
        ...


class S3ObjectStorage:
    """ObjectStorage backed by a single S3 bucket."""

    def __init__(self, bucket: str, region: Optional[str] = None, client=None) -> None:
        self.bucket = bucket
        if client is None:
            # boto3 picks credentials from env, ~/.aws, or IAM role
            session = boto3.session.Session(region_name=region) if region else boto3.session.Session()
            client = session.client("s3")
        self.client = client

    def uri(self, key: str) -> str:
        return f"s3://{self.bucket}/{key}"

    def put_object(self, key: str, data: bytes, content_type: Optional[str] = None) -> str:
        """
        Synchronously write bytes at `key`.
        Returns the s3:// uri of the stored object.
        """
        kwargs = {"Bucket": self.bucket, "Key": key, "Body": data}
        if content_type:
            kwargs["ContentType"] = content_type

        with tracer.start_as_current_span("s3.put_object") as span:
            span.set_attribute("s3.bucket", self.bucket)
            span.set_attribute("s3.key", key)
            span.set_attribute("file.size", len(data) if data is not None else 0)
            logger.info("Uploading to S3: bucket=%s key=%s", self.bucket, key)
            try:
                self.client.put_object(**kwargs)
            except (ClientError, BotoCoreError) as exc:
                storage_writes_total.labels(outcome="failure").inc()
                logger.error("S3 upload failed for key=%s: %s", key, exc)
                raise StorageError(
                    f"failed to write {key}",
                    details={"bucket": self.bucket, "key": key},
                ) from exc

        storage_writes_total.labels(outcome="success").inc()
        return self.uri(key)

    def list_keys(self, prefix: str = "") -> List[str]:
        """
        Return the keys of one ListObjectsV2 page under `prefix`.
        """
        kwargs = {"Bucket": self.bucket}
        if prefix:
            kwargs["Prefix"] = prefix

        with tracer.start_as_current_span("s3.list_objects") as span:
            span.set_attribute("s3.bucket", self.bucket)
            span.set_attribute("s3.prefix", prefix)
            try:
                resp = self.client.list_objects_v2(**kwargs)
            except (ClientError, BotoCoreError) as exc:
                logger.error("S3 listing failed for prefix=%s: %s", prefix, exc)
                raise StorageError(
                    f"failed to list objects under {prefix!r}",
                    details={"bucket": self.bucket, "prefix": prefix},
                ) from exc

        return [obj["Key"] for obj in resp.get("Contents", [])]


__all__ = ["ObjectStorage", "S3ObjectStorage"]
