"""
S3/MinIO storage backend.

Implements StorageBackend for Amazon S3 and S3-compatible services (MinIO, etc.).
"""

import shutil
from typing import BinaryIO, NoReturn

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from depot.core.exceptions import FileNotFoundError as StorageFileNotFoundError
from depot.core.exceptions import StorageError, StreamError
from depot.core.logging import get_logger
from depot.services.storage.base import DEFAULT_CONTENT_TYPE, StorageBackend
from depot.services.storage.file import CHUNK_SIZE, StoredFile, make_tempfile

logger = get_logger(__name__, backend="s3")

NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


class S3StorageBackend(StorageBackend):
    """S3/MinIO storage implementation."""

    def __init__(
        self,
        bucket_name: str,
        access_key: str | None = None,
        secret_key: str | None = None,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        prefix: str = "",
    ) -> None:
        """
        Initialize S3 storage backend.

        Args:
            bucket_name: S3 bucket name.
            access_key: AWS access key ID. Falls back to the default
                credential chain when omitted.
            secret_key: AWS secret access key.
            region: AWS region.
            endpoint_url: Custom endpoint URL (for MinIO/self-hosted).
            prefix: Key prefix so several backends can share one bucket.
        """
        self.bucket_name = bucket_name
        self.region = region
        self.endpoint_url = endpoint_url
        self.prefix = prefix.strip("/")

        session = boto3.Session(
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region,
        )

        client_config = BotoConfig(
            signature_version="s3v4",
            s3={"addressing_style": "path" if endpoint_url else "auto"},
        )
        self.client = session.client(
            "s3",
            endpoint_url=endpoint_url,
            config=client_config,
        )

    def _key(self, id: str) -> str:
        return f"{self.prefix}/{id}" if self.prefix else id

    def _raise_for(self, e: ClientError, id: str, action: str) -> NoReturn:
        """Translate a client error into a storage error."""
        if e.response.get("Error", {}).get("Code") in NOT_FOUND_CODES:
            raise StorageFileNotFoundError(id) from e
        raise StorageError(
            message=f"Failed to {action} S3 object: {e}",
            details={"id": id, "bucket": self.bucket_name},
        ) from e

    def _head(self, id: str) -> dict:
        try:
            return self.client.head_object(Bucket=self.bucket_name, Key=self._key(id))
        except ClientError as e:
            self._raise_for(e, id, "inspect")

    def upload(
        self,
        data: bytes | BinaryIO,
        content_type: str | None = None,
    ) -> StoredFile:
        """Upload content to S3 under a new key."""
        id = self.generate_id()

        try:
            self.client.put_object(
                Bucket=self.bucket_name,
                Key=self._key(id),
                Body=data,
                ContentType=content_type or DEFAULT_CONTENT_TYPE,
            )
        except ClientError as e:
            raise StorageError(
                message=f"Failed to upload to S3: {e}",
                details={"id": id, "bucket": self.bucket_name},
            ) from e

        logger.info("file_uploaded", bucket=self.bucket_name, id=id)
        return self.get(id)

    def open(self, id: str) -> BinaryIO:
        """
        Fetch an object into a temporary file.

        The returned stream is already a local temporary file, so
        StoredFile.download() hands it back without copying it again.
        """
        try:
            response = self.client.get_object(Bucket=self.bucket_name, Key=self._key(id))
        except ClientError as e:
            self._raise_for(e, id, "download")

        tmp = make_tempfile(id)
        body = response["Body"]
        try:
            shutil.copyfileobj(body, tmp, CHUNK_SIZE)
            tmp.flush()
            tmp.seek(0)
        except (OSError, BotoCoreError) as e:
            tmp.close()
            raise StreamError(
                message=f"Failed to download from S3: {e}",
                details={"id": id, "bucket": self.bucket_name},
            ) from e
        except BaseException:
            tmp.close()
            raise
        finally:
            body.close()

        return tmp

    def size(self, id: str) -> int:
        return self._head(id)["ContentLength"]

    def type(self, id: str) -> str:
        return self._head(id).get("ContentType") or DEFAULT_CONTENT_TYPE

    def delete(self, id: str) -> None:
        # delete_object succeeds for missing keys, so check first
        self._head(id)

        try:
            self.client.delete_object(Bucket=self.bucket_name, Key=self._key(id))
        except ClientError as e:
            self._raise_for(e, id, "delete")

        logger.info("file_deleted", bucket=self.bucket_name, id=id)

    def exists(self, id: str) -> bool:
        try:
            self.client.head_object(Bucket=self.bucket_name, Key=self._key(id))
            return True
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in NOT_FOUND_CODES:
                return False
            raise StorageError(
                message=f"Failed to check file existence: {e}",
                details={"id": id, "bucket": self.bucket_name},
            ) from e

    def clear(self) -> None:
        """Delete every object under this backend's prefix."""
        prefix = f"{self.prefix}/" if self.prefix else ""

        try:
            paginator = self.client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket_name, Prefix=prefix):
                objects = [{"Key": obj["Key"]} for obj in page.get("Contents", [])]
                if objects:
                    self.client.delete_objects(
                        Bucket=self.bucket_name,
                        Delete={"Objects": objects, "Quiet": True},
                    )
        except ClientError as e:
            raise StorageError(
                message=f"Failed to clear S3 prefix: {e}",
                details={"prefix": prefix, "bucket": self.bucket_name},
            ) from e

        logger.info("backend_cleared", bucket=self.bucket_name, prefix=prefix)
