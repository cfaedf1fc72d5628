# files_manager/core/storage.py
"""Content stores for uploaded bytes.

Metadata records only keep the locator returned by ``store``; the bytes live
either in a local directory (one file per upload, named by a fresh uuid) or
in an S3 bucket.
"""

import uuid
from pathlib import Path

import boto3
from botocore.exceptions import ClientError

from files_manager.core.errors import InternalError


class ContentNotFound(Exception):
    pass


class LocalContentStore:
    def __init__(self, root: str | Path):
        self.root = Path(root)

    def _path(self, locator: str, suffix: str | None = None) -> Path:
        return Path(f"{locator}_{suffix}") if suffix else Path(locator)

    def store(self, data: bytes) -> str:
        path = self.root / uuid.uuid4().hex
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise InternalError(f"Could not write content to {self.root}") from e
        return str(path.resolve())

    def store_derived(self, locator: str, suffix: str, data: bytes) -> str:
        path = self._path(locator, suffix)
        try:
            path.write_bytes(data)
        except OSError as e:
            raise InternalError(f"Could not write content to {path}") from e
        return str(path)

    def fetch(self, locator: str, suffix: str | None = None) -> bytes:
        path = self._path(locator, suffix)
        try:
            return path.read_bytes()
        except (FileNotFoundError, IsADirectoryError) as e:
            raise ContentNotFound(str(path)) from e
        except OSError as e:
            raise InternalError(f"Could not read content from {path}") from e

    def discard(self, locator: str) -> None:
        self._path(locator).unlink(missing_ok=True)


class S3ContentStore:
    def __init__(self, client, bucket: str, prefix: str = ""):
        self.client = client
        self.bucket = bucket
        self.prefix = prefix

    @classmethod
    def from_settings(cls, settings) -> "S3ContentStore":
        client = boto3.client(
            "s3",
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            region_name=settings.aws_region,
        )
        return cls(client, settings.aws_s3_bucket_name)

    def _key(self, locator: str, suffix: str | None = None) -> str:
        return f"{locator}_{suffix}" if suffix else locator

    def store(self, data: bytes) -> str:
        key = f"{self.prefix}{uuid.uuid4().hex}"
        self.client.put_object(Bucket=self.bucket, Key=key, Body=data)
        return key

    def store_derived(self, locator: str, suffix: str, data: bytes) -> str:
        key = self._key(locator, suffix)
        self.client.put_object(Bucket=self.bucket, Key=key, Body=data)
        return key

    def fetch(self, locator: str, suffix: str | None = None) -> bytes:
        key = self._key(locator, suffix)
        try:
            obj = self.client.get_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            if code in ("NoSuchKey", "404"):
                raise ContentNotFound(key) from e
            raise
        return obj["Body"].read()

    def discard(self, locator: str) -> None:
        self.client.delete_object(Bucket=self.bucket, Key=locator)


def build_content_store(settings):
    if settings.storage_backend == "s3":
        return S3ContentStore.from_settings(settings)
    return LocalContentStore(settings.folder_path)
