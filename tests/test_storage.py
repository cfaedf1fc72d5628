"""Tests for the local and S3 content stores."""

import io
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from files_manager.core.config import Settings
from files_manager.core.errors import InternalError
from files_manager.core.storage import (
    ContentNotFound,
    LocalContentStore,
    S3ContentStore,
    build_content_store,
)


class TestLocalContentStore:
    def test_creates_root_on_first_store(self, tmp_path):
        root = tmp_path / "nested" / "files"
        store = LocalContentStore(root)

        locator = store.store(b"Hello")

        assert root.is_dir()
        assert Path(locator).parent == root.resolve()
        assert store.fetch(locator) == b"Hello"

    def test_each_store_gets_a_fresh_file(self, tmp_path):
        store = LocalContentStore(tmp_path)

        with ThreadPoolExecutor(max_workers=8) as pool:
            locators = list(pool.map(store.store, [str(i).encode() for i in range(50)]))

        assert len(set(locators)) == 50
        assert sorted(store.fetch(locator) for locator in locators) == sorted(str(i).encode() for i in range(50))

    def test_unusable_root(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        store = LocalContentStore(blocker / "files")

        with pytest.raises(InternalError):
            store.store(b"Hello")

    def test_derived_write_failure(self, tmp_path):
        store = LocalContentStore(tmp_path)

        with pytest.raises(InternalError):
            store.store_derived(str(tmp_path / "missing-dir" / "abc"), "100", b"thumb")

    def test_fetch_missing(self, tmp_path):
        store = LocalContentStore(tmp_path)

        with pytest.raises(ContentNotFound):
            store.fetch(str(tmp_path / "gone"))

    def test_derived_rendition(self, tmp_path):
        store = LocalContentStore(tmp_path)
        locator = store.store(b"full")

        store.store_derived(locator, "100", b"thumb")

        assert Path(f"{locator}_100").read_bytes() == b"thumb"
        assert store.fetch(locator, "100") == b"thumb"
        assert store.fetch(locator) == b"full"

    def test_discard(self, tmp_path):
        store = LocalContentStore(tmp_path)
        locator = store.store(b"x")

        store.discard(locator)
        store.discard(locator)

        with pytest.raises(ContentNotFound):
            store.fetch(locator)


class TestS3ContentStore:
    @pytest.fixture
    def client(self):
        return MagicMock()

    def test_store_puts_object(self, client):
        store = S3ContentStore(client, "bucket", prefix="uploads/")

        key = store.store(b"Hello")

        assert key.startswith("uploads/")
        client.put_object.assert_called_once_with(Bucket="bucket", Key=key, Body=b"Hello")

    def test_fetch(self, client):
        client.get_object.return_value = {"Body": io.BytesIO(b"Hello")}
        store = S3ContentStore(client, "bucket")

        assert store.fetch("abc", "500") == b"Hello"
        client.get_object.assert_called_once_with(Bucket="bucket", Key="abc_500")

    def test_fetch_missing_key(self, client):
        client.get_object.side_effect = ClientError({"Error": {"Code": "NoSuchKey"}}, "GetObject")
        store = S3ContentStore(client, "bucket")

        with pytest.raises(ContentNotFound):
            store.fetch("abc")

    def test_fetch_other_errors_propagate(self, client):
        client.get_object.side_effect = ClientError({"Error": {"Code": "AccessDenied"}}, "GetObject")
        store = S3ContentStore(client, "bucket")

        with pytest.raises(ClientError):
            store.fetch("abc")

    def test_discard(self, client):
        S3ContentStore(client, "bucket").discard("abc")

        client.delete_object.assert_called_once_with(Bucket="bucket", Key="abc")


class TestBuildContentStore:
    def test_local_by_default(self, tmp_path):
        store = build_content_store(Settings(folder_path=str(tmp_path)))

        assert isinstance(store, LocalContentStore)
        assert store.root == tmp_path

    @patch("files_manager.core.storage.boto3")
    def test_s3_backend(self, mock_boto3):
        settings = Settings(
            storage_backend="s3",
            aws_access_key_id="key",
            aws_secret_access_key="secret",
            aws_region="eu-west-1",
            aws_s3_bucket_name="bucket",
        )

        store = build_content_store(settings)

        assert isinstance(store, S3ContentStore)
        assert store.bucket == "bucket"
        mock_boto3.client.assert_called_once_with(
            "s3",
            aws_access_key_id="key",
            aws_secret_access_key="secret",
            region_name="eu-west-1",
        )
