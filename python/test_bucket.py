#!/usr/bin/env python3
"""BucketManager と S3Uploader のテスト"""
import pytest

from conftest import FakeBackend
from s3_multipart import Config, S3Uploader, UploadRequest
from s3_multipart.core.bucket import BucketManager
from s3_multipart.errors import BackendRequestError


class FailingDeleteBackend(FakeBackend):
    def delete_object(self, bucket, key):
        raise RuntimeError("access denied")


def make_config():
    return Config.from_env({"S3_ACCESS_KEY": "a", "S3_SECRET_KEY": "s", "S3_PART_SIZE": "1000"})


def test_cleanup_removes_every_object(fake_backend):
    fake_backend.objects = {("b", "x"): b"1", ("b", "y"): b"2", ("other", "z"): b"3"}

    removed = BucketManager(fake_backend).cleanup("b")

    assert removed == 2
    assert list(fake_backend.objects) == [("other", "z")]


def test_cleanup_error_names_key():
    backend = FailingDeleteBackend()
    backend.objects = {("b", "x"): b"1"}

    with pytest.raises(BackendRequestError) as exc_info:
        BucketManager(backend).cleanup("b")

    assert exc_info.value.stage == "delete_object"
    assert "failed to delete object x" in str(exc_info.value)


def test_uploader_facade(make_file, fake_backend):
    """バケット作成 -> アップロード -> 掃除 -> 削除"""
    uploader = S3Uploader(make_config(), backend=fake_backend)
    path = make_file(2500)

    uploader.create_bucket("test-bucket")
    uploader.upload(UploadRequest(bucket="test-bucket", file_path=path, key="acceptance/large.bin"))
    uploader.upload(UploadRequest(bucket="test-bucket", file_path=make_file(10, "small.txt"),
                                  key="acceptance/small.txt"))

    assert "test-bucket" in fake_backend.buckets
    assert len(fake_backend.complete_calls) == 1
    assert len(fake_backend.put_calls) == 1

    assert uploader.cleanup_bucket("test-bucket") == 2
    uploader.delete_bucket("test-bucket")
    assert fake_backend.buckets == set()
