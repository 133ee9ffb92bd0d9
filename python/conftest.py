"""テスト共通のフィクスチャ"""
import os
import threading
import time

import pytest
from botocore.exceptions import ClientError

from s3_multipart.utils.logger import LoggerManager

MIB = 1024 * 1024


def client_error(operation: str, code: str = "InternalError") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": f"{operation} failed"}}, operation)


class FakeBackend:
    """呼び出しを記録するインメモリのバックエンド"""

    def __init__(self, delay: float = 0.0, fail_part: int = None, fail_put: bool = False,
                 fail_create: bool = False, fail_complete: bool = False,
                 fail_abort: bool = False, fail_visibility: bool = False,
                 on_upload_part=None, on_put=None):
        self.delay = delay
        self.fail_part = fail_part
        self.fail_put = fail_put
        self.fail_create = fail_create
        self.fail_complete = fail_complete
        self.fail_abort = fail_abort
        self.fail_visibility = fail_visibility
        self.on_upload_part = on_upload_part
        self.on_put = on_put

        self.lock = threading.Lock()
        self.put_calls = []
        self.create_calls = []
        self.part_calls = {}
        self.complete_calls = []
        self.abort_calls = []
        self.visibility_calls = []
        self.visibility_context = None
        self.buckets = set()
        self.objects = {}
        self.in_flight = 0
        self.peak_in_flight = 0

    def put_object(self, bucket, key, body):
        self.put_calls.append((bucket, key))
        if self.on_put is not None:
            self.on_put()
        if self.fail_put:
            raise client_error("PutObject")
        self.objects[(bucket, key)] = body.read()
        return '"etag-single"'

    def create_multipart_upload(self, bucket, key):
        self.create_calls.append((bucket, key))
        if self.fail_create:
            raise client_error("CreateMultipartUpload")
        return "upload-id"

    def upload_part(self, bucket, key, upload_id, part_number, body):
        with self.lock:
            self.in_flight += 1
            self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            if self.delay:
                time.sleep(self.delay)
            with self.lock:
                self.part_calls[part_number] = bytes(body)
            if self.on_upload_part is not None:
                self.on_upload_part(part_number)
            if part_number == self.fail_part:
                raise client_error("UploadPart")
            return f'"etag-{part_number}"'
        finally:
            with self.lock:
                self.in_flight -= 1

    def complete_multipart_upload(self, bucket, key, upload_id, parts):
        self.complete_calls.append(parts)
        if self.fail_complete:
            raise client_error("CompleteMultipartUpload")
        self.objects[(bucket, key)] = b"".join(
            self.part_calls[part["PartNumber"]] for part in parts
        )

    def abort_multipart_upload(self, bucket, key, upload_id):
        self.abort_calls.append(upload_id)
        if self.fail_abort:
            raise client_error("AbortMultipartUpload", "NoSuchUpload")

    def wait_until_visible(self, bucket, key, timeout, context=None):
        self.visibility_calls.append((bucket, key, timeout))
        self.visibility_context = context
        if self.fail_visibility:
            raise TimeoutError(f"{key} did not become visible within {timeout}s")

    def create_bucket(self, bucket):
        self.buckets.add(bucket)

    def delete_bucket(self, bucket):
        self.buckets.discard(bucket)

    def list_objects(self, bucket):
        return [key for (b, key) in self.objects if b == bucket]

    def delete_object(self, bucket, key):
        del self.objects[(bucket, key)]


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def make_file(tmp_path):
    """指定サイズの一時ファイルを作成"""
    def _make_file(size: int, name: str = "testfile.bin") -> str:
        path = os.path.join(str(tmp_path), name)
        pattern = bytes(range(256)) * 4096
        with open(path, "wb") as f:
            written = 0
            while written < size:
                chunk = pattern[:min(len(pattern), size - written)]
                f.write(chunk)
                written += len(chunk)
        return path
    return _make_file


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    LoggerManager.reset()
