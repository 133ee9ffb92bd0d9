"""ストレージバックエンドのインターフェースと S3 実装"""
import io
import time
from typing import BinaryIO, Dict, List, Optional, Protocol, Union

from botocore.exceptions import ClientError

from ..utils.logger import LoggerManager
from .context import UploadContext

Manifest = List[Dict[str, Union[str, int]]]


class PartBody(io.RawIOBase):
    """memoryview をコピーせずに読み出すシーク可能なストリーム

    botocore がチェックサム計算やリトライのために巻き戻せるよう seek/tell を持つ。
    元のバッファが返却されるまでの間だけ有効。
    """

    def __init__(self, view: memoryview):
        self._view = view
        self._pos = 0

    def __len__(self) -> int:
        return len(self._view)

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def readinto(self, target) -> int:
        n = max(0, min(len(target), len(self._view) - self._pos))
        target[:n] = self._view[self._pos:self._pos + n]
        self._pos += n
        return n

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        if whence == io.SEEK_SET:
            pos = offset
        elif whence == io.SEEK_CUR:
            pos = self._pos + offset
        elif whence == io.SEEK_END:
            pos = len(self._view) + offset
        else:
            raise ValueError(f"invalid whence: {whence}")
        if pos < 0:
            raise ValueError(f"negative seek position {pos}")
        self._pos = pos
        return pos

    def tell(self) -> int:
        return self._pos

    def getbuffer(self) -> memoryview:
        """読み出し元の memoryview（コピーではない）"""
        return self._view


class StorageBackend(Protocol):
    """オーケストレーターが使うバックエンド操作"""

    def put_object(self, bucket: str, key: str, body: BinaryIO) -> str: ...

    def create_multipart_upload(self, bucket: str, key: str) -> str: ...

    def upload_part(self, bucket: str, key: str, upload_id: str,
                    part_number: int, body: memoryview) -> str: ...

    def complete_multipart_upload(self, bucket: str, key: str, upload_id: str,
                                  parts: Manifest) -> None: ...

    def abort_multipart_upload(self, bucket: str, key: str, upload_id: str) -> None: ...

    def wait_until_visible(self, bucket: str, key: str, timeout: float,
                           context: Optional[UploadContext] = None) -> None: ...

    def create_bucket(self, bucket: str) -> None: ...

    def delete_bucket(self, bucket: str) -> None: ...

    def list_objects(self, bucket: str) -> List[str]: ...

    def delete_object(self, bucket: str, key: str) -> None: ...


class S3Backend:
    """boto3 S3 クライアントによる StorageBackend 実装

    botocore の例外（ClientError など）はそのまま送出する。ステージ情報の付与は
    呼び出し側で行う。
    """

    WAITER_DELAY = 5  # 秒
    NOT_FOUND_CODES = ("404", "NoSuchKey", "NotFound")

    def __init__(self, client):
        self.client = client
        self.logger = LoggerManager.get_logger()

    def put_object(self, bucket: str, key: str, body: BinaryIO) -> str:
        response = self.client.put_object(Bucket=bucket, Key=key, Body=body)
        return response.get("ETag", "")

    def create_multipart_upload(self, bucket: str, key: str) -> str:
        response = self.client.create_multipart_upload(Bucket=bucket, Key=key)
        return response["UploadId"]

    def upload_part(self, bucket: str, key: str, upload_id: str,
                    part_number: int, body: memoryview) -> str:
        response = self.client.upload_part(
            Bucket=bucket,
            Key=key,
            UploadId=upload_id,
            PartNumber=part_number,
            Body=PartBody(body),
            ContentLength=len(body),
        )
        return response["ETag"]

    def complete_multipart_upload(self, bucket: str, key: str, upload_id: str,
                                  parts: Manifest) -> None:
        self.client.complete_multipart_upload(
            Bucket=bucket,
            Key=key,
            UploadId=upload_id,
            MultipartUpload={"Parts": parts},
        )

    def abort_multipart_upload(self, bucket: str, key: str, upload_id: str) -> None:
        self.client.abort_multipart_upload(Bucket=bucket, Key=key, UploadId=upload_id)

    def wait_until_visible(self, bucket: str, key: str, timeout: float,
                           context: Optional[UploadContext] = None) -> None:
        """HeadObject をポーリングしてオブジェクトが読めるまで待つ

        試行の合間にコンテキストのキャンセルを確認し、キャンセルされたら
        UploadCancelledError を送出する。timeout 秒で見えなければ TimeoutError。
        """
        context = context or UploadContext()
        deadline = time.monotonic() + timeout
        while True:
            context.raise_if_cancelled("wait_until_visible")
            try:
                self.client.head_object(Bucket=bucket, Key=key)
                return
            except ClientError as e:
                if e.response.get("Error", {}).get("Code") not in self.NOT_FOUND_CODES:
                    raise

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise TimeoutError(f"{bucket}/{key} did not become visible within {timeout}s")
            context.wait(min(self.WAITER_DELAY, remaining))

    def create_bucket(self, bucket: str) -> None:
        self.client.create_bucket(Bucket=bucket)

    def delete_bucket(self, bucket: str) -> None:
        self.client.delete_bucket(Bucket=bucket)

    def list_objects(self, bucket: str) -> List[str]:
        keys = []
        paginator = self.client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=bucket):
            for obj in page.get("Contents", []):
                keys.append(obj["Key"])
        return keys

    def delete_object(self, bucket: str, key: str) -> None:
        self.client.delete_object(Bucket=bucket, Key=key)
