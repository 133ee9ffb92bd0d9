"""バケット操作"""
from ..errors import BackendRequestError
from ..utils.logger import LoggerManager
from .backend import StorageBackend


class BucketManager:
    """バケットの作成・削除・中身の掃除"""

    def __init__(self, backend: StorageBackend):
        self.backend = backend
        self.logger = LoggerManager.get_logger()

    def create(self, bucket: str):
        try:
            self.backend.create_bucket(bucket)
        except Exception as e:
            raise BackendRequestError("create_bucket", f"{bucket}: {e}") from e
        self.logger.info(f"Bucket {bucket} created")

    def delete(self, bucket: str):
        try:
            self.backend.delete_bucket(bucket)
        except Exception as e:
            raise BackendRequestError("delete_bucket", f"{bucket}: {e}") from e
        self.logger.info(f"Bucket {bucket} deleted")

    def cleanup(self, bucket: str) -> int:
        """バケット内の全オブジェクトを削除し、削除した数を返す"""
        try:
            keys = self.backend.list_objects(bucket)
        except Exception as e:
            raise BackendRequestError("list_objects", f"failed to list objects in {bucket}: {e}") from e

        for key in keys:
            try:
                self.backend.delete_object(bucket, key)
            except Exception as e:
                raise BackendRequestError("delete_object", f"failed to delete object {key}: {e}") from e

        self.logger.info(f"Removed {len(keys)} objects from {bucket}")
        return len(keys)
