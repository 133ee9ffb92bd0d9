"""S3 Multipart Uploader パッケージ"""
from typing import Optional
from .errors import (
    AbortError,
    BackendRequestError,
    CompletionError,
    ConfigurationError,
    PartUploadError,
    UploadCancelledError,
    UploadIOError,
    UploaderError,
)
from .models.config import Config
from .models.upload import UploadRequest
from .utils.logger import LoggerManager
from .core.backend import StorageBackend, S3Backend
from .core.bucket import BucketManager
from .core.context import UploadContext
from .core.s3_client import S3ClientManager
from .core.uploader import UploadOrchestrator


class S3Uploader:
    """S3アップローダーのメインクラス"""

    def __init__(self, config: Config, backend: Optional[StorageBackend] = None):
        self.config = config

        # ロガーをセットアップ
        self.logger = LoggerManager.setup(self.config.logging)

        # バックエンドが渡されなければ boto3 クライアントから作成
        if backend is None:
            client_manager = S3ClientManager(config.s3, config.options)
            backend = S3Backend(client_manager.get_client())
        self.backend = backend

        self.orchestrator = UploadOrchestrator(backend, config.options)
        self.buckets = BucketManager(backend)
        self.logger.info("S3 Uploader initialized")

    @classmethod
    def from_file(cls, config_path: str = "config.json") -> 'S3Uploader':
        return cls(Config.from_file(config_path))

    @classmethod
    def from_env(cls) -> 'S3Uploader':
        return cls(Config.from_env())

    def upload(self, request: UploadRequest, context: Optional[UploadContext] = None):
        """ファイルをアップロード"""
        self.logger.info(f"Uploading {request.file_path} to {request.bucket}/{request.key}")
        self.orchestrator.upload(request, context)

    def create_bucket(self, bucket: str):
        self.buckets.create(bucket)

    def delete_bucket(self, bucket: str):
        self.buckets.delete(bucket)

    def cleanup_bucket(self, bucket: str) -> int:
        return self.buckets.cleanup(bucket)


__all__ = [
    'S3Uploader',
    'Config',
    'UploadRequest',
    'UploadContext',
    'UploaderError',
    'ConfigurationError',
    'UploadIOError',
    'UploadCancelledError',
    'BackendRequestError',
    'PartUploadError',
    'CompletionError',
    'AbortError',
]
