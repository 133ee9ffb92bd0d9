"""S3 Multipart Uploader コアモジュール"""
from .backend import StorageBackend, S3Backend
from .bucket import BucketManager
from .buffer_pool import BufferPool
from .context import UploadContext
from .part_uploader import ConcurrentPartUploader
from .planner import plan_parts
from .s3_client import S3ClientManager
from .uploader import UploadOrchestrator

__all__ = [
    'StorageBackend',
    'S3Backend',
    'BucketManager',
    'BufferPool',
    'UploadContext',
    'ConcurrentPartUploader',
    'plan_parts',
    'S3ClientManager',
    'UploadOrchestrator',
]
