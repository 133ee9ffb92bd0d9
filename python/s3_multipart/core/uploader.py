"""S3アップロード実行クラス"""
import os
from typing import Optional

from ..errors import (
    AbortError,
    BackendRequestError,
    CompletionError,
    UploadCancelledError,
    UploadIOError,
)
from ..models.config import UploadOptions
from ..models.upload import UploadRequest, UploadSession
from ..utils.file_utils import get_file_size
from ..utils.logger import LoggerManager
from ..utils.progress import ProgressTracker
from .backend import StorageBackend
from .buffer_pool import BufferPool
from .context import UploadContext
from .part_uploader import ConcurrentPartUploader
from .planner import plan_parts

# 単一アップロード後の可視性確認の上限（秒）
VISIBILITY_TIMEOUT = 60


class UploadOrchestrator:
    """ファイルサイズに応じて単一アップロードとマルチパートアップロードを切り替える"""

    def __init__(self, backend: StorageBackend, options: UploadOptions):
        self.backend = backend
        self.options = options
        self.logger = LoggerManager.get_logger()
        self.buffer_pool = BufferPool(options.part_size)
        self.part_uploader = ConcurrentPartUploader(
            backend, self.buffer_pool, options.concurrency_limit
        )

    def upload(self, request: UploadRequest, context: Optional[UploadContext] = None):
        """ファイルをアップロード

        失敗時は UploaderError のサブクラスを送出する。
        """
        context = context or UploadContext()
        size = get_file_size(request.file_path)

        if size <= self.options.part_size:
            self._simple_upload(context, request)
        else:
            self._multipart_upload(context, request, size)

    def _open(self, file_path: str):
        try:
            return open(file_path, "rb")
        except OSError as e:
            raise UploadIOError("open", file_path, e.strerror or str(e)) from e

    def _simple_upload(self, context: UploadContext, request: UploadRequest):
        """単一リクエストでアップロード"""
        context.raise_if_cancelled("put_object")

        with self._open(request.file_path) as file:
            try:
                self.backend.put_object(request.bucket, request.key, file)
            except Exception as e:
                self.logger.error(f"Couldn't upload file {request.file_path}: {e}")
                raise BackendRequestError("put_object", str(e)) from e

        self.logger.info(f"Uploaded {request.file_path} to {request.bucket}/{request.key}")

        # 可視性の確認は参考情報。失敗してもアップロード自体は成功とする
        if context.cancelled:
            self.logger.warning(
                f"Upload cancelled, skipping wait for object {request.bucket}/{request.key} to exist"
            )
            return
        try:
            self.backend.wait_until_visible(
                request.bucket, request.key, VISIBILITY_TIMEOUT, context
            )
        except Exception as e:
            self.logger.warning(
                f"Failed attempt to wait for object {request.bucket}/{request.key} to exist: {e}"
            )

    def _multipart_upload(self, context: UploadContext, request: UploadRequest, size: int):
        """マルチパートでアップロード"""
        with self._open(request.file_path) as file:
            context.raise_if_cancelled("create_multipart_upload")
            try:
                upload_id = self.backend.create_multipart_upload(request.bucket, request.key)
            except Exception as e:
                self.logger.error(f"Couldn't create multipart upload for {request.key}: {e}")
                raise BackendRequestError("create_multipart_upload", str(e)) from e

            session = UploadSession(upload_id=upload_id, bucket=request.bucket, key=request.key)
            descriptors = plan_parts(size, self.options.part_size)
            self.logger.info(
                f"Created multipart upload {upload_id} for {request.bucket}/{request.key}: "
                f"{size} bytes in {len(descriptors)} parts"
            )

            progress = None
            if self.options.enable_progress:
                progress = ProgressTracker(
                    size, len(descriptors), os.path.basename(request.file_path)
                )

            try:
                self.part_uploader.upload_parts(
                    context, session, file.fileno(), descriptors, request.file_path, progress
                )
            except Exception as e:
                self._abort(session, e)
                raise

        self._complete(context, session)
        if progress:
            progress.complete()

    def _complete(self, context: UploadContext, session: UploadSession):
        """マニフェストを送信してセッションを完了"""
        if context.cancelled:
            error = UploadCancelledError("complete_multipart_upload")
            self._abort(session, error)
            raise error

        try:
            self.backend.complete_multipart_upload(
                session.bucket, session.key, session.upload_id, session.manifest()
            )
        except Exception as e:
            self.logger.error(f"Couldn't complete multipart upload {session.upload_id}: {e}")
            error = CompletionError(str(e))
            # 完了に失敗したセッションを残さないよう中止を試みる
            self._abort(session, error)
            raise error from e

        session.mark_completed()
        self.logger.info(
            f"Completed multipart upload {session.upload_id} to {session.bucket}/{session.key}"
        )

    def _abort(self, session: UploadSession, cause: Exception):
        """セッションを中止

        中止に失敗した場合は元のエラーの代わりに AbortError を送出する。
        """
        try:
            self.backend.abort_multipart_upload(session.bucket, session.key, session.upload_id)
        except Exception as e:
            self.logger.error(
                f"Couldn't abort multipart upload {session.upload_id} (after: {cause}): {e}"
            )
            raise AbortError(session.upload_id, str(e), original_error=cause) from e

        session.mark_aborted()
        self.logger.warning(
            f"Aborted multipart upload {session.upload_id} for {session.bucket}/{session.key}: {cause}"
        )
