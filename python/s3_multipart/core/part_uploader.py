"""パートの並列アップロード"""
import threading
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Callable, List, Optional, Sequence

from ..errors import PartUploadError, UploadIOError
from ..models.upload import CompletedPart, PartDescriptor, UploadSession
from ..utils.file_utils import read_at
from ..utils.logger import LoggerManager
from .backend import StorageBackend
from .buffer_pool import BufferPool
from .context import UploadContext

ProgressCallback = Callable[[int, int], None]


class _FailureLatch:
    """最初の失敗を記録し、グループのコンテキストをキャンセルする"""

    def __init__(self, context: UploadContext):
        self.context = context
        self.error: Optional[Exception] = None
        self._lock = threading.Lock()

    def record(self, error: Exception):
        with self._lock:
            if self.error is None:
                self.error = error
        self.context.cancel()


class ConcurrentPartUploader:
    """セッションの全パートを並列数の上限内でアップロード"""

    def __init__(self, backend: StorageBackend, buffer_pool: BufferPool, concurrency_limit: int):
        self.backend = backend
        self.buffer_pool = buffer_pool
        self.concurrency_limit = concurrency_limit
        self.logger = LoggerManager.get_logger()

    def upload_parts(
        self,
        context: UploadContext,
        session: UploadSession,
        fd: int,
        descriptors: Sequence[PartDescriptor],
        path: str = "",
        progress: Optional[ProgressCallback] = None,
    ) -> List[CompletedPart]:
        """全パートをアップロードし、パート番号順の結果を返す

        いずれかのパートが失敗すると残りのタスクはキャンセルを観測して中断する。
        全タスクの終了を待ってから最初の失敗を送出する。
        """
        session.start(len(descriptors))
        group = context.child()
        latch = _FailureLatch(group)

        # 0 は上限なし
        max_workers = self.concurrency_limit or len(descriptors)
        self.logger.info(
            f"Uploading {len(descriptors)} parts of {session.bucket}/{session.key} "
            f"with {max_workers} workers (upload id {session.upload_id})"
        )

        with ThreadPoolExecutor(max_workers=max(1, max_workers),
                                thread_name_prefix="part-upload") as pool:
            futures = [
                pool.submit(self._run_part, group, latch, session, fd, descriptor, path, progress)
                for descriptor in descriptors
            ]
            wait(futures)

        if latch.error is not None:
            raise latch.error
        return list(session.parts)

    def _run_part(self, group: UploadContext, latch: _FailureLatch, session: UploadSession,
                  fd: int, descriptor: PartDescriptor, path: str,
                  progress: Optional[ProgressCallback]):
        try:
            self._upload_part(group, session, fd, descriptor, path)
        except Exception as e:
            latch.record(e)
            return
        if progress is None:
            return
        # パート自体は成功しているので進捗通知の失敗ではセッションを止めない
        try:
            progress(descriptor.part_number, descriptor.length)
        except Exception as e:
            self.logger.warning(
                f"Progress callback failed for part {descriptor.part_number}: {e}"
            )

    def _upload_part(self, group: UploadContext, session: UploadSession, fd: int,
                     descriptor: PartDescriptor, path: str):
        part_number = descriptor.part_number
        group.raise_if_cancelled("upload_part", part_number)

        with self.buffer_pool.borrow() as buffer:
            try:
                body = read_at(fd, buffer, descriptor.length, descriptor.offset, path)
            except UploadIOError as e:
                raise UploadIOError(e.stage, e.path, e.message, part_number=part_number) from e

            # 読み込み中にキャンセルされた場合は送信しない
            group.raise_if_cancelled("upload_part", part_number)

            try:
                etag = self.backend.upload_part(
                    session.bucket, session.key, session.upload_id, part_number, body
                )
            except Exception as e:
                self.logger.error(f"Failed to upload part {part_number} of {session.key}: {e}")
                raise PartUploadError(part_number, str(e)) from e

        session.record_part(CompletedPart(part_number=part_number, etag=etag))
        self.logger.debug(
            f"Uploaded part {part_number} ({descriptor.length} bytes at {descriptor.offset})"
        )
