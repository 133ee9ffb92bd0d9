"""アップロード進捗管理"""
import time
import threading

from .logger import LoggerManager


class ProgressTracker:
    """単一ファイルのアップロード進捗をパート単位で追跡"""

    def __init__(self, total_size: int, total_parts: int, filename: str):
        self.total_size = total_size
        self.total_parts = total_parts
        self.filename = filename
        self.uploaded_size = 0
        self.uploaded_parts = 0
        self.lock = threading.Lock()
        self.start_time = time.monotonic()
        self.logger = LoggerManager.get_logger()

    def __call__(self, part_number: int, bytes_transferred: int):
        """パート完了時にワーカースレッドから呼ばれる"""
        with self.lock:
            self.uploaded_size += bytes_transferred
            self.uploaded_parts += 1
            self._report(part_number)

    def _report(self, part_number: int):
        """進捗をログ出力"""
        if self.total_size == 0:
            return

        progress = (self.uploaded_size / self.total_size) * 100
        elapsed_time = time.monotonic() - self.start_time
        speed = self.uploaded_size / elapsed_time / 1024 / 1024 if elapsed_time > 0 else 0.0

        self.logger.info(
            f"{self.filename}: part {part_number} done, "
            f"{self.uploaded_parts}/{self.total_parts} parts, {progress:.1f}% "
            f"({self.uploaded_size}/{self.total_size}) - {speed:.2f} MB/s"
        )

    def complete(self):
        """アップロード完了"""
        elapsed_time = time.monotonic() - self.start_time
        speed = self.total_size / elapsed_time / 1024 / 1024 if elapsed_time > 0 else 0.0
        self.logger.info(f"{self.filename}: Complete! - {speed:.2f} MB/s - {elapsed_time:.1f}s")
