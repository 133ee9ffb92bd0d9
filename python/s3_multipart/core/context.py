"""キャンセル可能な実行コンテキスト"""
import threading
import time
from typing import Optional

from ..errors import UploadCancelledError


class UploadContext:
    """キャンセル可能なコンテキスト

    子コンテキストは親のキャンセルを観測するが、子のキャンセルは親に伝播しない。
    パートのアップロード失敗で兄弟タスクだけを止め、呼び出し元のコンテキストは
    そのまま残すために使う。
    """

    def __init__(self, parent: Optional['UploadContext'] = None):
        self._parent = parent
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._parent is not None and self._parent.cancelled

    def wait(self, timeout: float) -> bool:
        """キャンセルされるか timeout 秒経過するまで待つ。キャンセルされたら True"""
        if self._parent is None:
            return self._event.wait(timeout)

        # 親のキャンセルも拾うため短い間隔で確認する
        deadline = time.monotonic() + timeout
        while not self.cancelled:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return False
            self._event.wait(min(remaining, 0.1))
        return True

    def child(self) -> 'UploadContext':
        return UploadContext(parent=self)

    def raise_if_cancelled(self, stage: str, part_number: Optional[int] = None):
        if self.cancelled:
            raise UploadCancelledError(stage, part_number)
