"""パート用バッファのプール"""
import threading
from contextlib import contextmanager
from typing import Iterator, List


class BufferPool:
    """固定サイズ bytearray のフリーリスト（スレッドセーフ）

    再利用時にゼロクリアはしない。呼び出し側は使用する範囲を必ず上書きすること。
    """

    def __init__(self, buffer_size: int):
        if buffer_size <= 0:
            raise ValueError(f"buffer_size must be positive, got {buffer_size}")
        self.buffer_size = buffer_size
        self._free: List[bytearray] = []
        self._lock = threading.Lock()
        self.allocated = 0
        self.in_use = 0

    def acquire(self) -> bytearray:
        """空きバッファを取得（なければ新規確保）"""
        with self._lock:
            self.in_use += 1
            if self._free:
                return self._free.pop()
            self.allocated += 1
        return bytearray(self.buffer_size)

    def release(self, buffer: bytearray):
        """バッファをプールに戻す"""
        if len(buffer) != self.buffer_size:
            raise ValueError(
                f"buffer of size {len(buffer)} does not belong to pool of size {self.buffer_size}"
            )
        with self._lock:
            self.in_use -= 1
            self._free.append(buffer)

    @contextmanager
    def borrow(self) -> Iterator[bytearray]:
        """acquire/release を必ず対にする"""
        buffer = self.acquire()
        try:
            yield buffer
        finally:
            self.release(buffer)

    @property
    def free_count(self) -> int:
        with self._lock:
            return len(self._free)
