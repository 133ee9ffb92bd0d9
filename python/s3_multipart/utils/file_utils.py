"""ファイル操作関連のユーティリティ"""
import os

from ..errors import UploadIOError


def get_file_size(file_path: str) -> int:
    """ファイルサイズを取得"""
    try:
        return os.stat(file_path).st_size
    except OSError as e:
        raise UploadIOError("stat", file_path, e.strerror or str(e)) from e


def read_at(fd: int, buffer: bytearray, length: int, offset: int, path: str = "") -> memoryview:
    """offset から length バイトを buffer に読み込む

    共有ファイルポインタを動かさない位置指定読み込みなので、同じ fd に対して
    複数スレッドから同時に呼び出してよい。読み込んだ範囲の memoryview を返す。
    """
    if length > len(buffer):
        raise ValueError(f"length {length} exceeds buffer size {len(buffer)}")
    if not hasattr(os, "preadv"):
        raise UploadIOError("read", path, "positional reads (os.preadv) are not supported on this platform")

    view = memoryview(buffer)[:length]
    filled = 0
    while filled < length:
        try:
            n = os.preadv(fd, [view[filled:]], offset + filled)
        except OSError as e:
            raise UploadIOError("read", path, e.strerror or str(e)) from e
        if n == 0:
            raise UploadIOError(
                "read", path,
                f"unexpected end of file at offset {offset + filled} (wanted {length} bytes from {offset})"
            )
        filled += n
    return view
