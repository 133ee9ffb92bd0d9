"""パート分割計算"""
from typing import List

from ..models.upload import PartDescriptor

# S3 のマルチパートアップロードのパート数上限
MAX_PARTS = 10000


def count_parts(size: int, part_size: int) -> int:
    return (size + part_size - 1) // part_size


def plan_parts(size: int, part_size: int) -> List[PartDescriptor]:
    """ファイルサイズをパートに分割

    最後のパート以外は全て part_size バイト。size == 0 の場合は空リストを返す
    （0 バイトのファイルは常に単一アップロードになるので通常ここには来ない）。
    """
    if part_size <= 0:
        raise ValueError(f"part_size must be positive, got {part_size}")
    if size < 0:
        raise ValueError(f"size must not be negative, got {size}")

    parts = []
    for i in range(count_parts(size, part_size)):
        offset = i * part_size
        parts.append(PartDescriptor(
            part_number=i + 1,
            offset=offset,
            length=min(part_size, size - offset),
        ))
    return parts
