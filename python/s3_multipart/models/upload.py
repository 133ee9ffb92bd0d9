"""アップロード関連のデータクラス"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union

from ..errors import SessionStateError


@dataclass(frozen=True)
class UploadRequest:
    """アップロード要求"""
    bucket: str
    file_path: str
    key: str


@dataclass(frozen=True)
class PartDescriptor:
    """ファイル内のパート範囲"""
    part_number: int  # 1始まり
    offset: int
    length: int


@dataclass(frozen=True)
class CompletedPart:
    """アップロード済みパート"""
    part_number: int
    etag: str

    def to_dict(self) -> Dict[str, Union[str, int]]:
        """CompleteMultipartUpload 用の辞書に変換"""
        return {"ETag": self.etag, "PartNumber": self.part_number}


class SessionState(Enum):
    """マルチパートセッションの状態"""
    CREATED = "created"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ABORTED = "aborted"

    @property
    def terminal(self) -> bool:
        return self in (SessionState.COMPLETED, SessionState.ABORTED)


@dataclass
class UploadSession:
    """マルチパートアップロードセッション"""
    upload_id: str
    bucket: str
    key: str
    parts: List[Optional[CompletedPart]] = field(default_factory=list)
    state: SessionState = SessionState.CREATED

    def start(self, total_parts: int):
        """パートの送信を開始（CREATED -> IN_PROGRESS）"""
        self._require(SessionState.CREATED)
        self.parts = [None] * total_parts
        self.state = SessionState.IN_PROGRESS

    def record_part(self, part: CompletedPart):
        """パート番号のスロットに結果を格納"""
        self._require(SessionState.IN_PROGRESS)
        self.parts[part.part_number - 1] = part

    def mark_completed(self):
        self._require(SessionState.IN_PROGRESS)
        if any(part is None for part in self.parts):
            raise SessionStateError(f"session {self.upload_id} has missing parts")
        self.state = SessionState.COMPLETED

    def mark_aborted(self):
        if self.state.terminal:
            raise SessionStateError(
                f"session {self.upload_id} is already {self.state.value}"
            )
        self.state = SessionState.ABORTED

    def manifest(self) -> List[Dict[str, Union[str, int]]]:
        """パート番号順のマニフェスト"""
        return [part.to_dict() for part in self.parts if part is not None]

    def _require(self, expected: SessionState):
        if self.state is not expected:
            raise SessionStateError(
                f"session {self.upload_id} is {self.state.value}, expected {expected.value}"
            )
