"""アップローダーの例外定義"""
from typing import Optional


class UploaderError(Exception):
    """全ての例外の基底クラス"""


class ConfigurationError(UploaderError):
    """設定の不備（認証情報の欠落、不正な値など）"""


class UploadCancelledError(UploaderError):
    """コンテキストがキャンセルされたためリクエストを発行しなかった"""

    def __init__(self, stage: str, part_number: Optional[int] = None):
        self.stage = stage
        self.part_number = part_number
        where = f"{stage} (part {part_number})" if part_number else stage
        super().__init__(f"upload cancelled before {where}")


class SessionStateError(UploaderError):
    """マルチパートセッションの不正な状態遷移"""


class UploadIOError(UploaderError):
    """ローカルファイルの stat / open / read の失敗"""

    def __init__(self, stage: str, path: str, message: str, part_number: Optional[int] = None):
        self.stage = stage
        self.path = path
        self.message = message
        self.part_number = part_number
        if part_number is not None:
            message = f"part {part_number}: {message}"
        super().__init__(f"{stage} {path}: {message}")


class BackendRequestError(UploaderError):
    """ストレージバックエンド呼び出しの失敗"""

    def __init__(self, stage: str, message: str, part_number: Optional[int] = None):
        self.stage = stage
        self.part_number = part_number
        super().__init__(f"{stage}: {message}")


class PartUploadError(BackendRequestError):
    """パートのアップロード失敗（パート番号付き）"""

    def __init__(self, part_number: int, message: str, stage: str = "upload_part"):
        super().__init__(stage, f"part {part_number}: {message}", part_number=part_number)


class CompletionError(BackendRequestError):
    """CompleteMultipartUpload の失敗"""

    def __init__(self, message: str):
        super().__init__("complete_multipart_upload", message)


class AbortError(UploaderError):
    """AbortMultipartUpload の失敗

    元のエラーより優先して呼び出し元に返される。セッションがバックエンド側に
    残っている可能性があるため。
    """

    def __init__(self, upload_id: str, message: str, original_error: Optional[Exception] = None):
        self.stage = "abort_multipart_upload"
        self.upload_id = upload_id
        self.original_error = original_error
        super().__init__(f"abort_multipart_upload {upload_id}: {message}")
