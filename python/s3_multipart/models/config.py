"""設定管理用のデータクラス"""
from dataclasses import dataclass, field
from typing import Mapping, Optional
import json
import os

from ..errors import ConfigurationError

MIB = 1024 * 1024


@dataclass
class LoggingConfig:
    """ロギング設定"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(levelname)s - %(message)s"
    file: Optional[str] = None


@dataclass
class S3Config:
    """S3接続設定"""
    region: str = "us-west-2"
    endpoint_url: Optional[str] = None  # MinIO など S3 互換ストレージ用
    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    profile: Optional[str] = None

    def __post_init__(self):
        if not self.region or not self.region.strip():
            raise ConfigurationError("region cannot be empty")

        # プロファイル指定がない場合はアクセスキーが必須
        if not self.profile and not (self.access_key and self.secret_key):
            raise ConfigurationError(
                "Missing access_key or secret_key (set S3_ACCESS_KEY and S3_SECRET_KEY)"
            )

        if self.endpoint_url and not self.endpoint_url.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"Invalid endpoint_url: {self.endpoint_url}. Must start with http:// or https://"
            )


@dataclass
class UploadOptions:
    """アップロードオプション"""
    part_size: int = 5 * MIB
    concurrency_limit: int = 5  # 0 の場合は上限なし（パートごとに1ワーカー）
    enable_progress: bool = False

    def __post_init__(self):
        if self.part_size <= 0:
            raise ConfigurationError(f"Invalid part_size: {self.part_size}. Must be positive")
        if self.concurrency_limit < 0:
            raise ConfigurationError(
                f"Invalid concurrency_limit: {self.concurrency_limit}. Must be >= 0"
            )


@dataclass
class Config:
    """メイン設定クラス"""
    s3: S3Config
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    options: UploadOptions = field(default_factory=UploadOptions)

    @classmethod
    def from_file(cls, config_path: str) -> 'Config':
        """設定ファイルから読み込み"""
        if not os.path.exists(config_path):
            raise ConfigurationError(f"Configuration file {config_path} not found.")

        try:
            with open(config_path, "r", encoding="utf-8") as file:
                data = json.load(file)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Error decoding JSON from {config_path}: {e}") from e

        try:
            return cls(
                s3=S3Config(**data.get("s3", {})),
                logging=LoggingConfig(**data.get("logging", {})),
                options=UploadOptions(**data.get("options", {})),
            )
        except TypeError as e:
            # 未知のキーなど
            raise ConfigurationError(f"Error loading configuration: {e}") from e

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'Config':
        """環境変数から読み込み"""
        env = os.environ if environ is None else environ

        options = UploadOptions(
            part_size=_env_int(env, "S3_PART_SIZE", 5 * MIB),
            concurrency_limit=_env_int(env, "S3_CONCURRENCY", 5),
        )
        return cls(
            s3=S3Config(
                region=env.get("S3_REGION", "us-west-2"),
                endpoint_url=env.get("S3_URL") or None,
                access_key=env.get("S3_ACCESS_KEY") or None,
                secret_key=env.get("S3_SECRET_KEY") or None,
                profile=env.get("S3_PROFILE") or None,
            ),
            logging=LoggingConfig(level=env.get("S3_LOG_LEVEL", "INFO")),
            options=options,
        )


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    value = env.get(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
