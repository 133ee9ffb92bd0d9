"""S3クライアント管理"""
import boto3
from typing import Optional
from botocore.config import Config as BotoConfig
from botocore.exceptions import NoCredentialsError, ProfileNotFound
from ..errors import ConfigurationError
from ..models.config import S3Config, UploadOptions
from ..utils.logger import LoggerManager
from .planner import MAX_PARTS


class S3ClientManager:
    """S3クライアントの作成と管理"""

    def __init__(self, s3_config: S3Config, options: Optional[UploadOptions] = None):
        self.s3_config = s3_config
        self.options = options or UploadOptions()
        self.logger = LoggerManager.get_logger()
        self._client = None

    def get_client(self):
        """S3クライアントを取得（必要に応じて作成）"""
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def pool_size(self) -> int:
        """同時に使う最大コネクション数

        上限なし（0）の場合はパートごとに1ワーカーなので、パート数の上限に合わせる。
        """
        if self.options.concurrency_limit == 0:
            return MAX_PARTS
        return max(10, self.options.concurrency_limit)

    def _boto_config(self) -> BotoConfig:
        """接続プールをパートの並列数に合わせる"""
        params = {
            "max_pool_connections": self.pool_size(),
        }
        # MinIO などカスタムエンドポイントはパススタイルが必要
        if self.s3_config.endpoint_url:
            params["s3"] = {"addressing_style": "path"}
        return BotoConfig(**params)

    def _create_client(self):
        """S3クライアントを作成"""
        client_kwargs = {
            "region_name": self.s3_config.region,
            "config": self._boto_config(),
        }
        if self.s3_config.endpoint_url:
            client_kwargs["endpoint_url"] = self.s3_config.endpoint_url

        try:
            if self.s3_config.profile:
                session = boto3.Session(profile_name=self.s3_config.profile)
                s3_client = session.client("s3", **client_kwargs)
                self.logger.info(f"S3 client created with profile '{self.s3_config.profile}'.")
                return s3_client

            # 静的な認証情報
            s3_client = boto3.client(
                "s3",
                aws_access_key_id=self.s3_config.access_key,
                aws_secret_access_key=self.s3_config.secret_key,
                **client_kwargs
            )
            self.logger.info("S3 client created with static credentials.")
            return s3_client

        except (NoCredentialsError, ProfileNotFound) as e:
            self.logger.error(f"AWS credentials not available: {e}")
            raise ConfigurationError(f"AWS credentials not available: {e}") from e
