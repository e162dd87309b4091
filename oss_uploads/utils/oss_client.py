"""
阿里云OSS客户端
提供内存数据上传功能，以及进程级的延迟创建客户端句柄
"""
import asyncio
import threading
from typing import Callable, Dict, Optional
from urllib.parse import quote, urlparse

import oss2
from oss2.credentials import EnvironmentVariableCredentialsProvider

from oss_uploads.config import Settings
from oss_uploads.models.upload import PutResult
from oss_uploads.utils.logger import get_logger

logger = get_logger(__name__)


class OSSClient:
    """阿里云OSS客户端封装"""

    def __init__(
        self,
        access_key_id: Optional[str] = None,
        access_key_secret: Optional[str] = None,
        endpoint: Optional[str] = None,
    ):
        """
        初始化OSS客户端（仅本地构造，不发起网络请求）

        Args:
            access_key_id: 阿里云AccessKey ID
            access_key_secret: 阿里云AccessKey Secret
            endpoint: OSS Endpoint，例如 https://oss-cn-hangzhou.aliyuncs.com

        注意：如果未提供access_key，则使用环境变量凭证
        """
        self.access_key_id = access_key_id
        self.access_key_secret = access_key_secret
        self.endpoint = endpoint or "https://oss-cn-hangzhou.aliyuncs.com"

        # 创建认证对象
        if self.access_key_id and self.access_key_secret:
            self.auth = oss2.Auth(self.access_key_id, self.access_key_secret)
        else:
            # 使用环境变量凭证
            self.auth = oss2.ProviderAuth(EnvironmentVariableCredentialsProvider())

        self.bucket_name: Optional[str] = None
        self._buckets: Dict[str, oss2.Bucket] = {}

        logger.info("oss_client_initialized", endpoint=self.endpoint)

    @classmethod
    def from_settings(cls, settings: Settings) -> "OSSClient":
        """根据配置创建客户端"""
        return cls(
            access_key_id=settings.OSS_ACCESS_KEY_ID,
            access_key_secret=settings.OSS_SECRET_ACCESS_KEY,
            endpoint=settings.endpoint,
        )

    @property
    def endpoint_host(self) -> str:
        """去掉协议后的Endpoint主机名"""
        parsed = urlparse(self.endpoint)
        return parsed.netloc or parsed.path

    def use_bucket(self, bucket_name: Optional[str]) -> None:
        """选择后续上传使用的Bucket"""
        self.bucket_name = bucket_name

    def _get_bucket(self) -> oss2.Bucket:
        if not self.bucket_name:
            raise ValueError("OSS bucket is not configured")

        bucket = self._buckets.get(self.bucket_name)
        if bucket is None:
            bucket = oss2.Bucket(self.auth, self.endpoint, self.bucket_name)
            self._buckets[self.bucket_name] = bucket
        return bucket

    def object_url(self, key: str) -> str:
        """OSS默认的公网访问URL"""
        return f"https://{self.bucket_name}.{self.endpoint_host}/{quote(key, safe='/')}"

    async def put(
        self,
        key: str,
        data: bytes,
        content_type: Optional[str] = None,
        acl: Optional[str] = None
    ) -> PutResult:
        """
        上传内存数据到OSS

        Args:
            key: OSS对象Key
            data: 文件内容
            content_type: Content-Type（可选）
            acl: 对象ACL（可选），例如 oss2.OBJECT_ACL_PUBLIC_READ

        Returns:
            PutResult: url为OSS默认公网URL

        Raises:
            oss2.exceptions.OssError: OSS返回错误
            ValueError: 未选择Bucket
        """
        bucket = self._get_bucket()

        headers = {"Content-Length": str(len(data))}
        if content_type:
            headers["Content-Type"] = content_type
        if acl:
            headers["x-oss-object-acl"] = acl

        logger.info(
            "uploading_to_oss",
            bucket=self.bucket_name,
            key=key,
            size=len(data)
        )

        # oss2 为同步SDK，放到线程池中执行
        result = await asyncio.to_thread(bucket.put_object, key, data, headers=headers)

        return PutResult(
            url=self.object_url(key),
            etag=getattr(result, "etag", None),
            request_id=getattr(result, "request_id", None),
        )


class OSSClientHandle:
    """
    进程级OSS客户端句柄

    首次使用时创建客户端，reset() 后下次调用重新创建。
    创建过程由锁保护，并发首调只会构造一个客户端。
    """

    def __init__(
        self,
        settings: Settings,
        client_factory: Optional[Callable[[Settings], OSSClient]] = None
    ):
        self.settings = settings
        self.client_factory = client_factory or OSSClient.from_settings
        self._client: Optional[OSSClient] = None
        self._lock = threading.Lock()

    @property
    def initialized(self) -> bool:
        return self._client is not None

    def get_client(self) -> OSSClient:
        client = self._client
        if client is not None:
            return client

        with self._lock:
            if self._client is None:
                self._client = self.client_factory(self.settings)
                logger.debug("oss_client_handle_created", region=self.settings.OSS_DEFAULT_REGION)
            return self._client

    def reset(self) -> None:
        with self._lock:
            self._client = None
        logger.info("oss_client_handle_reset")
