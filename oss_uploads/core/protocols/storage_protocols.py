"""
存储服务抽象接口 (SOLID: 依赖倒置原则)
"""
from typing import Protocol, Optional

from oss_uploads.models.upload import PutResult


class IObjectStorageClient(Protocol):
    """对象存储客户端接口 (OSS/测试替身等)"""

    def use_bucket(self, bucket_name: Optional[str]) -> None:
        """选择后续PUT使用的Bucket"""
        ...

    async def put(
        self,
        key: str,
        data: bytes,
        content_type: Optional[str] = None,
        acl: Optional[str] = None
    ) -> PutResult:
        """
        上传内存中的数据

        Args:
            key: 对象Key
            data: 文件内容
            content_type: 内容类型
            acl: 对象ACL（例如 public-read）

        Returns:
            PutResult，包含存储层自身构造的URL
        """
        ...


class IClientHandle(Protocol):
    """延迟创建的存储客户端句柄"""

    def get_client(self) -> IObjectStorageClient:
        ...

    def reset(self) -> None:
        ...


class IImageResizer(Protocol):
    """图片缩放工具接口"""

    async def resize_url(self, url: str, filename: str, dimension: int) -> bytes:
        """
        下载远程图片并缩放填充到 dimension x dimension，输出PNG

        Returns:
            PNG 图片内容
        """
        ...
