"""
上传服务 - 计算对象Key并将内存数据PUT到OSS
"""
import asyncio
from typing import Callable, Optional

import oss2

from oss_uploads.config import Settings
from oss_uploads.core.exceptions import StorageError, make_error
from oss_uploads.core.protocols import IClientHandle
from oss_uploads.models.upload import UploadRequest, UploadResult
from oss_uploads.services.key_resolver import resolve_key, resolve_url
from oss_uploads.utils.logger import get_logger

logger = get_logger(__name__)


class UploadService:
    """上传业务逻辑服务"""

    def __init__(
        self,
        settings: Settings,
        client_handle: IClientHandle,
        id_factory: Optional[Callable[[], str]] = None
    ):
        """
        Args:
            settings: 配置
            client_handle: OSS客户端句柄
            id_factory: 唯一ID生成函数（默认 uuid4，测试时可替换）
        """
        self.settings = settings
        self.client_handle = client_handle
        self.id_factory = id_factory

    def build_request(
        self,
        filename: Optional[str],
        buffer: bytes,
        content_type: Optional[str] = None
    ) -> UploadRequest:
        """构建上传请求参数"""
        unique_id = self.id_factory() if self.id_factory else None
        resolved = resolve_key(self.settings, filename, unique_id=unique_id, content_type=content_type)

        return UploadRequest(
            key=resolved.key,
            body=buffer,
            content_type=resolved.content_type,
            content_length=len(buffer),
        )

    async def upload(
        self,
        filename: Optional[str],
        buffer: bytes,
        content_type: Optional[str] = None
    ) -> UploadResult:
        """
        上传文件内容到OSS

        每次调用最多发起一次PUT，不重试；对象Key随机生成，不会覆盖已有对象。

        Args:
            filename: 原始文件名（决定Content-Type和扩展名）
            buffer: 文件内容
            content_type: 显式指定的Content-Type（可选）

        Returns:
            UploadResult: name为原始文件名，url为访问地址

        Raises:
            InvalidFilenameError: 无法识别文件类型
            StorageError: OSS上传失败
        """
        request = self.build_request(filename, buffer, content_type)

        try:
            client = self.client_handle.get_client()
            client.use_bucket(self.settings.OSS_UPLOADS_BUCKET)

            put = client.put(
                request.key,
                request.body,
                content_type=request.content_type,
                acl=oss2.OBJECT_ACL_PUBLIC_READ
            )
            if self.settings.OSS_PUT_TIMEOUT:
                result = await asyncio.wait_for(put, timeout=self.settings.OSS_PUT_TIMEOUT)
            else:
                result = await put

        except oss2.exceptions.OssError as e:
            raise make_error(StorageError, f"{e.code} - {e.message}", self.settings.APP_NAME) from e

        except asyncio.TimeoutError as e:
            raise make_error(
                StorageError,
                f"upload timed out after {self.settings.OSS_PUT_TIMEOUT}s",
                self.settings.APP_NAME
            ) from e

        except Exception as e:
            raise make_error(StorageError, e, self.settings.APP_NAME) from e

        url = resolve_url(self.settings, request.key, result.url)

        logger.info(
            "oss_upload_success",
            filename=filename,
            key=request.key,
            size=request.content_length,
            url=url
        )

        return UploadResult(name=filename, url=url)
