"""
上传入口服务 - 校验图片/文件描述，读取或缩放后交给上传服务
"""
import asyncio
from typing import Optional

import aiofiles

from oss_uploads.config import HostConfig, Settings
from oss_uploads.core.exceptions import (
    FileReadError,
    FileTooLargeError,
    ImageProcessingError,
    InvalidInputError,
    make_error,
)
from oss_uploads.core.protocols import IImageResizer
from oss_uploads.models.upload import FileDescriptor, ImageDescriptor, UploadResult
from oss_uploads.services.upload_service import UploadService
from oss_uploads.utils.image_utils import filename_from_url
from oss_uploads.utils.logger import get_logger

logger = get_logger(__name__)


class IntakeService:
    """图片与文件上传入口"""

    def __init__(
        self,
        settings: Settings,
        host_config: HostConfig,
        upload_service: UploadService,
        image_resizer: IImageResizer
    ):
        self.settings = settings
        self.host_config = host_config
        self.upload_service = upload_service
        self.image_resizer = image_resizer

    def check_size(self, size: Optional[int]) -> None:
        """
        校验文件大小

        Raises:
            FileTooLargeError: 超过 maximumFileSize * 1024 字节
        """
        max_bytes = self.host_config.max_size_bytes
        if size is None or max_bytes is None:
            return

        if size > max_bytes:
            limit = self.host_config.maximum_file_size
            logger.warning("upload_rejected_file_too_big", size=size, limit_kb=limit)
            raise FileTooLargeError(limit)

    async def read_file(self, path: str) -> bytes:
        """读取本地文件全部内容"""
        try:
            async with aiofiles.open(path, "rb") as f:
                return await f.read()
        except OSError as e:
            raise make_error(FileReadError, e, self.settings.APP_NAME) from e

    async def handle_image(self, image: Optional[ImageDescriptor]) -> UploadResult:
        """
        处理图片上传

        本地文件直接上传；远程URL先下载并缩放为
        profileImageDimension x profileImageDimension 的PNG再上传。
        大小校验总是在读取/缩放之前完成。

        Raises:
            InvalidInputError: 缺少图片描述或路径
            FileTooLargeError: 超过大小上限
            ImageProcessingError: 下载或缩放失败
            StorageError: 上传失败
        """
        if image is None:
            logger.warning("upload_rejected", reason="invalid image")
            raise InvalidInputError("invalid image")

        self.check_size(image.size)

        if not image.is_remote:
            if not image.path:
                raise InvalidInputError("invalid image path")

            buffer = await self.read_file(image.path)
            return await self.upload_service.upload(image.name, buffer)

        filename = filename_from_url(image.url)
        dimension = self.host_config.image_dimension

        try:
            resize = self.image_resizer.resize_url(image.url, filename, dimension)
            if self.settings.IMAGE_RESIZE_TIMEOUT:
                buffer = await asyncio.wait_for(resize, timeout=self.settings.IMAGE_RESIZE_TIMEOUT)
            else:
                buffer = await resize
        except asyncio.TimeoutError as e:
            raise make_error(
                ImageProcessingError,
                f"image resize timed out after {self.settings.IMAGE_RESIZE_TIMEOUT}s",
                self.settings.APP_NAME
            ) from e
        except Exception as e:
            raise make_error(ImageProcessingError, e, self.settings.APP_NAME) from e

        # Key和Content-Type仍按URL中的文件名推断
        return await self.upload_service.upload(filename, buffer)

    async def handle_file(self, file: Optional[FileDescriptor]) -> UploadResult:
        """
        处理文件上传

        Raises:
            InvalidInputError: 缺少文件描述或路径
            FileTooLargeError: 超过大小上限
            StorageError: 上传失败
        """
        if file is None:
            logger.warning("upload_rejected", reason="invalid file")
            raise InvalidInputError("invalid file")

        if not file.path:
            logger.warning("upload_rejected", reason="invalid file path")
            raise InvalidInputError("invalid file path")

        self.check_size(file.size)

        buffer = await self.read_file(file.path)
        return await self.upload_service.upload(file.name, buffer)
