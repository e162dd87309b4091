"""
自定义异常类
"""
from typing import Optional, Type, TypeVar

from oss_uploads.utils.logger import get_logger

logger = get_logger(__name__)

E = TypeVar("E", bound="OSSUploadsException")


class OSSUploadsException(Exception):
    """基础异常类"""

    def __init__(self, message: str, recoverable: bool = False):
        self.message = message
        self.recoverable = recoverable
        super().__init__(self.message)


class UploadError(OSSUploadsException):
    """上传异常"""
    pass


class InvalidInputError(UploadError):
    """上传参数无效（缺少描述或路径）"""
    pass


class InvalidFilenameError(InvalidInputError):
    """无法根据文件名识别MIME类型"""
    pass


class FileTooLargeError(UploadError):
    """文件超过配置的大小上限"""

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"[[error:file-too-big, {limit}]]")


class FileReadError(UploadError):
    """读取本地文件失败"""
    pass


class ImageProcessingError(UploadError):
    """图片缩放失败"""
    pass


class StorageError(UploadError):
    """OSS存储异常"""
    pass


def make_error(
    error_cls: Type[E],
    cause: object,
    app_name: Optional[str] = None,
) -> E:
    """
    包装跨越I/O边界的错误：加上包名前缀并记录错误日志

    Args:
        error_cls: 目标异常类型
        cause: 原始异常或错误描述
        app_name: 前缀，默认取配置中的APP_NAME

    Returns:
        包装后的异常实例（调用方负责 raise ... from cause）
    """
    if app_name is None:
        from oss_uploads.config import settings
        app_name = settings.APP_NAME

    if isinstance(cause, OSSUploadsException):
        detail = cause.message
    else:
        detail = str(cause) or cause.__class__.__name__

    error = error_cls(f"{app_name} :: {detail}")
    logger.error(
        "upload_error",
        error_type=error_cls.__name__,
        cause_type=cause.__class__.__name__,
        error=error.message,
    )
    return error
