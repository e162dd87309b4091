"""
数据模型模块
Pydantic 模型定义
"""
from .upload import (
    ImageDescriptor,
    FileDescriptor,
    UploadRequest,
    UploadResult,
    PutResult
)
from .responses import (
    ErrorDetail,
    ErrorResponse,
    AdminSettingsView
)

__all__ = [
    # 上传模型
    "ImageDescriptor",
    "FileDescriptor",
    "UploadRequest",
    "UploadResult",
    "PutResult",

    # 响应模型
    "ErrorDetail",
    "ErrorResponse",
    "AdminSettingsView",
]
