"""
服务层模块
业务逻辑编排
"""
from .key_resolver import ResolvedKey, resolve_key, resolve_url
from .upload_service import UploadService
from .intake_service import IntakeService

__all__ = [
    # 对象Key计算
    "ResolvedKey",
    "resolve_key",
    "resolve_url",

    # 上传服务
    "UploadService",
    "IntakeService",
]
