"""
领域抽象接口汇总导出 (SOLID: 依赖倒置原则)
所有服务依赖这些抽象，而不是具体实现
"""
from oss_uploads.core.protocols.storage_protocols import (
    IObjectStorageClient,
    IClientHandle,
    IImageResizer,
)


__all__ = [
    # 对象存储
    "IObjectStorageClient",
    "IClientHandle",

    # 图片处理
    "IImageResizer",
]
