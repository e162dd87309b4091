"""
统一响应模型
定义标准的API响应格式
"""
from typing import Optional, Any
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class ErrorDetail(BaseModel):
    """错误详情"""

    code: str = Field(..., description="错误代码")
    message: str = Field(..., description="错误消息")
    detail: Optional[Any] = Field(None, description="详细信息（仅开发环境）")


class ErrorResponse(BaseModel):
    """错误响应"""

    success: bool = Field(default=False, description="请求是否成功")
    error: ErrorDetail = Field(..., description="错误详情")
    path: Optional[str] = Field(None, description="请求路径")
    method: Optional[str] = Field(None, description="HTTP方法")
    timestamp: datetime = Field(default_factory=datetime.now, description="响应时间")
    request_id: Optional[str] = Field(None, description="请求ID")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": False,
                "error": {
                    "code": "FILETOOLARGE",
                    "message": "[[error:file-too-big, 2048]]",
                    "detail": None
                },
                "path": "/api/v1/uploads/file",
                "method": "POST",
                "timestamp": "2024-01-01T10:00:00",
                "request_id": "req_xyz789"
            }
        }
    )


class AdminSettingsView(BaseModel):
    """后台设置页展示的配置（不含密钥明文）"""

    region: str
    bucket: Optional[str] = None
    path: Optional[str] = None
    host: Optional[str] = None
    access_key_id: str = Field(..., description="脱敏后的AccessKey ID")
    secret_configured: bool = Field(..., description="是否已配置AccessKey Secret")
    maximum_file_size: Optional[int] = Field(None, description="上传大小上限（KiB）")
    profile_image_dimension: int = Field(..., description="头像缩放尺寸（像素）")
