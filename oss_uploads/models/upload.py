"""
上传数据模型
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class ImageDescriptor(BaseModel):
    """图片上传描述（本地文件或远程URL二选一）"""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(None, description="原始文件名")
    path: Optional[str] = Field(None, description="本地临时文件路径")
    url: Optional[str] = Field(None, description="远程图片URL")
    size: Optional[int] = Field(None, description="文件大小（字节）")

    @property
    def is_remote(self) -> bool:
        """是否为远程URL"""
        return bool(self.url)


class FileDescriptor(BaseModel):
    """文件上传描述"""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(None, description="原始文件名")
    path: Optional[str] = Field(None, description="本地临时文件路径")
    size: Optional[int] = Field(None, description="文件大小（字节）")


class UploadRequest(BaseModel):
    """OSS上传请求参数（派生数据，不持久化）"""

    key: str = Field(..., description="OSS对象Key")
    body: bytes = Field(..., repr=False, description="文件内容")
    content_type: str = Field(..., description="Content-Type")
    content_length: int = Field(..., description="Content-Length")


class UploadResult(BaseModel):
    """上传结果"""

    name: str = Field(..., description="原始文件名")
    url: str = Field(..., description="公网访问URL")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "photo.jpg",
                "url": "https://forum-uploads.oss-cn-hangzhou.aliyuncs.com/uploads/3f0c7d2e-8a5b-4f7e-9d3c-1b2a4c6e8f00.jpg",
            }
        }
    )


class PutResult(BaseModel):
    """OSS PUT 返回结果"""

    url: str = Field(..., description="OSS自身构造的对象URL")
    etag: Optional[str] = Field(None, description="ETag")
    request_id: Optional[str] = Field(None, description="OSS请求ID")
