"""
配置管理模块
使用pydantic-settings进行环境变量管理和验证
"""
import re
from functools import lru_cache
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_PROFILE_IMAGE_DIMENSION = 128


class Settings(BaseSettings):
    """应用配置类（进程启动时加载一次，之后只读）"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        frozen=True,
    )

    # ===== 应用基础配置 =====
    APP_NAME: str = "aliyun-oss-uploads"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    API_V1_PREFIX: str = "/api/v1"

    # ===== 阿里云OSS配置 =====
    OSS_ACCESS_KEY_ID: str = ""
    OSS_SECRET_ACCESS_KEY: str = ""
    OSS_DEFAULT_REGION: str = "oss-cn-hangzhou"
    OSS_UPLOADS_BUCKET: Optional[str] = None
    OSS_UPLOADS_PATH: Optional[str] = None
    OSS_UPLOADS_HOST: Optional[str] = Field(
        default=None,
        description="自定义访问域名（CDN），设置后覆盖OSS返回的URL"
    )
    OSS_ENDPOINT: Optional[str] = Field(
        default=None,
        description="显式指定Endpoint，默认根据region推导"
    )

    # ===== 超时配置（秒，None表示不限制） =====
    OSS_PUT_TIMEOUT: Optional[float] = Field(default=None, description="OSS上传超时时间")
    IMAGE_RESIZE_TIMEOUT: Optional[float] = Field(default=None, description="图片缩放超时时间")

    # ===== 宿主配置默认值（独立运行时使用） =====
    MAXIMUM_FILE_SIZE: Optional[str] = Field(default=None, description="上传大小上限（KiB）")
    PROFILE_IMAGE_DIMENSION: Optional[str] = Field(default=None, description="头像缩放尺寸（像素）")

    # ===== 图片处理配置 =====
    FFMPEG_PATH: str = "ffmpeg"

    @field_validator("OSS_UPLOADS_BUCKET", "OSS_UPLOADS_PATH", "OSS_UPLOADS_HOST", "OSS_ENDPOINT")
    @classmethod
    def empty_as_none(cls, v):
        """空字符串视为未设置"""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def endpoint(self) -> str:
        """OSS Endpoint"""
        if self.OSS_ENDPOINT:
            return self.OSS_ENDPOINT
        return f"https://{self.OSS_DEFAULT_REGION}.aliyuncs.com"


def parse_int(value: Any) -> Optional[int]:
    """
    宽松的整数解析，行为与宿主的 parseInt 一致

    "2048" -> 2048, "2048kb" -> 2048, "abc" -> None, None -> None
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)

    match = re.match(r"^\s*([+-]?\d+)", str(value))
    if not match:
        return None
    return int(match.group(1))


class HostConfig(BaseModel):
    """宿主论坛的配置项（maximumFileSize 单位 KiB）"""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    maximum_file_size: Optional[int] = Field(default=None, alias="maximumFileSize")
    profile_image_dimension: Optional[int] = Field(default=None, alias="profileImageDimension")

    @field_validator("maximum_file_size", "profile_image_dimension", mode="before")
    @classmethod
    def parse_lenient_int(cls, v):
        return parse_int(v)

    @property
    def max_size_bytes(self) -> Optional[int]:
        """上传大小上限（字节），None表示不限制"""
        if self.maximum_file_size is None:
            return None
        return self.maximum_file_size * 1024

    @property
    def image_dimension(self) -> int:
        """头像缩放尺寸，未设置或为0时使用默认值"""
        return self.profile_image_dimension or DEFAULT_PROFILE_IMAGE_DIMENSION


@lru_cache()
def get_settings() -> Settings:
    """
    获取配置单例
    使用lru_cache确保配置只加载一次
    """
    return Settings()


# 便捷访问
settings = get_settings()
