"""
OSS对象Key与访问URL的计算（纯函数）
"""
import mimetypes
import uuid
from typing import NamedTuple, Optional

from oss_uploads.config import Settings
from oss_uploads.core.exceptions import InvalidFilenameError

# 仅使用内置的MIME映射，不读取系统 mime.types，保证各环境结果一致
_mime = mimetypes.MimeTypes()


class ResolvedKey(NamedTuple):
    key: str
    content_type: str


def normalize_prefix(path: Optional[str]) -> str:
    """
    规范化路径前缀："uploads" -> "uploads/"，"/uploads/" -> "uploads/"，空 -> ""

    OSS 对象Key不能以 / 开头
    """
    if path:
        prefix = path if path.endswith("/") else path + "/"
    else:
        prefix = "/"

    if prefix.startswith("/"):
        prefix = prefix[1:]
    return prefix


def guess_content_type(filename: Optional[str]) -> Optional[str]:
    """根据文件名推断Content-Type"""
    if not filename:
        return None
    content_type, _ = _mime.guess_type(filename, strict=False)
    return content_type


def canonical_extension(content_type: str) -> Optional[str]:
    """Content-Type 对应的标准扩展名（不带点），例如 image/jpeg -> jpg"""
    ext = _mime.guess_extension(content_type, strict=False)
    if not ext:
        return None
    return ext.lstrip(".")


def resolve_key(
    settings: Settings,
    filename: Optional[str],
    unique_id: Optional[str] = None,
    content_type: Optional[str] = None,
) -> ResolvedKey:
    """
    计算对象Key：前缀 + 随机ID + "." + 标准扩展名

    扩展名由 Content-Type 反推，因此 photo.jpeg 会被存为 <id>.jpg。

    Args:
        settings: 配置
        filename: 原始文件名
        unique_id: 唯一ID（默认 uuid4）
        content_type: 显式指定的Content-Type（例如缩放后固定为PNG）

    Raises:
        InvalidFilenameError: 无法识别文件类型
    """
    content_type = content_type or guess_content_type(filename)
    if not content_type:
        raise InvalidFilenameError(f"unrecognized file type: {filename}")

    ext = canonical_extension(content_type)
    if not ext:
        raise InvalidFilenameError(f"no extension known for {content_type}: {filename}")

    if unique_id is None:
        unique_id = str(uuid.uuid4())

    key = f"{normalize_prefix(settings.OSS_UPLOADS_PATH)}{unique_id}.{ext}"
    return ResolvedKey(key=key, content_type=content_type)


def resolve_url(settings: Settings, object_key: str, put_result_url: str) -> str:
    """
    计算对外URL

    配置了自定义域名时使用 host + "/" + key（缺少协议时补 http://），
    否则直接使用OSS返回的URL
    """
    host = settings.OSS_UPLOADS_HOST
    if host:
        if not host.startswith("http"):
            host = "http://" + host
        return f"{host}/{object_key}"
    return put_result_url
