"""
插件后台设置页API
"""
from fastapi import APIRouter, Depends

from oss_uploads.models.responses import AdminSettingsView
from oss_uploads.plugin import OSSUploadsPlugin, get_plugin

router = APIRouter()


def mask(value: str) -> str:
    """只保留末4位"""
    if len(value) <= 4:
        return "*" * len(value)
    return "*" * (len(value) - 4) + value[-4:]


@router.get("", response_model=AdminSettingsView)
async def admin_settings(plugin: OSSUploadsPlugin = Depends(get_plugin)):
    """当前生效的OSS配置（密钥脱敏）"""
    settings = plugin.context.settings
    host_config = plugin.context.host_config

    return AdminSettingsView(
        region=settings.OSS_DEFAULT_REGION,
        bucket=settings.OSS_UPLOADS_BUCKET,
        path=settings.OSS_UPLOADS_PATH,
        host=settings.OSS_UPLOADS_HOST,
        access_key_id=mask(settings.OSS_ACCESS_KEY_ID),
        secret_configured=bool(settings.OSS_SECRET_ACCESS_KEY),
        maximum_file_size=host_config.maximum_file_size,
        profile_image_dimension=host_config.image_dimension,
    )
