"""
论坛插件入口
提供宿主调用的钩子：图片上传、文件上传、停用、加载、后台菜单
"""
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from oss_uploads.config import HostConfig, Settings, get_settings
from oss_uploads.core.exceptions import InvalidInputError
from oss_uploads.core.protocols import IClientHandle, IImageResizer
from oss_uploads.models.upload import FileDescriptor, ImageDescriptor
from oss_uploads.services.intake_service import IntakeService
from oss_uploads.services.upload_service import UploadService
from oss_uploads.utils.image_utils import ImageResizer
from oss_uploads.utils.logger import get_logger
from oss_uploads.utils.oss_client import OSSClientHandle

logger = get_logger(__name__)

ADMIN_ROUTE = "/plugins/ali-oss"
ADMIN_MENU_ENTRY = {
    "route": ADMIN_ROUTE,
    "icon": "fa-envelope-o",
    "name": "Aliyun OSS",
}


class PluginContext:
    """
    插件运行上下文

    进程启动时创建一次，替代全局变量：配置、宿主配置、OSS客户端句柄、缩放工具
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        host_config: Optional[HostConfig] = None,
        client_handle: Optional[IClientHandle] = None,
        image_resizer: Optional[IImageResizer] = None
    ):
        self.settings = settings or get_settings()
        self.host_config = host_config or HostConfig(
            maximumFileSize=self.settings.MAXIMUM_FILE_SIZE,
            profileImageDimension=self.settings.PROFILE_IMAGE_DIMENSION,
        )
        self.client_handle = client_handle or OSSClientHandle(self.settings)
        self.image_resizer = image_resizer or ImageResizer(ffmpeg_path=self.settings.FFMPEG_PATH)


class OSSUploadsPlugin:
    """阿里云OSS上传插件"""

    def __init__(self, context: Optional[PluginContext] = None):
        self.context = context or PluginContext()
        self.upload_service = UploadService(self.context.settings, self.context.client_handle)

    @property
    def intake(self) -> IntakeService:
        # 宿主配置可能在运行期被替换，每次按当前上下文组装
        return IntakeService(
            self.context.settings,
            self.context.host_config,
            self.upload_service,
            self.context.image_resizer
        )

    def configure(self, host_config: Mapping[str, Any]) -> None:
        """更新宿主配置（maximumFileSize / profileImageDimension）"""
        self.context.host_config = HostConfig.model_validate(dict(host_config))

    async def load(self, params: Optional[Mapping[str, Any]] = None) -> None:
        """
        插件加载

        params 中包含 FastAPI 应用（"app"）时挂载后台路由，
        包含 "config" 时更新宿主配置
        """
        params = params or {}

        if params.get("config") is not None:
            self.configure(params["config"])

        app = params.get("app")
        if app is not None:
            from oss_uploads.api.v1.admin import router as admin_router
            app.include_router(admin_router, prefix=ADMIN_ROUTE, tags=["Admin"])

        logger.info(
            "plugin_loaded",
            region=self.context.settings.OSS_DEFAULT_REGION,
            bucket=self.context.settings.OSS_UPLOADS_BUCKET,
            admin_route_mounted=app is not None
        )

    def deactivate(self) -> None:
        """插件停用：丢弃OSS客户端，下次上传时重新创建"""
        self.context.client_handle.reset()
        logger.info("plugin_deactivated")

    async def upload_image(self, data: Mapping[str, Any]) -> Dict[str, str]:
        """
        图片上传钩子

        Args:
            data: {"image": {"name", "path", "url", "size"}}

        Returns:
            {"name": 原始文件名, "url": 访问地址}
        """
        image = data.get("image")
        descriptor = None
        if image is not None:
            try:
                descriptor = ImageDescriptor.model_validate(image)
            except ValidationError as e:
                logger.warning("upload_rejected", reason="invalid image", errors=e.errors())
                raise InvalidInputError("invalid image") from e

        result = await self.intake.handle_image(descriptor)
        return result.model_dump()

    async def upload_file(self, data: Mapping[str, Any]) -> Dict[str, str]:
        """
        文件上传钩子

        Args:
            data: {"file": {"name", "path", "size"}}
        """
        file = data.get("file")
        descriptor = None
        if file is not None:
            try:
                descriptor = FileDescriptor.model_validate(file)
            except ValidationError as e:
                logger.warning("upload_rejected", reason="invalid file", errors=e.errors())
                raise InvalidInputError("invalid file") from e

        result = await self.intake.handle_file(descriptor)
        return result.model_dump()

    def admin_menu(self, custom_header: Dict[str, Any]) -> Dict[str, Any]:
        """后台菜单钩子：追加插件设置页入口"""
        custom_header.setdefault("plugins", []).append(dict(ADMIN_MENU_ENTRY))
        return custom_header


_plugin: Optional[OSSUploadsPlugin] = None


def get_plugin() -> OSSUploadsPlugin:
    """获取默认插件实例（首次调用时创建）"""
    global _plugin
    if _plugin is None:
        _plugin = OSSUploadsPlugin()
    return _plugin


# ===== 模块级钩子（转发到默认插件实例） =====

async def load(params: Optional[Mapping[str, Any]] = None) -> None:
    await get_plugin().load(params)


def deactivate() -> None:
    get_plugin().deactivate()


async def upload_image(data: Mapping[str, Any]) -> Dict[str, str]:
    return await get_plugin().upload_image(data)


async def upload_file(data: Mapping[str, Any]) -> Dict[str, str]:
    return await get_plugin().upload_file(data)


def admin_menu(custom_header: Dict[str, Any]) -> Dict[str, Any]:
    return get_plugin().admin_menu(custom_header)
