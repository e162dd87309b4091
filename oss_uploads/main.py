"""
FastAPI应用主入口
独立运行时将插件钩子暴露为HTTP接口
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI

from oss_uploads.config import settings
from oss_uploads.utils.logger import setup_logging, get_logger
from oss_uploads.core.middleware import (
    RequestIDMiddleware,
    RequestTimingMiddleware,
    ExceptionHandlerMiddleware,
)
from oss_uploads.api.v1 import uploads, admin
from oss_uploads.plugin import ADMIN_ROUTE, get_plugin

# 设置日志
setup_logging(log_level="DEBUG" if settings.DEBUG else "INFO")
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    logger.info("application_starting", version=settings.APP_VERSION)

    plugin = get_plugin()
    await plugin.load()

    yield

    plugin.deactivate()
    logger.info("application_shutting_down")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="论坛图片与文件上传到阿里云OSS",
    docs_url=f"{settings.API_V1_PREFIX}/docs",
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
    lifespan=lifespan,
)

# ===== 中间件配置 =====
# 注意：中间件按照添加顺序执行，后添加的先执行
app.add_middleware(RequestTimingMiddleware)
app.add_middleware(RequestIDMiddleware)
app.add_middleware(ExceptionHandlerMiddleware)


@app.get("/health")
async def health_check():
    """健康检查端点"""
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }


# 注册路由
app.include_router(
    uploads.router,
    prefix=f"{settings.API_V1_PREFIX}/uploads",
    tags=["Uploads"],
)

app.include_router(
    admin.router,
    prefix=ADMIN_ROUTE,
    tags=["Admin"],
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "oss_uploads.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
    )
