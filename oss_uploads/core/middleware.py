"""
中间件系统
包含异常处理、请求追踪、日志记录等中间件
"""
import time
import uuid
import traceback
from typing import Callable
from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from oss_uploads.config import settings
from oss_uploads.core.exceptions import (
    OSSUploadsException,
    InvalidInputError,
    FileTooLargeError,
    ImageProcessingError,
    StorageError,
)
from oss_uploads.models.responses import ErrorResponse, ErrorDetail
from oss_uploads.utils.logger import get_logger

logger = get_logger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    请求ID中间件
    为每个请求生成唯一ID，用于日志追踪和调试
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """处理请求，添加请求ID"""
        request_id = request.headers.get("X-Request-ID", f"req_{uuid.uuid4().hex[:12]}")
        request.state.request_id = request_id

        logger.info(
            "request_started",
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else None,
        )

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        return response


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """请求计时中间件"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()

        response = await call_next(request)

        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = f"{process_time:.4f}"

        request_id = getattr(request.state, "request_id", "unknown")
        logger.info(
            "request_completed",
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            process_time=f"{process_time:.4f}s",
        )

        return response


class ExceptionHandlerMiddleware(BaseHTTPMiddleware):
    """
    全局异常处理中间件
    捕获上传过程中的业务异常和未预期异常，返回统一的错误响应
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)

        except OSSUploadsException as exc:
            return self._handle_upload_exception(request, exc)

        except Exception as exc:
            return self._handle_unexpected_exception(request, exc)

    def _handle_upload_exception(
        self, request: Request, exc: OSSUploadsException
    ) -> JSONResponse:
        """处理自定义业务异常"""
        request_id = getattr(request.state, "request_id", "unknown")

        logger.warning(
            "upload_exception",
            request_id=request_id,
            exception_type=exc.__class__.__name__,
            message=exc.message,
            recoverable=exc.recoverable,
            path=request.url.path,
        )

        error_response = ErrorResponse(
            error=ErrorDetail(
                code=exc.__class__.__name__.upper().replace("ERROR", ""),
                message=exc.message,
                detail=traceback.format_exc() if settings.DEBUG else None,
            ),
            path=str(request.url.path),
            method=request.method,
            request_id=request_id,
        )

        return JSONResponse(
            status_code=self._get_status_code_for_exception(exc),
            content=error_response.model_dump(mode="json"),
        )

    def _handle_unexpected_exception(
        self, request: Request, exc: Exception
    ) -> JSONResponse:
        """处理未预期的异常"""
        request_id = getattr(request.state, "request_id", "unknown")

        logger.error(
            "unexpected_exception",
            request_id=request_id,
            exception_type=exc.__class__.__name__,
            exception_message=str(exc),
            traceback=traceback.format_exc(),
            path=request.url.path,
        )

        error_response = ErrorResponse(
            error=ErrorDetail(
                code="INTERNAL_SERVER_ERROR",
                message="服务器内部错误" if not settings.DEBUG else str(exc),
                detail=traceback.format_exc() if settings.DEBUG else None,
            ),
            path=str(request.url.path),
            method=request.method,
            request_id=request_id,
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_response.model_dump(mode="json"),
        )

    def _get_status_code_for_exception(self, exc: OSSUploadsException) -> int:
        """根据异常类型返回对应的HTTP状态码"""
        # 400 Bad Request
        if isinstance(exc, (InvalidInputError, FileTooLargeError)):
            return status.HTTP_400_BAD_REQUEST

        # 422 图片无法处理
        if isinstance(exc, ImageProcessingError):
            return status.HTTP_422_UNPROCESSABLE_ENTITY

        # 503 Service Unavailable
        if isinstance(exc, StorageError):
            return status.HTTP_503_SERVICE_UNAVAILABLE

        return status.HTTP_500_INTERNAL_SERVER_ERROR
