"""
图片和文件上传API - Controller层
仅处理HTTP请求/响应：将上传内容落到临时文件后交给插件钩子
"""
import os
import tempfile
from typing import Optional

import aiofiles
from fastapi import APIRouter, Depends, File, Form, UploadFile

from oss_uploads.core.exceptions import InvalidInputError
from oss_uploads.models.upload import UploadResult
from oss_uploads.plugin import OSSUploadsPlugin, get_plugin
from oss_uploads.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()

CHUNK_SIZE = 1024 * 1024


async def spool_upload(file: UploadFile) -> tuple[str, int]:
    """将上传内容写入临时文件，返回 (路径, 字节数)"""
    suffix = os.path.splitext(file.filename or "")[1]
    fd, path = tempfile.mkstemp(prefix="oss-upload-", suffix=suffix)
    os.close(fd)

    size = 0
    async with aiofiles.open(path, "wb") as f:
        while chunk := await file.read(CHUNK_SIZE):
            size += len(chunk)
            await f.write(chunk)

    return path, size


def remove_quietly(path: str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass


@router.post("/image", response_model=UploadResult)
async def upload_image(
    file: Optional[UploadFile] = File(None),
    url: Optional[str] = Form(None),
    size: Optional[int] = Form(None),
    plugin: OSSUploadsPlugin = Depends(get_plugin),
):
    """
    上传图片

    二选一：
    - file: 图片文件，原样上传
    - url: 远程图片地址，缩放为头像尺寸PNG后上传（size 为宿主提供的原始大小）
    """
    if url:
        return await plugin.upload_image({"image": {"url": url, "size": size}})

    if file is None:
        raise InvalidInputError("invalid image")

    path, written = await spool_upload(file)
    try:
        return await plugin.upload_image({
            "image": {"name": file.filename, "path": path, "size": written}
        })
    finally:
        remove_quietly(path)


@router.post("/file", response_model=UploadResult)
async def upload_file(
    file: UploadFile = File(...),
    plugin: OSSUploadsPlugin = Depends(get_plugin),
):
    """上传文件"""
    path, written = await spool_upload(file)

    logger.info("file_upload_received", filename=file.filename, size=written)

    try:
        return await plugin.upload_file({
            "file": {"name": file.filename, "path": path, "size": written}
        })
    finally:
        remove_quietly(path)
