"""
图片处理底层工具函数
使用FFmpeg对远程图片进行缩放，输出PNG
"""
import asyncio
from typing import List

import httpx

from oss_uploads.utils.logger import get_logger

logger = get_logger(__name__)


def filename_from_url(url: str) -> str:
    """从URL中提取最后一段路径作为文件名"""
    return url.split("/")[-1]


def build_fill_resize_command(dimension: int, ffmpeg_path: str = "ffmpeg") -> List[str]:
    """
    构建缩放命令：等比缩放直到填满 dimension x dimension（不裁剪），输出PNG

    输入从stdin读取，输出写到stdout
    """
    return [
        ffmpeg_path,
        "-hide_banner",
        "-loglevel", "error",
        "-i", "pipe:0",
        "-vf", f"scale={dimension}:{dimension}:force_original_aspect_ratio=increase",
        "-frames:v", "1",
        "-f", "image2pipe",
        "-vcodec", "png",
        "pipe:1",
    ]


class ImageResizer:
    """远程图片缩放工具"""

    def __init__(self, ffmpeg_path: str = "ffmpeg", download_timeout: float = 60.0):
        self.ffmpeg_path = ffmpeg_path
        self.download_timeout = download_timeout

    async def fetch(self, url: str) -> bytes:
        """下载远程图片"""
        async with httpx.AsyncClient(timeout=self.download_timeout, follow_redirects=True) as client:
            response = await client.get(url)
            response.raise_for_status()
            return response.content

    async def resize(self, content: bytes, dimension: int) -> bytes:
        """
        缩放图片

        Args:
            content: 原始图片内容
            dimension: 目标边长（像素）

        Returns:
            bytes: PNG 图片内容

        Raises:
            RuntimeError: FFmpeg 执行失败
        """
        cmd = build_fill_resize_command(dimension, self.ffmpeg_path)

        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE
        )

        try:
            stdout, stderr = await process.communicate(input=content)
        except asyncio.CancelledError:
            process.kill()
            await process.wait()
            raise

        if process.returncode != 0:
            error_msg = stderr.decode(errors="replace").strip()
            raise RuntimeError(f"ffmpeg exited with code {process.returncode}: {error_msg}")

        if not stdout:
            raise RuntimeError("ffmpeg produced no output")

        return stdout

    async def resize_url(self, url: str, filename: str, dimension: int) -> bytes:
        """下载远程图片并缩放为 dimension x dimension 的PNG"""
        logger.info("resizing_remote_image", url=url, filename=filename, dimension=dimension)

        content = await self.fetch(url)
        output = await self.resize(content, dimension)

        logger.info(
            "image_resized",
            filename=filename,
            original_size=len(content),
            resized_size=len(output)
        )
        return output
