"""
Pytest configuration: AnyIO on asyncio, plus in-memory fakes for the
OSS client and the image resizer.
"""
import asyncio
from typing import Optional

import pytest

from oss_uploads.config import HostConfig, Settings
from oss_uploads.models.upload import PutResult
from oss_uploads.plugin import OSSUploadsPlugin, PluginContext
from oss_uploads.utils.oss_client import OSSClientHandle


@pytest.fixture
def anyio_backend():
    return "asyncio"


def make_settings(**overrides) -> Settings:
    values = {
        "OSS_ACCESS_KEY_ID": "test-key-id",
        "OSS_SECRET_ACCESS_KEY": "test-secret",
        "OSS_DEFAULT_REGION": "oss-cn-hangzhou",
        "OSS_UPLOADS_BUCKET": "forum",
        "OSS_UPLOADS_PATH": None,
        "OSS_UPLOADS_HOST": None,
        "OSS_ENDPOINT": None,
        "OSS_PUT_TIMEOUT": None,
        "IMAGE_RESIZE_TIMEOUT": None,
        "MAXIMUM_FILE_SIZE": None,
        "PROFILE_IMAGE_DIMENSION": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class FakeOSSClient:
    def __init__(self, error: Optional[Exception] = None, delay: float = 0):
        self.bucket_name = None
        self.error = error
        self.delay = delay
        self.puts = []

    def use_bucket(self, bucket_name):
        self.bucket_name = bucket_name

    async def put(self, key, data, content_type=None, acl=None):
        self.puts.append({
            "bucket": self.bucket_name,
            "key": key,
            "data": data,
            "content_type": content_type,
            "acl": acl,
        })
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return PutResult(url=f"https://{self.bucket_name}.oss-cn-hangzhou.aliyuncs.com/{key}")


class CountingFactory:
    """Client factory that records how many clients were constructed."""

    def __init__(self, **client_kwargs):
        self.client_kwargs = client_kwargs
        self.clients = []

    @property
    def calls(self) -> int:
        return len(self.clients)

    @property
    def last(self) -> FakeOSSClient:
        return self.clients[-1]

    def __call__(self, settings):
        client = FakeOSSClient(**self.client_kwargs)
        self.clients.append(client)
        return client


class FakeResizer:
    def __init__(self, output: bytes = b"\x89PNG\r\n\x1a\nresized", error: Optional[Exception] = None):
        self.output = output
        self.error = error
        self.calls = []

    async def resize_url(self, url, filename, dimension):
        self.calls.append({"url": url, "filename": filename, "dimension": dimension})
        if self.error is not None:
            raise self.error
        return self.output


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def factory():
    return CountingFactory()


@pytest.fixture
def resizer():
    return FakeResizer()


@pytest.fixture
def plugin(settings, factory, resizer):
    context = PluginContext(
        settings=settings,
        host_config=HostConfig(maximumFileSize="2048"),
        client_handle=OSSClientHandle(settings, client_factory=factory),
        image_resizer=resizer,
    )
    return OSSUploadsPlugin(context)
