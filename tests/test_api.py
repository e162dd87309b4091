"""
HTTP surface: upload endpoints, admin view and error responses.
"""
import httpx
import pytest
from httpx import ASGITransport

from conftest import CountingFactory
from oss_uploads.main import app
from oss_uploads.plugin import get_plugin

pytestmark = pytest.mark.anyio


@pytest.fixture
def client(plugin):
    app.dependency_overrides[get_plugin] = lambda: plugin
    yield httpx.AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
    app.dependency_overrides.clear()


async def test_health(client):
    async with client as c:
        r = await c.get("/health")

    assert r.status_code == 200
    assert r.json()["status"] == "healthy"


async def test_upload_file(client, factory):
    async with client as c:
        r = await c.post(
            "/api/v1/uploads/file",
            files={"file": ("notes.pdf", b"%PDF-1.4 body", "application/pdf")},
        )

    assert r.status_code == 200
    body = r.json()
    assert body["name"] == "notes.pdf"
    assert body["url"].endswith(".pdf")
    assert factory.last.puts[0]["data"] == b"%PDF-1.4 body"
    assert "X-Request-ID" in r.headers


async def test_upload_image_file(client, factory):
    async with client as c:
        r = await c.post(
            "/api/v1/uploads/image",
            files={"file": ("avatar.png", b"png-bytes", "image/png")},
        )

    assert r.status_code == 200
    assert r.json()["name"] == "avatar.png"
    assert factory.last.puts[0]["content_type"] == "image/png"


async def test_upload_image_from_url(client, resizer):
    async with client as c:
        r = await c.post(
            "/api/v1/uploads/image",
            data={"url": "http://example.com/photo.JPG", "size": "1000"},
        )

    assert r.status_code == 200
    assert r.json()["name"] == "photo.JPG"
    assert resizer.calls[0]["dimension"] == 128


async def test_upload_image_without_input_is_bad_request(client):
    async with client as c:
        r = await c.post("/api/v1/uploads/image", data={})

    assert r.status_code == 400
    assert r.json()["error"]["message"] == "invalid image"


async def test_oversized_upload_is_bad_request(client, plugin):
    plugin.configure({"maximumFileSize": "1"})

    async with client as c:
        r = await c.post(
            "/api/v1/uploads/file",
            files={"file": ("big.txt", b"x" * 2048, "text/plain")},
        )

    assert r.status_code == 400
    assert r.json()["error"]["message"] == "[[error:file-too-big, 1]]"


async def test_storage_failure_is_service_unavailable(client, plugin):
    plugin.context.client_handle.client_factory = CountingFactory(error=ConnectionError("refused"))

    async with client as c:
        r = await c.post(
            "/api/v1/uploads/file",
            files={"file": ("notes.pdf", b"%PDF", "application/pdf")},
        )

    assert r.status_code == 503
    assert r.json()["error"]["message"] == "aliyun-oss-uploads :: refused"


async def test_admin_view_masks_secrets(client):
    async with client as c:
        r = await c.get("/plugins/ali-oss")

    assert r.status_code == 200
    body = r.json()
    assert body["region"] == "oss-cn-hangzhou"
    assert body["bucket"] == "forum"
    assert body["access_key_id"].endswith("-id")
    assert "test-key" not in body["access_key_id"]
    assert body["secret_configured"] is True
    assert body["maximum_file_size"] == 2048
    assert body["profile_image_dimension"] == 128


async def test_unrecognized_file_type_is_bad_request(client, factory):
    async with client as c:
        r = await c.post(
            "/api/v1/uploads/file",
            files={"file": ("README", b"plain", "application/octet-stream")},
        )

    assert r.status_code == 400
    assert r.json()["error"]["code"] == "INVALIDFILENAME"
    assert factory.calls == 0


def test_upload_result_schema_carries_example():
    from oss_uploads.models.upload import UploadResult

    schema = UploadResult.model_json_schema()

    assert schema["example"]["name"] == "photo.jpg"
