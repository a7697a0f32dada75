import pytest

import clients.storage_client as storage_client
from clients.storage_client import CloudinaryRelay
from core.exceptions import AttachmentUploadError


def _relay():
    return CloudinaryRelay(cloud_name="demo", api_key="key", api_secret="secret", folder="legal-app")


@pytest.mark.asyncio
async def test_upload_returns_secure_url(monkeypatch):
    captured = {}

    def fake_upload(file, **options):
        captured["file"] = file
        captured["options"] = options
        return {"secure_url": "https://res.cloudinary.com/demo/image/upload/legal-app/x.png"}

    monkeypatch.setattr(storage_client.cloudinary.uploader, "upload", fake_upload)

    url = await _relay().upload("aGVsbG8=", "image/png")

    assert url == "https://res.cloudinary.com/demo/image/upload/legal-app/x.png"
    assert captured["file"] == "data:image/png;base64,aGVsbG8="
    assert captured["options"]["folder"] == "legal-app"
    assert captured["options"]["resource_type"] == "auto"
    assert captured["options"]["cloud_name"] == "demo"


@pytest.mark.asyncio
async def test_upload_errors_are_wrapped(monkeypatch):
    def fake_upload(file, **options):
        raise RuntimeError("Invalid image file")

    monkeypatch.setattr(storage_client.cloudinary.uploader, "upload", fake_upload)

    with pytest.raises(AttachmentUploadError) as exc_info:
        await _relay().upload("aGVsbG8=", "image/png")
    assert "Invalid image file" in exc_info.value.message


@pytest.mark.asyncio
async def test_unconfigured_relay_refuses_upload():
    relay = CloudinaryRelay(cloud_name=None, api_key=None, api_secret=None)
    assert not relay.is_configured
    with pytest.raises(AttachmentUploadError):
        await relay.upload("aGVsbG8=", "image/png")
