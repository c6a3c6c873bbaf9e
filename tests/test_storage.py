import re

import pytest
from botocore.exceptions import ClientError

from marketing_studio.services import storage


class FakeS3:
    def __init__(self, error=None):
        self.error = error
        self.puts = []

    def put_object(self, **kwargs):
        if self.error is not None:
            raise self.error
        self.puts.append(kwargs)

    def generate_presigned_url(self, ClientMethod, Params, ExpiresIn, HttpMethod):
        return f"https://signed.example/{Params['Key']}?expires={ExpiresIn}"


@pytest.fixture()
def bucket_env(monkeypatch):
    monkeypatch.setenv("S3_BUCKET", "studio")
    monkeypatch.setenv("S3_PUBLIC_BASE", "https://cdn.example.com/")


def test_storage_put_returns_public_url(monkeypatch, bucket_env):
    fake = FakeS3()
    monkeypatch.setattr(storage, "get_client", lambda: fake)

    result = storage.storage_put("/generated/a.png", b"data", "image/png")

    assert result == {
        "key": "generated/a.png",
        "url": "https://cdn.example.com/generated/a.png",
        "content_type": "image/png",
    }
    assert fake.puts[0]["Bucket"] == "studio"
    assert fake.puts[0]["ContentType"] == "image/png"


def test_storage_put_presigns_without_public_base(monkeypatch):
    monkeypatch.setenv("S3_BUCKET", "studio")
    monkeypatch.delenv("S3_PUBLIC_BASE", raising=False)
    monkeypatch.delenv("R2_PUBLIC_BASE", raising=False)
    monkeypatch.setattr(storage, "get_client", lambda: FakeS3())

    result = storage.storage_put("generated/a.png", b"data")

    assert result["url"].startswith("https://signed.example/generated/a.png")
    assert result["content_type"] == "image/png"


def test_storage_put_wraps_client_errors(monkeypatch, bucket_env):
    error = ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject")
    monkeypatch.setattr(storage, "get_client", lambda: FakeS3(error=error))

    with pytest.raises(storage.StorageError):
        storage.storage_put("generated/a.png", b"data", "image/png")


def test_keys_and_extensions():
    assert storage.extension_for("image/jpeg") == "jpeg"
    assert storage.extension_for(None) == "png"
    assert storage.extension_for("application") == "png"
    assert re.fullmatch(r"brand-assets/7/[0-9a-f]{32}\.webp", storage.brand_asset_key(7, "image/webp"))
    assert re.fullmatch(r"generated/\d{20}-[0-9a-f]{8}\.png", storage.generated_key())


def test_malformed_endpoint_is_storage_error(monkeypatch):
    monkeypatch.setenv("R2_ENDPOINT", "not a url")
    monkeypatch.setenv("R2_ACCESS_KEY_ID", "ak")
    monkeypatch.setenv("R2_SECRET_ACCESS_KEY", "sk")
    monkeypatch.setenv("R2_BUCKET", "studio")
    storage._client.cache_clear()
    try:
        with pytest.raises(storage.StorageError):
            storage.storage_put("generated/a.png", b"data", "image/png")
    finally:
        storage._client.cache_clear()
