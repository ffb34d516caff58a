# tests/test_client.py
import pytest
import httpx

from sdk.catalog_client import CatalogClient


@pytest.fixture
def sdk(client):
    return CatalogClient(base_url="http://testserver", session=client)


def test_client_roundtrip(sdk, tmp_path):
    image = tmp_path / "cream.png"
    image.write_bytes(b"cream-bytes")

    assert sdk.health()["status"] == "ok"
    created = sdk.create_product("face", "Cream", 12.5, volume=50, image_path=str(image))
    assert created["price"] == 12.5
    assert created["volume"] == 50

    assert sdk.list_products("face") == [created]
    assert sdk.download_image(created["image"]) == b"cream-bytes"
    assert "face" in sdk.info()["categories"]

    assert sdk.delete_product("face", created["id"]) == created
    assert sdk.list_products("face") == []


def test_client_raises_on_error(sdk):
    with pytest.raises(httpx.HTTPStatusError):
        sdk.delete_product("face", "missing")
