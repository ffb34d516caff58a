# tests/test_uploads.py
import io
import json

from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 100


def _post_with_image(client, category="face", content=PNG, filename="serum.png", **fields):
    data = {"name": "Serum", "price": "250"}
    data.update(fields)
    return client.post(
        f"/{category}",
        data=data,
        files={"image": (filename, io.BytesIO(content), "image/png")},
    )


def test_upload_is_stored_and_served(client, settings):
    r = _post_with_image(client)
    assert r.status_code == 201
    image = r.json()["image"]
    assert image.startswith("/uploads/")
    stored = image.rsplit("/", 1)[1]
    stamp, original = stored.split("-", 1)
    assert stamp.isdigit()
    assert original == "serum.png"
    assert (settings.uploads_dir / stored).read_bytes() == PNG

    served = client.get(image)
    assert served.status_code == 200
    assert served.content == PNG


def test_missing_upload_is_404(client):
    assert client.get("/uploads/nope.png").status_code == 404


def test_delete_removes_attachment(client, settings):
    product = _post_with_image(client).json()
    stored = settings.uploads_dir / product["image"].rsplit("/", 1)[1]
    assert stored.exists()

    assert client.delete(f"/face/{product['id']}").status_code == 200
    assert not stored.exists()
    assert client.get(product["image"]).status_code == 404


def test_delete_with_missing_attachment_still_succeeds(client, settings):
    product = _post_with_image(client).json()
    (settings.uploads_dir / product["image"].rsplit("/", 1)[1]).unlink()

    r = client.delete(f"/face/{product['id']}")
    assert r.status_code == 200
    assert client.get("/face").json() == []


def test_oversized_upload_rejected(client, settings):
    # over the 1 KiB cap but under the Content-Length guard, so the streamed copy trips it
    r = _post_with_image(client, content=b"x" * 4096)
    assert r.status_code == 413
    assert r.json()["error"] == "File too large"
    assert client.get("/face").json() == []
    assert list(settings.uploads_dir.iterdir()) == []


def test_oversized_request_rejected_before_handler(client, settings):
    r = _post_with_image(client, content=b"x" * (200 * 1024))
    assert r.status_code == 413
    assert not (settings.data_dir / "faceCosmetic.json").exists()
    assert not settings.uploads_dir.exists()


def test_validation_failure_stores_no_upload(client, settings):
    r = client.post("/face", data={"price": "1"}, files={"image": ("a.png", io.BytesIO(PNG), "image/png")})
    assert r.status_code == 400
    assert not settings.uploads_dir.exists()


def test_upload_rolled_back_when_document_write_fails(client, settings):
    doc = settings.data_dir / "faceCosmetic.json"
    doc.parent.mkdir(parents=True, exist_ok=True)
    doc.write_text("corrupt")

    r = _post_with_image(client)
    assert r.status_code == 500
    assert list(settings.uploads_dir.iterdir()) == []


def test_public_image_urls(tmp_path):
    settings = Settings(
        data_dir=tmp_path / "mock",
        uploads_dir=tmp_path / "uploads",
        public_image_urls=True,
    )
    client = TestClient(create_app(settings))

    created = _post_with_image(client).json()
    assert created["image"].startswith("http://testserver/uploads/")

    listed = client.get("/face").json()
    assert listed[0]["image"] == created["image"]

    # the document keeps the relative reference
    stored = json.loads((settings.data_dir / "faceCosmetic.json").read_text())
    assert stored[0]["image"].startswith("/uploads/")

    plain = client.post("/face", data={"name": "Mask", "price": "3"}).json()
    assert plain["image"] == ""
