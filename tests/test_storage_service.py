import base64
import io

import pytest
from PIL import Image

from app.services.storage_service import StorageError, InvalidImageError
from app.utils.qr_codes import render_qr_code_png


def _png_bytes(mode="RGBA", size=(2000, 1000)):
    buffer = io.BytesIO()
    Image.new(mode, size, (255, 0, 0, 128) if mode == "RGBA" else (255, 0, 0)).save(buffer, format="PNG")
    return buffer.getvalue()


def test_upload_bytes_keeps_key_and_metadata(storage, fake_bucket):
    key = storage.upload_bytes(
        "public/qrcodes/Customer/c-1.png",
        b"\x89PNG\r\n\x1a\nrest",
        metadata={"objectType": "Customer", "objectId": "c-1", "skipped": None},
    )
    stored = fake_bucket.objects[key]
    assert stored["content_type"] == "image/png"
    assert stored["metadata"] == {"objectType": "Customer", "objectId": "c-1"}


def test_empty_upload_rejected(storage):
    with pytest.raises(StorageError):
        storage.upload_bytes("k", b"")


def test_upload_base64_strips_data_uri(storage, fake_bucket):
    png = render_qr_code_png("hello")
    encoded = "data:image/png;base64," + base64.b64encode(png).decode()
    storage.upload_base64_image(encoded, "public/qrcodes/Order/o-1.png")
    assert fake_bucket.objects["public/qrcodes/Order/o-1.png"]["data"] == png


def test_upload_base64_rejects_garbage(storage):
    with pytest.raises(InvalidImageError):
        storage.upload_base64_image("***not base64***", "k.png")
    with pytest.raises(InvalidImageError, match="not a PNG"):
        storage.upload_base64_image(base64.b64encode(b"GIF89a....").decode(), "k.png")


def test_upload_image_optimizes_to_jpeg(storage, fake_bucket):
    key = storage.upload_image(_png_bytes(), "logos/b-1")
    assert key == "logos/b-1.jpg"
    stored = fake_bucket.objects[key]
    assert stored["content_type"] == "image/jpeg"
    image = Image.open(io.BytesIO(stored["data"]))
    assert image.format == "JPEG"
    assert max(image.size) <= 1024


def test_upload_image_rejects_non_images(storage):
    with pytest.raises(InvalidImageError):
        storage.upload_image(b"definitely not an image", "logos/b-1")


def test_signed_url_and_delete(storage):
    storage.upload_bytes("a/b.png", b"data")
    assert storage.get_url("a/b.png", expires_in=60).endswith("a/b.png?expires=60")
    assert storage.delete("a/b.png") is True
    assert storage.delete("a/b.png") is False
    with pytest.raises(StorageError):
        storage.get_url("")
