"""End-to-end tests for the HTTP surface."""
from io import BytesIO
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from avifpress.api import create_app, lifespan
from avifpress.config import Settings
from avifpress.errors import FilesystemError


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


def post_image(client, content, percentage, filename="photo.jpg"):
    return client.post(
        "/compress",
        files={"image": (filename, content, "image/jpeg")},
        data={"compressionPercentage": percentage}
    )


def test_startup_creates_directories(client, settings):
    assert Path(settings.incoming_dir).is_dir()
    assert Path(settings.derived_dir).is_dir()


def test_landing_page(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "/compress" in response.text


def test_compress_returns_avif_download(client, settings, jpeg_bytes):
    response = post_image(client, jpeg_bytes, "80")

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/avif"
    assert response.headers["content-disposition"] == "attachment; filename=compressed.avif"
    assert 0 < len(response.content) < len(jpeg_bytes)
    with Image.open(BytesIO(response.content)) as image:
        assert image.format == "AVIF"

    uploads = list(Path(settings.incoming_dir).iterdir())
    outputs = list(Path(settings.derived_dir).iterdir())
    assert len(uploads) == 1 and uploads[0].name.endswith("_photo.jpg")
    assert len(outputs) == 1 and outputs[0].name.endswith("_photo_compressed_80%.avif")


def test_identical_uploads_get_separate_outputs(client, settings, jpeg_bytes):
    assert post_image(client, jpeg_bytes, "50").status_code == 200
    assert post_image(client, jpeg_bytes, "50").status_code == 200
    assert len(list(Path(settings.derived_dir).iterdir())) == 2


def test_out_of_range_percentage_fails_without_output(client, settings, jpeg_bytes, caplog):
    response = post_image(client, jpeg_bytes, "150")

    assert response.status_code == 500
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text == "Compression failed"
    assert list(Path(settings.derived_dir).iterdir()) == []

    correlation_id = response.headers["x-correlation-id"]
    records = [r for r in caplog.records if getattr(r, "correlation_id", None) == correlation_id]
    assert len(records) == 1
    assert records[0].error_kind == "validation"


@pytest.mark.parametrize("percentage", ["abc", "", "12.5"])
def test_non_numeric_percentage_fails(client, settings, jpeg_bytes, percentage):
    response = post_image(client, jpeg_bytes, percentage)
    assert response.status_code == 500
    assert response.text == "Compression failed"
    assert list(Path(settings.derived_dir).iterdir()) == []


def test_percentage_too_large_for_a_number_fails_as_validation(client, settings, jpeg_bytes, caplog):
    response = post_image(client, jpeg_bytes, "1" + "0" * 400)

    assert response.status_code == 500
    assert response.text == "Compression failed"
    assert list(Path(settings.derived_dir).iterdir()) == []

    correlation_id = response.headers["x-correlation-id"]
    records = [r for r in caplog.records if getattr(r, "correlation_id", None) == correlation_id]
    assert len(records) == 1
    assert records[0].error_kind == "validation"
    assert "Unhandled exception" not in caplog.text


def test_corrupt_image_fails(client, settings):
    response = post_image(client, b"not an image", "50")
    assert response.status_code == 500
    assert response.text == "Compression failed"
    assert list(Path(settings.derived_dir).iterdir()) == []


def test_missing_image_field_fails(client):
    response = client.post("/compress", data={"compressionPercentage": "50"})
    assert response.status_code == 500
    assert response.text == "Compression failed"


def test_get_on_compress_is_not_found(client):
    response = client.get("/compress")
    assert response.status_code == 404
    assert response.text == "Not Found"


def test_unknown_route_is_not_found(client):
    response = client.delete("/anything")
    assert response.status_code == 404
    assert response.text == "Not Found"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_detailed_health(client):
    body = client.get("/health/detailed").json()
    assert body["avif_available"] is True
    assert body["reaper_running"] is True
    assert body["directories"]["incoming"]["exists"] is True
    assert body["directories"]["derived"]["writable"] is True


@pytest.mark.asyncio
async def test_startup_aborts_when_directory_cannot_be_created(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("x")
    app = create_app(Settings(incoming_dir=str(blocker / "tmp"), derived_dir=str(tmp_path / "out")))

    with pytest.raises(FilesystemError):
        async with lifespan(app):
            pass

    assert not hasattr(app.state, "reaper")
