"""Tests for image storage: upload, staging moves and deletion."""

import pytest
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.core.files.uploadedfile import SimpleUploadedFile

from apps.catalog.exceptions import InvalidInput, StorageFailure
from apps.catalog.services import ProductImageService
from apps.catalog.services.images import (
    MAX_IMAGE_SIZE,
    image_url,
    parse_image_list,
    sanitize_filename,
)


def _upload(name="Фото Пола.PNG", content=b"png-bytes", content_type="image/png"):
    return SimpleUploadedFile(name, content, content_type=content_type)


class TestHelpers:

    def test_sanitize_filename(self):
        assert sanitize_filename("My Floor__Photo.JPG") == "my-floor-photo.jpg"

    def test_parse_image_list_formats(self):
        assert parse_image_list(["a.png", " ", "b.png"]) == ["a.png", "b.png"]
        assert parse_image_list('["a.png", "b.png"]') == ["a.png", "b.png"]
        assert parse_image_list("a.png, b.png") == ["a.png", "b.png"]
        assert parse_image_list(None) == []

    def test_image_url(self, settings):
        settings.ASSETS_BASE_URL = "https://cdn.example.com/"
        assert image_url("products/a.png") == "https://cdn.example.com/products/a.png"
        assert image_url("https://other/x.png") == "https://other/x.png"
        assert image_url("") == ""


class TestBuildDirectory:

    def test_product_directory(self):
        path = ProductImageService.build_directory(
            "products", category_slug="Laminat", product_name="Дуб Natur 8mm"
        )
        assert path == "products/laminat/natur-8mm"

    def test_flat_folder_ignores_product(self):
        path = ProductImageService.build_directory("brands", slug="tarkett", product_name="x", category_slug="y")
        assert path == "brands"

    def test_slug_fallback_and_staging(self):
        path = ProductImageService.build_directory("products", slug="my-product", staging=True)
        assert path == "staging/products/my-product"

    def test_temp_directory(self):
        path = ProductImageService.build_directory("products")
        assert path.startswith("products/temp-")


class TestUpload:

    def test_upload_stores_file(self):
        result = ProductImageService.upload(_upload(), slug="oak")
        # Cyrillic name sanitizes to nothing, a generated base is used
        assert result["filename"].startswith("products/oak/image-")
        assert result["filename"].endswith(".png")
        assert default_storage.exists(result["filename"])
        assert result["url"].endswith(result["filename"])

    def test_duplicate_name_gets_copy_suffix(self):
        first = ProductImageService.upload(_upload(name="oak.png"), slug="oak")
        second = ProductImageService.upload(_upload(name="oak.png"), slug="oak")
        third = ProductImageService.upload(_upload(name="oak.png"), slug="oak")
        assert first["filename"] == "products/oak/oak.png"
        assert second["filename"] == "products/oak/oak-copy.png"
        assert third["filename"] == "products/oak/oak-copy2.png"

    def test_rejects_wrong_type(self):
        with pytest.raises(InvalidInput):
            ProductImageService.upload(_upload(name="doc.pdf", content_type="application/pdf"))

    def test_rejects_large_raster(self):
        big = _upload(name="big.jpg", content=b"x" * (MAX_IMAGE_SIZE + 1), content_type="image/jpeg")
        with pytest.raises(InvalidInput, match="1.5MB"):
            ProductImageService.upload(big)

    def test_svg_has_larger_limit(self):
        svg = _upload(name="logo.svg", content=b"<svg/>" * 400000, content_type="image/svg+xml")
        result = ProductImageService.upload(svg, folder="brands")
        assert result["filename"] == "brands/logo.svg"


class TestStagingMoves:

    def test_moves_only_staging_paths(self):
        default_storage.save("staging/products/tmp/a.png", ContentFile(b"a"))

        moved = ProductImageService.move_staging_images(
            ["staging/products/tmp/a.png", "products/old/b.png"],
            category_slug="laminat",
            product_name="oak",
        )

        assert moved == {"staging/products/tmp/a.png": "products/laminat/oak/a.png"}
        assert default_storage.exists("products/laminat/oak/a.png")
        assert not default_storage.exists("staging/products/tmp/a.png")

    def test_missing_staging_file_fails_and_rolls_back(self):
        default_storage.save("staging/products/tmp/a.png", ContentFile(b"a"))

        with pytest.raises(StorageFailure):
            ProductImageService.move_staging_images(
                ["staging/products/tmp/a.png", "staging/products/tmp/missing.png"],
                slug="oak",
            )
        assert not default_storage.exists("products/oak/a.png")

    def test_apply_moves(self):
        assert ProductImageService.apply_moves(["a", "b"], {"a": "c"}) == ["c", "b"]


class TestDelete:

    def test_skips_image_in_use(self):
        default_storage.save("products/oak/a.png", ContentFile(b"a"))
        result = ProductImageService.delete_product_image("products/oak/a.png", ["products/oak/a.png"])
        assert result["skipped"] is True
        assert default_storage.exists("products/oak/a.png")

    def test_deletes_unused_image(self):
        default_storage.save("products/oak/a.png", ContentFile(b"a"))
        result = ProductImageService.delete_product_image("products/oak/a.png", '["products/oak/b.png"]')
        assert result == {"deleted": True, "skipped": False, "message": "Image deleted"}
        assert not default_storage.exists("products/oak/a.png")

    def test_filename_required(self):
        with pytest.raises(InvalidInput):
            ProductImageService.delete_product_image("")
