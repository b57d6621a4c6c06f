"""Tests for dashboard product writes."""

from decimal import Decimal

import pytest
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.db import IntegrityError

from apps.catalog.exceptions import (
    AttributeValidationFailed,
    EntityConflict,
    EntityNotFound,
    InvalidInput,
)
from apps.catalog.models import (
    Product,
    ProductAttributeValue,
    ProductVariation,
)
from apps.catalog.services import ProductService


@pytest.mark.django_db
class TestCreateProduct:

    def test_creates_simple_product(self, product_data, category, brand, store_location):
        product_data["store_location_ids"] = [store_location.pk, 9999]
        product = ProductService.create_product(product_data)

        assert product.pk
        assert product.category == category
        assert product.brand == brand
        assert product.price == Decimal("1290.00")
        assert list(product.store_locations.all()) == [store_location]

    @pytest.mark.parametrize("missing", ["name", "slug", "price"])
    def test_required_fields(self, product_data, missing):
        product_data.pop(missing)
        with pytest.raises(InvalidInput, match="Missing required fields"):
            ProductService.create_product(product_data)

    def test_unit_of_measurement_required(self, product_data):
        product_data["unit_of_measurement"] = ""
        with pytest.raises(InvalidInput, match="Unit of measurement"):
            ProductService.create_product(product_data)

    def test_negative_price_rejected(self, product_data):
        product_data["price"] = "-1"
        with pytest.raises(InvalidInput):
            ProductService.create_product(product_data)

    def test_duplicate_slug_rejected(self, product_data, product):
        with pytest.raises(InvalidInput, match="slug already exists"):
            ProductService.create_product(product_data)

    def test_unknown_category_rejected(self, product_data):
        product_data["category"] = "no-such-category"
        with pytest.raises(InvalidInput):
            ProductService.create_product(product_data)

    def test_invalid_attribute_value_rejected(self, product_data, color_attribute):
        product_data["attributes"] = [{"attributeId": "color", "value": "Бук"}]
        with pytest.raises(AttributeValidationFailed) as exc_info:
            ProductService.create_product(product_data)
        assert exc_info.value.errors[0]["value"] == "Бук"
        assert not Product.objects.exists()

    def test_empty_attribute_values_dropped(self, product_data, color_attribute):
        product_data["attributes"] = [
            {"attributeId": "color", "value": "Дуб"},
            {"attributeId": "thickness", "value": ""},
        ]
        product = ProductService.create_product(product_data)
        assert product.product_attributes == [{"attributeId": "color", "value": "Дуб"}]
        assert ProductAttributeValue.objects.filter(product=product).count() == 1

    def test_variations_created_with_generated_sku(self, product_data, thickness_attribute):
        product_data["has_variations"] = True
        product_data["variations"] = [
            {"sku": "V-8", "price": "100", "attributes": [{"attributeId": "thickness", "value": "8"}]},
            {"price": "120", "discount": 5, "attributes": [{"attributeId": "thickness", "value": "12"}]},
        ]
        product = ProductService.create_product(product_data)

        skus = list(product.variations.values_list("sku", flat=True))
        assert skus == ["V-8", "laminat-dub-natur-1"]
        second = product.variations.get(sku="laminat-dub-natur-1")
        assert second.discount == 5
        assert second.get_attribute_map() == {"thickness": "12"}

    def test_variations_ignored_without_flag(self, product_data):
        product_data["variations"] = [{"sku": "V-1", "price": "10"}]
        product = ProductService.create_product(product_data)
        assert product.variations.count() == 0

    def test_duplicate_variation_sku_in_payload(self, product_data):
        product_data["has_variations"] = True
        product_data["variations"] = [
            {"sku": "V-1", "price": "10"},
            {"sku": "V-1", "price": "11"},
        ]
        with pytest.raises(InvalidInput, match="Duplicate variation SKU"):
            ProductService.create_product(product_data)

    def test_variation_sku_of_other_product_conflicts(self, product_data, product_with_variations):
        product_data["has_variations"] = True
        product_data["variations"] = [{"sku": "ALP-8", "price": "10"}]
        with pytest.raises(EntityConflict):
            ProductService.create_product(product_data)

    def test_variation_discount_range(self, product_data):
        product_data["has_variations"] = True
        product_data["variations"] = [{"price": "10", "discount": 120}]
        with pytest.raises(InvalidInput, match="between 0 and 100"):
            ProductService.create_product(product_data)

    def test_staging_images_moved(self, product_data, category):
        default_storage.save("staging/products/tmp/a.png", ContentFile(b"a"))
        product_data["images"] = ["staging/products/tmp/a.png", "products/shared/b.png"]

        product = ProductService.create_product(product_data)

        assert product.images == ["products/laminat-dub-natur/a.png", "products/shared/b.png"]
        assert default_storage.exists("products/laminat-dub-natur/a.png")

    def test_moved_images_removed_when_save_fails(self, product_data, monkeypatch):
        default_storage.save("staging/products/tmp/a.png", ContentFile(b"a"))
        product_data["images"] = ["staging/products/tmp/a.png"]

        def fail(*args, **kwargs):
            raise RuntimeError("db down")

        monkeypatch.setattr(ProductService, "_set_store_locations", staticmethod(fail))

        with pytest.raises(RuntimeError):
            ProductService.create_product(product_data)

        assert not Product.objects.exists()
        assert not default_storage.exists("products/laminat-dub-natur/a.png")


@pytest.mark.django_db
class TestUpdateProduct:

    def _payload(self, product, **overrides):
        data = {
            "name": product.name,
            "slug": product.slug,
            "price": str(product.price),
            "unit_of_measurement": product.unit_of_measurement,
            "category": "",
            "brand": "",
        }
        data.update(overrides)
        return data

    def test_blank_related_keeps_existing(self, product, category, brand):
        updated = ProductService.update_product(product.pk, self._payload(product, price="999"))
        assert updated.category == category
        assert updated.brand == brand
        assert updated.price == Decimal("999")

    def test_null_related_clears(self, product):
        updated = ProductService.update_product(product.pk, self._payload(product, brand=None))
        assert updated.brand is None

    def test_slug_taken_by_other_product(self, product, product_with_variations):
        with pytest.raises(InvalidInput):
            ProductService.update_product(product.pk, self._payload(product, slug="alpine"))

    def test_missing_product(self, product):
        with pytest.raises(EntityNotFound):
            ProductService.update_product(999999, self._payload(product))

    def test_reconciles_variations(self, product_with_variations):
        product = product_with_variations
        keep = product.variations.get(sku="ALP-8")
        payload = self._payload(
            product,
            has_variations=True,
            variations=[
                {"id": keep.pk, "sku": "ALP-8", "price": "2100", "attributes": [{"attributeId": "thickness", "value": "10"}]},
                {"sku": "ALP-NEW", "price": "3000"},
            ],
        )

        ProductService.update_product(product.pk, payload)

        skus = set(ProductVariation.objects.filter(product=product).values_list("sku", flat=True))
        assert skus == {"ALP-8", "ALP-NEW"}
        keep.refresh_from_db()
        assert keep.price == Decimal("2100")
        assert keep.get_attribute_map() == {"thickness": "10"}

    def test_new_variation_before_kept_one_gets_free_sku(self, product_data):
        product_data["has_variations"] = True
        product_data["variations"] = [{"price": "100"}]
        product = ProductService.create_product(product_data)
        first = product.variations.get()
        assert first.sku == "laminat-dub-natur-1"

        payload = self._payload(
            product,
            has_variations=True,
            variations=[{"price": "50"}, {"id": first.pk, "price": "100"}],
        )
        ProductService.update_product(product.pk, payload)

        first.refresh_from_db()
        assert first.sku == "laminat-dub-natur-1"
        assert first.sort == 1
        added = ProductVariation.objects.filter(product=product).exclude(pk=first.pk).get()
        assert added.sku == "laminat-dub-natur-2"
        assert added.price == Decimal("50")

    def test_kept_variation_without_sku_keeps_stored_one(self, product_with_variations):
        product = product_with_variations
        keep = product.variations.get(sku="ALP-12")
        payload = self._payload(
            product,
            has_variations=True,
            variations=[{"id": keep.pk, "price": "2600"}],
        )
        ProductService.update_product(product.pk, payload)

        keep.refresh_from_db()
        assert keep.sku == "ALP-12"
        assert keep.sort == 0

    def test_swapping_skus_of_existing_variations(self, product_with_variations):
        product = product_with_variations
        thin = product.variations.get(sku="ALP-8")
        thick = product.variations.get(sku="ALP-12")
        payload = self._payload(
            product,
            has_variations=True,
            variations=[
                {"id": thin.pk, "sku": "ALP-12", "price": "2000"},
                {"id": thick.pk, "sku": "ALP-8", "price": "2500"},
            ],
        )

        ProductService.update_product(product.pk, payload)

        thin.refresh_from_db()
        thick.refresh_from_db()
        assert thin.sku == "ALP-12"
        assert thick.sku == "ALP-8"

    def test_database_conflict_becomes_entity_conflict(self, product, monkeypatch):
        def clash(*args, **kwargs):
            raise IntegrityError("UNIQUE constraint failed: catalog_productvariation.sku")

        monkeypatch.setattr(ProductService, "_set_store_locations", staticmethod(clash))

        with pytest.raises(EntityConflict):
            ProductService.update_product(product.pk, self._payload(product, price="5"))
        product.refresh_from_db()
        assert product.price == Decimal("1000.00")

    def test_turning_off_variations_deletes_them(self, product_with_variations):
        product = product_with_variations
        ProductService.update_product(product.pk, self._payload(product, has_variations=False))
        assert not ProductVariation.objects.filter(product=product).exists()

    def test_update_revalidates_attributes(self, product, color_attribute):
        payload = self._payload(product, attributes=[{"attributeId": "color", "value": "Бук"}])
        with pytest.raises(AttributeValidationFailed):
            ProductService.update_product(product.pk, payload)


@pytest.mark.django_db
class TestDeleteProduct:

    def test_deletes_product_and_images(self, product):
        default_storage.save("products/laminat/oak/a.png", ContentFile(b"a"))
        product.images = ["products/laminat/oak/a.png"]
        product.save()

        result = ProductService.delete_product(product.pk)

        assert result == {"success": True, "failedImages": []}
        assert not Product.objects.filter(pk=product.pk).exists()
        assert not default_storage.exists("products/laminat/oak/a.png")

    def test_missing_product(self):
        with pytest.raises(EntityNotFound):
            ProductService.delete_product(12345)
