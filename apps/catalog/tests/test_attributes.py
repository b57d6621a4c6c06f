"""Tests for attribute validation and value propagation."""

import pytest

from apps.catalog.exceptions import EntityConflict, InvalidInput
from apps.catalog.models import (
    AttributeValue,
    ProductAttribute,
    ProductAttributeValue,
)
from apps.catalog.services import AttributeService


@pytest.mark.django_db
class TestValidateAttributeValues:

    def test_allowed_values_pass(self, color_attribute):
        errors = AttributeService.validate_attribute_values([
            {"attributeId": "color", "value": "Дуб"},
            {"attributeId": str(color_attribute.pk), "value": "Орех, Ясень"},
        ])
        assert errors == []

    def test_unknown_value_reported(self, color_attribute):
        errors = AttributeService.validate_attribute_values([
            {"attributeId": "color", "value": "Дуб,Бук"},
        ])
        assert len(errors) == 1
        assert errors[0]["value"] == "Бук"
        assert errors[0]["attributeId"] == "color"

    def test_inactive_value_rejected(self, color_attribute):
        AttributeValue.objects.filter(attribute=color_attribute, value="Орех").update(is_active=False)
        errors = AttributeService.validate_attribute_values([
            {"attributeId": "color", "value": "Орех"},
        ])
        assert [e["value"] for e in errors] == ["Орех"]

    def test_free_text_and_unknown_attributes_skipped(self, length_attribute):
        errors = AttributeService.validate_attribute_values([
            {"attributeId": "length", "value": "anything"},
            {"attributeId": "does-not-exist", "value": "x"},
            {"attributeId": "color", "value": ""},
        ])
        assert errors == []


@pytest.mark.django_db
class TestJunctionSync:

    def test_product_save_writes_junction_rows(self, product, color_attribute):
        rows = ProductAttributeValue.objects.filter(product=product)
        assert [r.value.value for r in rows] == ["Дуб"]

    def test_multiple_values_and_free_text(self, product, color_attribute, length_attribute):
        product.product_attributes = [
            {"attributeId": "color", "value": "Дуб, Орех"},
            {"attributeId": "length", "value": "120"},
        ]
        product.save()

        values = set(
            ProductAttributeValue.objects.filter(product=product).values_list("value__value", flat=True)
        )
        assert values == {"Дуб", "Орех"}

    def test_save_without_attribute_fields_keeps_rows(self, product):
        ProductAttributeValue.objects.filter(product=product).delete()
        product.name = "Renamed"
        product.save(update_fields=["name"])
        assert not ProductAttributeValue.objects.filter(product=product).exists()


@pytest.mark.django_db
class TestValueMaintenance:

    def test_rename_propagates_to_products(self, product, color_attribute):
        value = color_attribute.values.get(value="Дуб")
        AttributeService.update_value(value, {"value": "Дуб беленый"})

        product.refresh_from_db()
        assert product.product_attributes == [{"attributeId": "color", "value": "Дуб беленый"}]
        assert ProductAttributeValue.objects.filter(product=product, value=value).exists()

    def test_rename_to_existing_value_conflicts(self, color_attribute):
        value = color_attribute.values.get(value="Дуб")
        with pytest.raises(EntityConflict):
            AttributeService.update_value(value, {"value": "Орех"})

    def test_delete_removes_value_from_products(self, product, color_attribute):
        product.product_attributes = [{"attributeId": "color", "value": "Дуб,Орех"}]
        product.save()
        value = color_attribute.values.get(value="Дуб")

        updated = AttributeService.delete_value(value)

        assert updated == 1
        product.refresh_from_db()
        assert product.product_attributes == [{"attributeId": "color", "value": "Орех"}]
        assert not AttributeValue.objects.filter(pk=value.pk).exists()

    def test_deleting_last_value_drops_entry(self, product, color_attribute):
        AttributeService.delete_value(color_attribute.values.get(value="Дуб"))
        product.refresh_from_db()
        assert product.product_attributes == []

    def test_create_duplicate_value_conflicts(self, color_attribute):
        with pytest.raises(EntityConflict):
            AttributeService.create_value(color_attribute, {"value": "Дуб"})

    def test_create_value_appends_sort_order(self, color_attribute):
        value = AttributeService.create_value(color_attribute, {"value": "Бук"})
        assert value.sort_order == 3

    def test_count_products_with_errors(self, product, color_attribute):
        assert AttributeService.count_products_with_attribute_errors() == 0
        AttributeValue.objects.filter(attribute=color_attribute, value="Дуб").update(is_active=False)
        assert AttributeService.count_products_with_attribute_errors() == 1


@pytest.mark.django_db
class TestAttributeCrud:

    def test_create_requires_name_and_slug(self):
        with pytest.raises(InvalidInput):
            AttributeService.create_attribute({"name": " ", "slug": "x"})
        with pytest.raises(InvalidInput):
            AttributeService.create_attribute({"name": "X", "slug": ""})

    def test_duplicate_name_conflicts(self, color_attribute):
        with pytest.raises(EntityConflict):
            AttributeService.create_attribute({"name": "Цвет", "slug": "color-2"})

    def test_update_slug_to_taken_conflicts(self, color_attribute, thickness_attribute):
        with pytest.raises(EntityConflict):
            AttributeService.update_attribute(thickness_attribute, {"slug": "color"})

    def test_delete_used_by_variation_conflicts(self, product_with_variations, thickness_attribute):
        with pytest.raises(EntityConflict):
            AttributeService.delete_attribute(thickness_attribute)
        assert ProductAttribute.objects.filter(pk=thickness_attribute.pk).exists()

    def test_delete_unused(self, length_attribute):
        AttributeService.delete_attribute(length_attribute)
        assert not ProductAttribute.objects.filter(slug="length").exists()

    def test_counts(self, product, color_attribute):
        attribute = AttributeService.attributes_with_counts().get(pk=color_attribute.pk)
        assert attribute.product_count == 1
        assert attribute.value_count == 3

        counts = AttributeService.value_product_counts(color_attribute)
        assert counts[color_attribute.values.get(value="Дуб").pk] == 1
        assert counts[color_attribute.values.get(value="Орех").pk] == 0
