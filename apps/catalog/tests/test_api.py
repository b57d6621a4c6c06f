"""API tests for dashboard and storefront catalog endpoints."""

import pytest
from django.core.files.storage import default_storage
from django.core.files.uploadedfile import SimpleUploadedFile

from apps.catalog.models import AttributeValue, Brand, Category, Product


@pytest.mark.django_db
class TestPermissions:

    def test_dashboard_requires_staff(self, api_client):
        response = api_client.get("/api/dashboard/products/")
        assert response.status_code in (401, 403)

    def test_storefront_is_public(self, api_client, product):
        response = api_client.get("/api/store/products/")
        assert response.status_code == 200


@pytest.mark.django_db
class TestDashboardProducts:

    def test_create_and_fetch(self, admin_client, product_data, color_attribute):
        product_data["attributes"] = [{"attributeId": "color", "value": "Орех"}]

        response = admin_client.post("/api/dashboard/products/", product_data, format="json")

        assert response.status_code == 201, response.data
        assert response.data["slug"] == "laminat-dub-natur"
        assert response.data["attributes"] == [{"attributeId": "color", "value": "Орех"}]

        response = admin_client.get("/api/dashboard/products/by-slug/laminat-dub-natur/")
        assert response.status_code == 200
        assert response.data["category"] == "laminat"

    def test_create_missing_fields(self, admin_client):
        response = admin_client.post("/api/dashboard/products/", {"name": "X"}, format="json")
        assert response.status_code == 400
        assert "Missing required fields" in response.data["detail"]

    def test_create_invalid_attribute(self, admin_client, product_data, color_attribute):
        product_data["attributes"] = [{"attributeId": "color", "value": "Бук"}]
        response = admin_client.post("/api/dashboard/products/", product_data, format="json")
        assert response.status_code == 400
        assert "Бук" in response.data["detail"]

    def test_update(self, admin_client, product):
        payload = {
            "name": "Новое имя",
            "slug": product.slug,
            "price": "555.00",
            "unit_of_measurement": product.unit_of_measurement,
            "category": "",
        }
        response = admin_client.put(f"/api/dashboard/products/{product.pk}/", payload, format="json")
        assert response.status_code == 200, response.data
        assert response.data["name"] == "Новое имя"
        assert response.data["category"] == "laminat"

    def test_patch_not_allowed(self, admin_client, product):
        response = admin_client.patch(f"/api/dashboard/products/{product.pk}/", {"name": "x"}, format="json")
        assert response.status_code == 405

    def test_delete(self, admin_client, product):
        response = admin_client.delete(f"/api/dashboard/products/{product.pk}/")
        assert response.status_code == 200
        assert response.data == {"success": True, "failedImages": []}
        assert not Product.objects.exists()

    def test_list_with_search_and_pagination(self, admin_client, product, product_with_variations):
        Product.objects.filter(pk=product.pk).update(is_active=False)

        response = admin_client.get("/api/dashboard/products/", {"page": 1, "limit": 1, "sort": "name"})

        assert response.status_code == 200
        assert response.data["pagination"]["totalCount"] == 2
        assert response.data["pagination"]["hasNextPage"] is True
        assert len(response.data["products"]) == 1

        response = admin_client.get("/api/dashboard/products/", {"search": "alpine"})
        assert [p["slug"] for p in response.data["products"]] == ["alpine"]

    def test_attribute_errors_count(self, admin_client, product, color_attribute):
        AttributeValue.objects.filter(value="Дуб").update(is_active=False)
        response = admin_client.get("/api/dashboard/products/attribute-errors/")
        assert response.data == {"count": 1}


@pytest.mark.django_db
class TestDashboardCatalogStructure:

    def test_duplicate_category_slug_conflicts(self, admin_client, category):
        response = admin_client.post(
            "/api/dashboard/categories/", {"name": "Другая", "slug": category.slug}, format="json"
        )
        assert response.status_code == 409

    def test_category_cannot_be_moved_under_descendant(self, admin_client, category, subcategory):
        response = admin_client.patch(
            f"/api/dashboard/categories/{category.pk}/", {"parent": subcategory.pk}, format="json"
        )
        assert response.status_code == 400

    def test_brand_in_use_cannot_be_deleted(self, admin_client, product, brand):
        response = admin_client.delete(f"/api/dashboard/brands/{brand.pk}/")
        assert response.status_code == 409
        assert Brand.objects.filter(pk=brand.pk).exists()

    def test_store_location_requires_address(self, admin_client):
        response = admin_client.post("/api/dashboard/store-locations/", {"address": "  "}, format="json")
        assert response.status_code == 400

    def test_stats(self, admin_client, product):
        response = admin_client.get("/api/dashboard/stats/")
        assert response.data["products"] == 1

        response = admin_client.get("/api/dashboard/stats/product-counts/", {"by": "brand"})
        assert response.data == {"tarkett": 1}


@pytest.mark.django_db
class TestDashboardAttributes:

    def test_create_attribute_conflict(self, admin_client, color_attribute):
        response = admin_client.post(
            "/api/dashboard/attributes/", {"name": "Цвет", "slug": "color-new"}, format="json"
        )
        assert response.status_code == 409

    def test_values_list_and_create(self, admin_client, product, color_attribute):
        url = f"/api/dashboard/attributes/{color_attribute.pk}/values/"

        response = admin_client.get(url)
        counts = {v["value"]: v["product_count"] for v in response.data}
        assert counts == {"Дуб": 1, "Орех": 0, "Ясень": 0}

        response = admin_client.post(url, {"value": "Бук"}, format="json")
        assert response.status_code == 201
        response = admin_client.post(url, {"value": "Бук"}, format="json")
        assert response.status_code == 409

    def test_delete_value_updates_products(self, admin_client, product, color_attribute):
        value = color_attribute.values.get(value="Дуб")
        response = admin_client.delete(f"/api/dashboard/attribute-values/{value.pk}/")
        assert response.data == {"success": True, "updated_products": 1}


@pytest.mark.django_db
class TestDashboardImages:

    def test_upload_and_delete(self, admin_client):
        upload = SimpleUploadedFile("oak.png", b"png", content_type="image/png")
        response = admin_client.post(
            "/api/dashboard/images/",
            {"file": upload, "slug": "oak", "staging": "true"},
            format="multipart",
        )
        assert response.status_code == 201, response.data
        filename = response.data["filename"]
        assert filename == "staging/products/oak/oak.png"
        assert default_storage.exists(filename)

        response = admin_client.post(
            "/api/dashboard/images/delete/",
            {"filename": filename, "current_images": []},
            format="json",
        )
        assert response.data["deleted"] is True
        assert not default_storage.exists(filename)

    def test_upload_rejects_type(self, admin_client):
        upload = SimpleUploadedFile("doc.txt", b"text", content_type="text/plain")
        response = admin_client.post("/api/dashboard/images/", {"file": upload}, format="multipart")
        assert response.status_code == 400


@pytest.mark.django_db
class TestStorefront:

    def test_product_detail(self, api_client, product_with_variations):
        response = api_client.get("/api/store/products/alpine/")
        assert response.status_code == 200
        assert [v["sku"] for v in response.data["variations"]] == ["ALP-8", "ALP-12"]

    def test_inactive_product_detail_404(self, api_client, product):
        Product.objects.filter(pk=product.pk).update(is_active=False)
        response = api_client.get(f"/api/store/products/{product.slug}/")
        assert response.status_code == 404

    def test_list_hides_inactive_and_filters_category(self, api_client, product, subcategory):
        Product.objects.create(name="Скрытый", slug="hidden", price=1, is_active=False, category=subcategory)
        Product.objects.create(name="Подкатегория", slug="sub", price=1, category=subcategory)

        response = api_client.get("/api/store/products/", {"category": "laminat"})

        slugs = {p["slug"] for p in response.data["products"]}
        assert slugs == {product.slug, "sub"}

    def test_list_attribute_filter(self, api_client, product, color_attribute):
        oak = color_attribute.values.get(value="Дуб")
        walnut = color_attribute.values.get(value="Орех")

        response = api_client.get("/api/store/products/", {"attributes": f"color:{oak.pk}"})
        assert len(response.data["products"]) == 1

        response = api_client.get("/api/store/products/", {"attributes": f"color:{walnut.pk}"})
        assert response.data["products"] == []

    def test_register_view(self, api_client, product):
        response = api_client.post(f"/api/store/products/{product.pk}/view/")
        assert response.data == {"success": True}
        product.refresh_from_db()
        assert product.view_count == 1

    def test_recommended(self, api_client, product):
        Product.objects.filter(pk=product.pk).update(is_featured=True)
        response = api_client.get("/api/store/products/recommended/")
        assert [p["slug"] for p in response.data["products"]] == [product.slug]
        assert response.data["pagination"]["hasNextPage"] is False

    def test_category_tree(self, api_client, category, subcategory):
        Category.objects.create(name="Скрытая", slug="hidden", parent=category, is_active=False)
        response = api_client.get("/api/store/categories/tree/")
        assert response.data[0]["slug"] == "laminat"
        assert [c["slug"] for c in response.data[0]["children"]] == ["laminat-33"]

    def test_filtered_brands(self, api_client, product):
        response = api_client.get("/api/store/brands/filtered/", {"category": "laminat"})
        assert [b["slug"] for b in response.data] == ["tarkett"]

    def test_attribute_filters(self, api_client, product, color_attribute):
        response = api_client.get("/api/store/attribute-filters/", {"category": "laminat"})
        assert response.data[0]["slug"] == "color"

    def test_attribute_filters_by_store(self, api_client, product, color_attribute, store_location):
        product.store_locations.add(store_location)
        response = api_client.get("/api/store/attribute-filters/", {"store_location": store_location.pk})
        assert response.status_code == 200
        assert response.data[0]["slug"] == "color"

    def test_attribute_filters_bad_store_location(self, api_client, product, color_attribute):
        response = api_client.get("/api/store/attribute-filters/", {"store_location": "abc"})
        assert response.status_code == 400
        assert "store_location" in response.data["detail"]

    def test_search(self, api_client, product):
        response = api_client.get("/api/store/search/", {"q": "Ламинат"})
        assert {"type": "product", "text": product.name, "slug": product.slug} in response.data

        response = api_client.get("/api/store/search/popular/")
        assert response.data == ["Ламинат"]
