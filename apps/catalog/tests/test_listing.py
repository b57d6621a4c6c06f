"""Tests for product search, filters, sorting and pagination."""

from decimal import Decimal

import pytest

from apps.catalog.models import Product, ProductStoreLocation
from apps.catalog.services import ProductListingService
from apps.catalog.services.listing import normalize_search, parse_attribute_filters
from apps.catalog.services.variation_sort import natural_key, sort_variations_for_display


def _names(queryset):
    return [p.name for p in queryset]


class TestParsing:

    def test_normalize_search(self):
        assert normalize_search("  дуб   натур ") == "дуб натур"
        assert normalize_search("a") is None
        assert normalize_search(None) is None

    def test_parse_attribute_filters(self):
        assert parse_attribute_filters("3:10,11;7:42") == {"3": [10, 11], "7": [42]}
        assert parse_attribute_filters("color:1,x;bad") == {"color": [1]}
        assert parse_attribute_filters({"3": "5,6"}) == {"3": [5, 6]}
        assert parse_attribute_filters("") == {}

    def test_natural_key_orders_numbers(self):
        values = ["12", "8", "10,5", "Дуб"]
        assert sorted(values, key=natural_key) == ["8", "10,5", "12", "Дуб"]


@pytest.fixture
def catalog(db, category, subcategory, brand, collection):
    rows = [
        ("Дуб натур", "dub-natur", category, Decimal("100"), None),
        ("Ясень Дуб", "yasen", subcategory, Decimal("300"), collection),
        ("Орех", "oreh", category, Decimal("200"), None),
        ("Бук", "buk-dub", None, Decimal("50"), None),
    ]
    products = {}
    for name, slug, cat, price, coll in rows:
        products[slug] = Product.objects.create(
            name=name, slug=slug, category=cat, price=price,
            brand=brand if cat else None, collection=coll,
        )
    return products


@pytest.mark.django_db
class TestSearchAndSort:

    def test_search_matches_name_slug_and_related(self, catalog):
        qs = ProductListingService.apply_search(Product.objects.all(), "Дуб")
        assert set(_names(qs)) == {"Дуб натур", "Ясень Дуб"}

        qs = ProductListingService.apply_search(Product.objects.all(), "estetica")
        assert _names(qs) == ["Ясень Дуб"]

    def test_short_search_is_ignored(self, catalog):
        qs = ProductListingService.apply_search(Product.objects.all(), "д")
        assert qs.count() == 4

    def test_relevance_sort_prefers_early_name_match(self, catalog):
        qs = ProductListingService.apply_search(Product.objects.all(), "dub")
        qs = ProductListingService.apply_sort(qs, search="dub")
        # "buk-dub" and "dub-natur" match by slug only
        assert set(_names(qs)) == {"Дуб натур", "Бук"}

        qs = ProductListingService.apply_sort(
            ProductListingService.apply_search(Product.objects.all(), "Дуб"), search="Дуб"
        )
        assert _names(qs) == ["Дуб натур", "Ясень Дуб"]

    def test_explicit_sort_wins(self, catalog):
        qs = ProductListingService.apply_sort(Product.objects.all(), "price-desc", search="Дуб")
        assert _names(qs) == ["Ясень Дуб", "Орех", "Дуб натур", "Бук"]

        qs = ProductListingService.apply_sort(Product.objects.all(), "price-asc")
        assert _names(qs)[0] == "Бук"

    def test_default_sort_by_name(self, catalog):
        qs = ProductListingService.apply_sort(Product.objects.all())
        assert _names(qs) == sorted(_names(qs))


@pytest.mark.django_db
class TestFilters:

    def test_category_includes_descendants(self, catalog, category, subcategory):
        qs = ProductListingService.apply_category(Product.objects.all(), category.slug)
        assert set(_names(qs)) == {"Дуб натур", "Ясень Дуб", "Орех"}

        qs = ProductListingService.apply_category(Product.objects.all(), subcategory)
        assert _names(qs) == ["Ясень Дуб"]

    def test_unknown_category_matches_nothing(self, catalog):
        qs = ProductListingService.apply_category(Product.objects.all(), "missing")
        assert qs.count() == 0

    def test_attribute_filters(self, catalog, color_attribute, thickness_attribute):
        oak = color_attribute.values.get(value="Дуб")
        walnut = color_attribute.values.get(value="Орех")
        eight = thickness_attribute.values.get(value="8")

        first = catalog["dub-natur"]
        first.product_attributes = [
            {"attributeId": "color", "value": "Дуб"},
            {"attributeId": "thickness", "value": "8"},
        ]
        first.save()
        second = catalog["oreh"]
        second.product_attributes = [{"attributeId": "color", "value": "Орех"}]
        second.save()

        qs = ProductListingService.apply_attribute_filters(
            Product.objects.all(), f"{color_attribute.pk}:{oak.pk},{walnut.pk}"
        )
        assert set(_names(qs)) == {"Дуб натур", "Орех"}

        qs = ProductListingService.apply_attribute_filters(
            Product.objects.all(),
            f"{color_attribute.pk}:{oak.pk},{walnut.pk};thickness:{eight.pk}",
        )
        assert _names(qs) == ["Дуб натур"]

    def test_store_location(self, catalog, store_location):
        ProductStoreLocation.objects.create(product=catalog["oreh"], store_location=store_location)
        qs = ProductListingService.apply_store_location(Product.objects.all(), store_location.pk)
        assert _names(qs) == ["Орех"]


@pytest.mark.django_db
class TestPagination:

    def test_page_metadata(self, catalog):
        items, meta = ProductListingService.paginate(Product.objects.order_by("price"), page=2, limit=3)
        assert _names(items) == ["Ясень Дуб"]
        assert meta == {
            "page": 2,
            "limit": 3,
            "totalCount": 4,
            "totalPages": 2,
            "hasNextPage": False,
            "hasPreviousPage": True,
        }

    def test_without_params_returns_everything(self, catalog):
        items, meta = ProductListingService.paginate(Product.objects.all())
        assert len(items) == 4
        assert meta["totalPages"] == 1
        assert meta["hasNextPage"] is False

    def test_recommended(self, catalog):
        Product.objects.filter(slug__in=["oreh", "yasen", "buk-dub"]).update(is_featured=True)
        Product.objects.filter(slug="buk-dub").update(is_active=False)

        items, meta = ProductListingService.recommended(page=1, limit=1)
        assert _names(items) == ["Орех"]
        assert meta["hasNextPage"] is True

        items, meta = ProductListingService.recommended(page=2, limit=1)
        assert _names(items) == ["Ясень Дуб"]
        assert meta["hasNextPage"] is False


@pytest.mark.django_db
def test_variations_sorted_by_attribute_values(product_with_variations):
    product = product_with_variations
    product.variations.filter(sku="ALP-8").update(sort=5)

    ordered = sort_variations_for_display(product.variations.all())

    assert [v.sku for v in ordered] == ["ALP-8", "ALP-12"]
