"""Shared pytest fixtures."""

from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from apps.catalog.constants import UNIT_PACK, VALUE_TYPE_FREE_TEXT, VALUE_TYPE_STANDARDIZED


User = get_user_model()


@pytest.fixture(autouse=True)
def media_storage(settings, tmp_path):
    """Keep uploaded files and sent mail out of the real environment."""
    settings.MEDIA_ROOT = tmp_path / "media"
    settings.EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
    settings.ORDER_NOTIFICATION_EMAILS = ["admin@bfloor.test"]
    return settings.MEDIA_ROOT


@pytest.fixture
def staff_user(db):
    """Create a staff user."""
    return User.objects.create_user(
        username="staffuser",
        email="staff@bfloor.test",
        password="testpass123",
        is_staff=True,
    )


@pytest.fixture
def api_client():
    """Anonymous API client (storefront)."""
    return APIClient()


@pytest.fixture
def admin_client(staff_user):
    """API client authenticated as staff (dashboard)."""
    client = APIClient()
    client.force_authenticate(user=staff_user)
    return client


@pytest.fixture
def category(db):
    from apps.catalog.models import Category

    return Category.objects.create(name="Ламинат", slug="laminat")


@pytest.fixture
def subcategory(db, category):
    from apps.catalog.models import Category

    return Category.objects.create(name="Ламинат 33 класс", slug="laminat-33", parent=category)


@pytest.fixture
def brand(db):
    from apps.catalog.models import Brand

    return Brand.objects.create(name="Tarkett", slug="tarkett")


@pytest.fixture
def collection(db, brand):
    from apps.catalog.models import Collection

    return Collection.objects.create(name="Estetica", slug="estetica", brand=brand)


@pytest.fixture
def store_location(db):
    from apps.catalog.models import StoreLocation

    return StoreLocation.objects.create(address="ул. Ленина, 10", opening_hours="9:00-19:00")


@pytest.fixture
def color_attribute(db):
    """Standardized attribute with three allowed values."""
    from apps.catalog.models import AttributeValue, ProductAttribute

    attribute = ProductAttribute.objects.create(
        name="Цвет",
        slug="color",
        value_type=VALUE_TYPE_STANDARDIZED,
        allow_multiple_values=True,
    )
    for i, value in enumerate(["Дуб", "Орех", "Ясень"]):
        AttributeValue.objects.create(attribute=attribute, value=value, sort_order=i)
    return attribute


@pytest.fixture
def thickness_attribute(db):
    from apps.catalog.models import AttributeValue, ProductAttribute

    attribute = ProductAttribute.objects.create(
        name="Толщина",
        slug="thickness",
        value_type=VALUE_TYPE_STANDARDIZED,
    )
    for i, value in enumerate(["8", "10", "12"]):
        AttributeValue.objects.create(attribute=attribute, value=value, sort_order=i)
    return attribute


@pytest.fixture
def length_attribute(db):
    from apps.catalog.models import ProductAttribute

    return ProductAttribute.objects.create(
        name="Длина",
        slug="length",
        value_type=VALUE_TYPE_FREE_TEXT,
    )


@pytest.fixture
def product_data(category, brand):
    """Valid dashboard payload for a simple product."""
    return {
        "name": "Ламинат Дуб натур",
        "slug": "laminat-dub-natur",
        "sku": "LDN-1",
        "price": "1290.00",
        "unit_of_measurement": UNIT_PACK,
        "category": category.slug,
        "brand": brand.slug,
        "is_active": True,
    }


@pytest.fixture
def product(db, category, brand, color_attribute):
    from apps.catalog.models import Product

    return Product.objects.create(
        name="Ламинат Дуб натур",
        slug="laminat-dub-natur",
        category=category,
        brand=brand,
        price=Decimal("1000.00"),
        discount=10,
        product_attributes=[{"attributeId": "color", "value": "Дуб"}],
    )


@pytest.fixture
def product_with_variations(db, category, thickness_attribute):
    from apps.catalog.models import Product, ProductVariation, VariationAttribute

    product = Product.objects.create(
        name="Кварцвинил Alpine",
        slug="alpine",
        category=category,
        price=Decimal("2000.00"),
        has_variations=True,
    )
    for i, (sku, price, thickness) in enumerate([
        ("ALP-8", "2000.00", "8"),
        ("ALP-12", "2500.00", "12"),
    ]):
        variation = ProductVariation.objects.create(
            product=product, sku=sku, price=Decimal(price), sort=i
        )
        VariationAttribute.objects.create(
            variation=variation, attribute_id="thickness", value=thickness
        )
    return product
