from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.text import slugify
from simple_history.models import HistoricalRecords

from apps.catalog.constants import UNIT_OF_MEASUREMENT_CHOICES, UNIT_PACK


def parse_product_attributes(raw):
    """
    Normalize stored product attributes to [{"attributeId": str, "value": str}].
    Accepts the list format and the legacy {attributeId: value} object format.
    """
    if not raw:
        return []
    if isinstance(raw, dict):
        return [
            {'attributeId': str(key), 'value': str(value)}
            for key, value in raw.items()
        ]
    if isinstance(raw, list):
        return [
            {'attributeId': str(item.get('attributeId', '')), 'value': str(item.get('value', ''))}
            for item in raw
            if isinstance(item, dict)
        ]
    return []


def split_values(value):
    """Split a comma-separated attribute value into trimmed, non-empty parts."""
    return [part.strip() for part in str(value or '').split(',') if part.strip()]


class Product(models.Model):
    """
    Flooring product. Products either carry a single price or a set of
    variations (ProductVariation) with their own SKU and price.
    """
    category = models.ForeignKey(
        'catalog.Category',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='products',
        verbose_name='Категория'
    )
    brand = models.ForeignKey(
        'catalog.Brand',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='products',
        verbose_name='Бренд'
    )
    collection = models.ForeignKey(
        'catalog.Collection',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='products',
        verbose_name='Коллекция'
    )
    name = models.CharField(
        max_length=255,
        verbose_name='Название'
    )
    slug = models.SlugField(
        max_length=255,
        unique=True,
        allow_unicode=True,
        verbose_name='Slug'
    )
    sku = models.CharField(
        max_length=100,
        blank=True,
        verbose_name='Артикул'
    )
    images = models.JSONField(
        default=list,
        blank=True,
        verbose_name='Изображения',
        help_text='Список путей к файлам в хранилище'
    )
    description = models.TextField(
        blank=True,
        verbose_name='Описание'
    )
    important_note = models.TextField(
        blank=True,
        verbose_name='Важная заметка',
        help_text='Поддерживает Markdown'
    )
    tags = models.JSONField(
        default=list,
        blank=True,
        verbose_name='Теги'
    )

    # Pricing (for flooring: price per m²)
    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
        verbose_name='Цена'
    )
    discount = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MaxValueValidator(100)],
        verbose_name='Скидка (%)'
    )
    square_meters_per_pack = models.DecimalField(
        max_digits=10,
        decimal_places=3,
        null=True,
        blank=True,
        verbose_name='м² в упаковке'
    )
    unit_of_measurement = models.CharField(
        max_length=50,
        choices=UNIT_OF_MEASUREMENT_CHOICES,
        default=UNIT_PACK,
        verbose_name='Единица измерения'
    )

    # Status
    is_active = models.BooleanField(
        default=True,
        verbose_name='Активен'
    )
    is_featured = models.BooleanField(
        default=False,
        verbose_name='Рекомендуемый'
    )
    has_variations = models.BooleanField(
        default=False,
        verbose_name='Есть вариации'
    )

    product_attributes = models.JSONField(
        default=list,
        blank=True,
        verbose_name='Атрибуты',
        help_text='[{"attributeId": "5", "value": "Дерево"}]'
    )
    dimensions = models.TextField(
        blank=True,
        verbose_name='Габариты'
    )
    store_locations = models.ManyToManyField(
        'catalog.StoreLocation',
        through='catalog.ProductStoreLocation',
        blank=True,
        related_name='products',
        verbose_name='Магазины'
    )
    view_count = models.PositiveIntegerField(
        default=0,
        verbose_name='Просмотры'
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name='Создан'
    )

    # History tracking
    history = HistoricalRecords()

    class Meta:
        ordering = ['name']
        verbose_name = 'Товар'
        verbose_name_plural = 'Товары'

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name, allow_unicode=True)
        super().save(*args, **kwargs)

    @property
    def discounted_price(self):
        if not self.discount:
            return self.price
        factor = (Decimal('100') - Decimal(self.discount)) / Decimal('100')
        return (self.price * factor).quantize(Decimal('0.01'))

    @property
    def image_list(self):
        if isinstance(self.images, list):
            return [str(path) for path in self.images if path]
        return []

    @property
    def primary_image(self):
        images = self.image_list
        return images[0] if images else None

    def get_attribute_list(self):
        return parse_product_attributes(self.product_attributes)

    def get_attribute_map(self):
        """Return dict of {attributeId: value}"""
        return {
            item['attributeId']: item['value']
            for item in self.get_attribute_list()
        }

    @property
    def variation_count(self):
        return self.variations.count()


class ProductAttributeValue(models.Model):
    """
    Normalized link between a product and the standardized attribute values
    it carries. Rebuilt from Product.product_attributes whenever the product
    is saved through the dashboard; used for filtering and counting.
    """
    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name='attribute_values',
        verbose_name='Товар'
    )
    attribute = models.ForeignKey(
        'catalog.ProductAttribute',
        on_delete=models.CASCADE,
        related_name='product_values',
        verbose_name='Атрибут'
    )
    value = models.ForeignKey(
        'catalog.AttributeValue',
        on_delete=models.CASCADE,
        related_name='product_values',
        verbose_name='Значение'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ['product', 'attribute', 'value']
        indexes = [
            models.Index(fields=['product', 'attribute'], name='catalog_pav_product_idx'),
            models.Index(fields=['attribute', 'value'], name='catalog_pav_attr_value_idx'),
        ]
        verbose_name = 'Значение атрибута товара'
        verbose_name_plural = 'Значения атрибутов товаров'

    def __str__(self):
        return f"{self.product.name} - {self.value}"
