from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class ProductVariation(models.Model):
    """
    Individual SKU of a product with its own price and discount.
    Each variation is distinguished by its attribute values.
    """
    product = models.ForeignKey(
        'catalog.Product',
        on_delete=models.CASCADE,
        related_name='variations',
        verbose_name='Товар'
    )
    sku = models.CharField(
        max_length=100,
        unique=True,
        verbose_name='Артикул'
    )
    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
        verbose_name='Цена'
    )
    discount = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MaxValueValidator(100)],
        verbose_name='Скидка (%)'
    )
    sort = models.IntegerField(
        default=0,
        verbose_name='Порядок'
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name='Создана'
    )

    class Meta:
        ordering = ['sort', 'id']
        verbose_name = 'Вариация'
        verbose_name_plural = 'Вариации'

    def __str__(self):
        return self.sku

    @property
    def discounted_price(self):
        if not self.discount:
            return self.price
        factor = (Decimal('100') - Decimal(self.discount)) / Decimal('100')
        return (self.price * factor).quantize(Decimal('0.01'))

    def get_attribute_list(self):
        return [
            {'attributeId': attr.attribute_id, 'value': attr.value}
            for attr in self.attributes.all()
        ]

    def get_attribute_map(self):
        """Return dict of {attributeId: value}"""
        return {attr.attribute_id: attr.value for attr in self.attributes.all()}


class VariationAttribute(models.Model):
    """
    Attribute value of a variation. attribute_id holds the attribute key
    as sent by the dashboard (numeric id or slug).
    """
    variation = models.ForeignKey(
        ProductVariation,
        on_delete=models.CASCADE,
        related_name='attributes',
        verbose_name='Вариация'
    )
    attribute_id = models.CharField(
        max_length=100,
        verbose_name='Атрибут'
    )
    value = models.CharField(
        max_length=200,
        verbose_name='Значение'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['id']
        verbose_name = 'Атрибут вариации'
        verbose_name_plural = 'Атрибуты вариаций'

    def __str__(self):
        return f"{self.variation.sku} - {self.attribute_id}: {self.value}"
