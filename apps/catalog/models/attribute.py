from django.db import models

from apps.catalog.constants import (
    STANDARDIZED_VALUE_TYPES,
    VALUE_TYPE_CHOICES,
    VALUE_TYPE_FREE_TEXT,
)


class ProductAttribute(models.Model):
    """
    Named product characteristic used for filtering and display.
    Examples: "Размер (см)", "Цвет", "Класс износостойкости".

    Standardized attributes only accept values from their AttributeValue list;
    free-text attributes accept anything.
    """
    name = models.CharField(
        max_length=100,
        unique=True,
        verbose_name='Название'
    )
    slug = models.SlugField(
        max_length=100,
        unique=True,
        allow_unicode=True,
        verbose_name='Slug'
    )
    value_type = models.CharField(
        max_length=20,
        choices=VALUE_TYPE_CHOICES,
        default=VALUE_TYPE_FREE_TEXT,
        verbose_name='Тип значений'
    )
    allow_multiple_values = models.BooleanField(
        default=False,
        verbose_name='Несколько значений'
    )

    class Meta:
        ordering = ['name']
        verbose_name = 'Атрибут'
        verbose_name_plural = 'Атрибуты'

    def __str__(self):
        return self.name

    @property
    def is_standardized(self):
        return self.value_type in STANDARDIZED_VALUE_TYPES

    def keys(self):
        """Keys under which products may reference this attribute."""
        return {str(self.pk), self.slug}


class AttributeValue(models.Model):
    """
    Allowed value of a standardized attribute.
    Example: attribute "Материал" -> values "ПВХ плитка", "Дерево".
    """
    attribute = models.ForeignKey(
        ProductAttribute,
        on_delete=models.CASCADE,
        related_name='values',
        verbose_name='Атрибут'
    )
    value = models.CharField(
        max_length=200,
        verbose_name='Значение'
    )
    slug = models.SlugField(
        max_length=200,
        blank=True,
        allow_unicode=True,
        verbose_name='Slug'
    )
    sort_order = models.PositiveIntegerField(
        default=0,
        verbose_name='Порядок'
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name='Активно'
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name='Создано'
    )

    class Meta:
        ordering = ['sort_order', 'value']
        unique_together = ['attribute', 'value']
        verbose_name = 'Значение атрибута'
        verbose_name_plural = 'Значения атрибутов'

    def __str__(self):
        return f"{self.attribute.name}: {self.value}"
