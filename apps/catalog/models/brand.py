from django.db import models
from django.utils.text import slugify

from apps.catalog.constants import BRAND_COUNTRY_CHOICES


class Brand(models.Model):
    """Manufacturer of flooring products."""
    name = models.CharField(
        max_length=200,
        verbose_name='Название'
    )
    slug = models.SlugField(
        max_length=200,
        unique=True,
        allow_unicode=True,
        verbose_name='Slug'
    )
    image = models.CharField(
        max_length=500,
        blank=True,
        verbose_name='Логотип',
        help_text='Путь к файлу в хранилище'
    )
    country = models.CharField(
        max_length=10,
        choices=BRAND_COUNTRY_CHOICES,
        default='NONE',
        verbose_name='Страна'
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name='Активен'
    )

    class Meta:
        ordering = ['name']
        verbose_name = 'Бренд'
        verbose_name_plural = 'Бренды'

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name, allow_unicode=True)
        super().save(*args, **kwargs)


class Collection(models.Model):
    """A named product line of a brand."""
    name = models.CharField(
        max_length=200,
        verbose_name='Название'
    )
    slug = models.SlugField(
        max_length=200,
        unique=True,
        allow_unicode=True,
        verbose_name='Slug'
    )
    brand = models.ForeignKey(
        Brand,
        on_delete=models.CASCADE,
        related_name='collections',
        verbose_name='Бренд'
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name='Активна'
    )

    class Meta:
        ordering = ['name']
        verbose_name = 'Коллекция'
        verbose_name_plural = 'Коллекции'

    def __str__(self):
        return f"{self.brand.name} / {self.name}"

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name, allow_unicode=True)
        super().save(*args, **kwargs)
