from django.db import models


class StoreLocation(models.Model):
    """Physical store where products can be seen and bought."""
    address = models.CharField(
        max_length=255,
        verbose_name='Адрес'
    )
    description = models.TextField(
        blank=True,
        verbose_name='Описание',
        help_text='Например: "Вход со стороны дороги"'
    )
    opening_hours = models.TextField(
        blank=True,
        verbose_name='Часы работы'
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name='Активен'
    )
    order = models.PositiveIntegerField(
        default=0,
        verbose_name='Порядок'
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name='Создан'
    )

    class Meta:
        ordering = ['order', 'id']
        verbose_name = 'Магазин'
        verbose_name_plural = 'Магазины'

    def __str__(self):
        return self.address


class ProductStoreLocation(models.Model):
    """Through model: product availability in a store."""
    product = models.ForeignKey(
        'catalog.Product',
        on_delete=models.CASCADE,
        verbose_name='Товар'
    )
    store_location = models.ForeignKey(
        StoreLocation,
        on_delete=models.CASCADE,
        verbose_name='Магазин'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ['product', 'store_location']
        verbose_name = 'Наличие в магазине'
        verbose_name_plural = 'Наличие в магазинах'

    def __str__(self):
        return f"{self.product.name} - {self.store_location.address}"
