from decimal import Decimal

from django.db import models


class Order(models.Model):
    """Order placed through the storefront checkout."""

    STATUS_PENDING = 'pending'
    STATUS_CHOICES = [
        ('pending', 'Ожидает обработки'),
        ('confirmed', 'Подтвержден'),
        ('processing', 'В работе'),
        ('shipped', 'Отправлен'),
        ('delivered', 'Доставлен'),
        ('cancelled', 'Отменен'),
    ]

    PAYMENT_PENDING = 'pending'
    PAYMENT_STATUS_CHOICES = [
        ('pending', 'Ожидает оплаты'),
        ('paid', 'Оплачен'),
        ('failed', 'Ошибка оплаты'),
        ('refunded', 'Возврат'),
    ]

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING,
        verbose_name='Статус'
    )
    customer_name = models.CharField(
        max_length=200,
        blank=True,
        verbose_name='Имя клиента'
    )
    customer_email = models.EmailField(
        blank=True,
        verbose_name='Email клиента'
    )
    customer_phone = models.CharField(
        max_length=50,
        blank=True,
        verbose_name='Телефон'
    )
    shipping_address = models.TextField(
        blank=True,
        verbose_name='Адрес доставки'
    )

    # Amounts
    subtotal_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        verbose_name='Сумма без скидки'
    )
    discount_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        verbose_name='Скидка'
    )
    shipping_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        verbose_name='Доставка'
    )
    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        verbose_name='Итого'
    )
    currency = models.CharField(
        max_length=3,
        default='CAD',
        verbose_name='Валюта'
    )

    payment_method = models.CharField(
        max_length=50,
        blank=True,
        verbose_name='Способ оплаты'
    )
    payment_status = models.CharField(
        max_length=20,
        choices=PAYMENT_STATUS_CHOICES,
        default=PAYMENT_PENDING,
        verbose_name='Статус оплаты'
    )
    shipping_method = models.CharField(
        max_length=50,
        blank=True,
        verbose_name='Способ доставки'
    )
    notes = models.TextField(
        blank=True,
        verbose_name='Комментарий'
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name='Создан'
    )
    completed_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name='Завершен'
    )

    class Meta:
        ordering = ['-created_at', '-id']
        verbose_name = 'Заказ'
        verbose_name_plural = 'Заказы'

    def __str__(self):
        return f"Заказ #{self.pk}"

    @property
    def item_count(self):
        return sum(item.quantity for item in self.items.all())


class OrderItem(models.Model):
    """Line of an order; prices are copied from the catalog at checkout."""
    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name='items',
        verbose_name='Заказ'
    )
    product = models.ForeignKey(
        'catalog.Product',
        on_delete=models.CASCADE,
        related_name='order_items',
        verbose_name='Товар'
    )
    product_variation = models.ForeignKey(
        'catalog.ProductVariation',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='order_items',
        verbose_name='Вариация'
    )
    quantity = models.PositiveIntegerField(
        verbose_name='Количество'
    )
    unit_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        verbose_name='Цена за единицу'
    )
    discount_percentage = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        verbose_name='Скидка (%)'
    )
    final_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        verbose_name='Сумма',
        help_text='Цена со скидкой × количество'
    )
    attributes = models.JSONField(
        default=dict,
        blank=True,
        verbose_name='Атрибуты'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['id']
        verbose_name = 'Позиция заказа'
        verbose_name_plural = 'Позиции заказа'

    def __str__(self):
        return f"{self.product} × {self.quantity}"
