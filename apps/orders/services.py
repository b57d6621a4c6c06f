"""
Checkout: order creation from cart items and notification emails.
"""

import logging
from decimal import Decimal
from typing import Dict, Iterable, List

from django.conf import settings
from django.core.mail import EmailMessage
from django.db import transaction
from django.template.loader import render_to_string

from apps.catalog.exceptions import EntityNotFound, InvalidInput
from apps.catalog.models import Product, ProductVariation

from .models import Order, OrderItem

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')


class OrderService:
    """Creates orders from validated cart lines."""

    @staticmethod
    def _resolve_line(item: Dict):
        try:
            product_id = int(item.get('productId'))
            quantity = int(item.get('quantity'))
        except (TypeError, ValueError):
            raise InvalidInput('Each item needs a productId and a quantity')
        if quantity <= 0:
            raise InvalidInput('Quantity must be a positive integer')

        product = Product.objects.filter(pk=product_id, is_active=True).first()
        if product is None:
            raise EntityNotFound(f'Product {product_id} is not available')

        variation = None
        variation_id = item.get('variationId')
        if variation_id:
            variation = ProductVariation.objects.filter(pk=variation_id, product=product).first()
            if variation is None:
                raise InvalidInput(f'Variation {variation_id} does not belong to product {product_id}')
        elif product.has_variations and product.variations.exists():
            raise InvalidInput(f'Product {product_id} needs a variation to be selected')

        return product, variation, quantity

    @staticmethod
    @transaction.atomic
    def create_order(customer_info: Dict, items: Iterable[Dict]) -> Order:
        """
        Create an order with prices re-read from the catalog.

        Args:
            customer_info: name, email, phone, address, shipping_method,
                payment_method, notes
            items: cart lines [{"productId", "variationId", "quantity"}]
        """
        items = list(items or [])
        if not items:
            raise InvalidInput('Cart is empty')

        lines = [OrderService._resolve_line(item) for item in items]

        subtotal = Decimal('0')
        discount_total = Decimal('0')
        order_items = []
        for product, variation, quantity in lines:
            source = variation or product
            unit_amount = source.price
            discount = source.discount or 0
            base = unit_amount * quantity
            final_amount = (unit_amount * (Decimal('100') - discount) / Decimal('100') * quantity).quantize(CENT)

            subtotal += base
            discount_total += base - final_amount
            order_items.append(OrderItem(
                product=product,
                product_variation=variation,
                quantity=quantity,
                unit_amount=unit_amount,
                discount_percentage=discount or None,
                final_amount=final_amount,
                attributes=variation.get_attribute_map() if variation else {},
            ))

        shipping = Decimal('0.00')
        subtotal = subtotal.quantize(CENT)
        discount_total = discount_total.quantize(CENT)

        order = Order.objects.create(
            customer_name=customer_info.get('name', ''),
            customer_email=customer_info.get('email', ''),
            customer_phone=customer_info.get('phone', ''),
            shipping_address=customer_info.get('address', ''),
            subtotal_amount=subtotal,
            discount_amount=discount_total,
            shipping_amount=shipping,
            total_amount=subtotal - discount_total + shipping,
            currency=settings.ORDER_CURRENCY,
            payment_method=customer_info.get('payment_method', ''),
            shipping_method=customer_info.get('shipping_method', ''),
            notes=customer_info.get('notes', ''),
        )
        for order_item in order_items:
            order_item.order = order
        OrderItem.objects.bulk_create(order_items)

        logger.info(
            "Order created",
            extra={
                "order_id": order.pk,
                "item_count": len(order_items),
                "total": str(order.total_amount),
            },
        )
        return order


class OrderNotificationService:
    """Order confirmation for the customer and notification for the staff."""

    @staticmethod
    def _send(subject: str, template: str, context: Dict, recipients: List[str]):
        body = render_to_string(template, context)
        email = EmailMessage(
            subject=subject,
            body=body,
            from_email=settings.DEFAULT_FROM_EMAIL,
            to=recipients,
            reply_to=[settings.DEFAULT_FROM_EMAIL],
        )
        email.send(fail_silently=False)

    @staticmethod
    def send_order_emails(order: Order) -> List[str]:
        """
        Send both emails. Failures are logged and returned as warnings;
        the order is kept either way.
        """
        warnings = []
        context = {
            'order': order,
            'items': order.items.select_related('product', 'product_variation'),
            'store_name': settings.STORE_NAME,
        }

        if order.customer_email:
            try:
                OrderNotificationService._send(
                    f'{settings.STORE_NAME}: заказ #{order.pk} принят',
                    'orders/email/customer_confirmation.txt',
                    context,
                    [order.customer_email],
                )
            except Exception as e:
                logger.exception(
                    "Failed to send order confirmation",
                    extra={"order_id": order.pk, "error": str(e)},
                )
                warnings.append(f'Confirmation email could not be sent: {e}')
        else:
            warnings.append('No customer email, confirmation not sent')

        admins = list(settings.ORDER_NOTIFICATION_EMAILS)
        if admins:
            try:
                OrderNotificationService._send(
                    f'Новый заказ #{order.pk}',
                    'orders/email/admin_notification.txt',
                    context,
                    admins,
                )
            except Exception as e:
                logger.exception(
                    "Failed to send order notification",
                    extra={"order_id": order.pk, "error": str(e)},
                )
                warnings.append(f'Admin notification could not be sent: {e}')
        else:
            logger.warning("No admin recipients configured for order notifications")

        return warnings
