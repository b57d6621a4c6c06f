"""
Session cart.

Stored under settings.CART_SESSION_KEY as
{"items": [{productId, variationId, quantity, addedAt, productName,
productSlug, price, discount, attributes, images}], "lastUpdated": ms}.
Prices are kept as strings so the session stays JSON serializable.
"""

import logging
import time
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

from django.conf import settings

from apps.catalog.exceptions import EntityNotFound, InvalidInput
from apps.catalog.models import Product, ProductVariation

logger = logging.getLogger(__name__)


def _now_ms():
    return int(time.time() * 1000)


def _decimal(value) -> Decimal:
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal('0')
    return result if result.is_finite() else Decimal('0')


def _quantity(value) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


class Cart:
    """Cart kept in the Django session."""

    def __init__(self, request):
        self.session = request.session
        self.key = settings.CART_SESSION_KEY
        self.data = self._load()

    def _load(self) -> Dict:
        stored = self.session.get(self.key)
        if (
            isinstance(stored, dict)
            and isinstance(stored.get('items'), list)
            and all(isinstance(item, dict) for item in stored['items'])
        ):
            return stored
        if stored is not None:
            logger.warning("Discarding unreadable cart data in session")
        return {'items': [], 'lastUpdated': _now_ms()}

    def save(self):
        self.data['lastUpdated'] = _now_ms()
        self.session[self.key] = self.data
        self.session.modified = True

    @property
    def items(self) -> List[Dict]:
        return self.data['items']

    @staticmethod
    def _ids(product_id, variation_id):
        try:
            product_id = int(product_id)
            variation_id = int(variation_id) if variation_id else None
        except (TypeError, ValueError):
            raise InvalidInput('Invalid product or variation id')
        return product_id, variation_id

    @staticmethod
    def _same_line(item, product_id, variation_id) -> bool:
        return item.get('productId') == product_id and item.get('variationId') == variation_id

    def _find(self, product_id, variation_id=None) -> Optional[Dict]:
        for item in self.items:
            if self._same_line(item, product_id, variation_id):
                return item
        return None

    def add(self, product_id, quantity=1, variation_id=None) -> Dict:
        """
        Add a product (or one of its variations) to the cart.
        An existing line for the same product and variation gets the quantity added.
        """
        try:
            quantity = int(quantity)
        except (TypeError, ValueError):
            raise InvalidInput('Quantity must be a positive integer')
        if quantity <= 0:
            raise InvalidInput('Quantity must be a positive integer')

        product_id, variation_id = self._ids(product_id, variation_id)
        product = Product.objects.filter(pk=product_id, is_active=True).first()
        if product is None:
            raise EntityNotFound('Product not found')

        variation = None
        if variation_id and not product.has_variations:
            raise InvalidInput('This product has no variations')
        if variation_id:
            variation = ProductVariation.objects.filter(pk=variation_id, product=product).first()
            if variation is None:
                raise InvalidInput('Variation does not belong to this product')
        elif product.has_variations and product.variations.exists():
            raise InvalidInput('Please select a variation of this product')

        variation_id = variation.pk if variation else None
        existing = self._find(product.pk, variation_id)
        if existing is not None:
            existing['quantity'] += quantity
            self.save()
            return existing

        source = variation or product
        item = {
            'productId': product.pk,
            'variationId': variation_id,
            'quantity': quantity,
            'addedAt': _now_ms(),
            'productName': product.name,
            'productSlug': product.slug,
            'price': str(source.price),
            'discount': source.discount,
            'attributes': variation.get_attribute_map() if variation else {},
            'images': product.image_list[:1],
            'unitOfMeasurement': product.unit_of_measurement,
        }
        self.items.append(item)
        self.save()
        logger.debug("Added product %s (variation %s) to cart", product.pk, variation_id)
        return item

    def remove(self, product_id, variation_id=None) -> bool:
        product_id, variation_id = self._ids(product_id, variation_id)
        before = len(self.items)
        self.data['items'] = [
            item for item in self.items
            if not self._same_line(item, product_id, variation_id)
        ]
        removed = len(self.items) != before
        if removed:
            self.save()
        return removed

    def update_quantity(self, product_id, quantity, variation_id=None) -> Optional[Dict]:
        """Set a line's quantity; zero or less removes the line."""
        try:
            quantity = int(quantity)
        except (TypeError, ValueError):
            raise InvalidInput('Quantity must be an integer')

        product_id, variation_id = self._ids(product_id, variation_id)
        if quantity <= 0:
            self.remove(product_id, variation_id)
            return None

        item = self._find(product_id, variation_id)
        if item is None:
            raise EntityNotFound('Item is not in the cart')
        item['quantity'] = quantity
        self.save()
        return item

    def clear(self):
        self.data = {'items': [], 'lastUpdated': _now_ms()}
        self.save()

    @property
    def item_count(self) -> int:
        return sum(_quantity(item.get('quantity')) for item in self.items)

    def totals(self) -> Dict[str, Decimal]:
        subtotal = Decimal('0')
        discount_total = Decimal('0')
        for item in self.items:
            line = _decimal(item.get('price')) * _quantity(item.get('quantity'))
            subtotal += line
            if item.get('discount'):
                discount_total += line * _decimal(item['discount']) / Decimal('100')
        subtotal = subtotal.quantize(Decimal('0.01'))
        discount_total = discount_total.quantize(Decimal('0.01'))
        return {
            'subtotal': subtotal,
            'discount': discount_total,
            'total': subtotal - discount_total,
        }

    def as_dict(self) -> Dict:
        totals = self.totals()
        return {
            'items': self.items,
            'lastUpdated': self.data.get('lastUpdated'),
            'itemCount': self.item_count,
            'subtotal': str(totals['subtotal']),
            'discount': str(totals['discount']),
            'total': str(totals['total']),
        }
