"""
Django signals for the catalog app.
Keeps the product/attribute value junction table in step with
Product.product_attributes, whoever saves the product.
"""

from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Product
from .services.attributes import AttributeService


@receiver(post_save, sender=Product)
def sync_attribute_values(sender, instance, raw=False, update_fields=None, **kwargs):
    """Rebuild ProductAttributeValue rows after a product is saved."""
    if raw:
        # Fixture loading, related rows come from the fixture
        return
    if update_fields is not None and 'product_attributes' not in update_fields:
        return
    AttributeService.sync_product_attribute_values(instance)
