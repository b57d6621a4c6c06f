"""Counters shown on the dashboard and guarded deletes."""

import logging
from typing import Dict

from django.apps import apps
from django.db.models import Count

from apps.catalog.exceptions import EntityConflict
from apps.catalog.models import (
    AttributeValue,
    Brand,
    Category,
    Collection,
    Product,
    ProductAttribute,
    StoreLocation,
)
from apps.catalog.services.images import ProductImageService, is_staging_path

logger = logging.getLogger(__name__)


class DashboardService:

    @staticmethod
    def entity_counts() -> Dict[str, int]:
        Order = apps.get_model('orders', 'Order')
        return {
            'products': Product.objects.count(),
            'activeProducts': Product.objects.filter(is_active=True).count(),
            'categories': Category.objects.count(),
            'brands': Brand.objects.count(),
            'collections': Collection.objects.count(),
            'attributes': ProductAttribute.objects.count(),
            'storeLocations': StoreLocation.objects.count(),
            'orders': Order.objects.count(),
        }

    @staticmethod
    def product_counts(group_by: str) -> Dict[str, int]:
        """Product counts keyed by category/brand/collection slug or attribute value id."""
        if group_by == 'attribute-value':
            rows = AttributeValue.objects.annotate(
                count=Count('product_values__product', distinct=True)
            ).values_list('pk', 'count')
            return {str(pk): count for pk, count in rows}

        models = {
            'category': Category,
            'brand': Brand,
            'collection': Collection,
        }
        model = models.get(group_by)
        if model is None:
            return {}
        rows = model.objects.annotate(count=Count('products')).values_list('slug', 'count')
        return dict(rows)

    @staticmethod
    def delete_brand(brand: Brand):
        """Delete a brand that no product uses, with its logo."""
        used = Product.objects.filter(brand=brand).count()
        if used:
            raise EntityConflict(
                f'Cannot delete brand: it is used by {used} product(s)'
            )

        image = brand.image
        brand.delete()
        logger.info("Deleted brand %s", brand.slug)

        if image and not is_staging_path(image):
            ProductImageService.delete_images([image])
