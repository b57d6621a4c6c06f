"""
Read side of the storefront: product pages, view counter, attribute
filter facets and search suggestions.
"""

import logging
from typing import Dict, List, Optional

from django.db import DatabaseError
from django.db.models import Count, F, Q

from apps.catalog.constants import STANDARDIZED_VALUE_TYPES
from apps.catalog.exceptions import EntityNotFound
from apps.catalog.models import (
    Brand,
    Category,
    Collection,
    Product,
    ProductAttribute,
    ProductAttributeValue,
)
from apps.catalog.services.listing import (
    ProductListingService,
    normalize_search,
    parse_attribute_filters,
)
from apps.catalog.services.variation_sort import sort_variations_for_display

logger = logging.getLogger(__name__)


class StorefrontService:
    """Queries backing the public catalog pages."""

    @staticmethod
    def get_product_detail(slug: str) -> Product:
        """Active product by slug with variations in display order."""
        product = ProductListingService.with_variations(
            Product.objects.filter(slug=slug, is_active=True)
        ).first()
        if product is None:
            raise EntityNotFound('Product not found')
        product.sorted_variations = sort_variations_for_display(product.variations.all())
        return product

    @staticmethod
    def increment_product_view(product_id) -> bool:
        """Add one view to an active product. Never raises."""
        try:
            updated = Product.objects.filter(pk=product_id, is_active=True).update(
                view_count=F('view_count') + 1
            )
        except (DatabaseError, ValueError, TypeError):
            logger.warning("Could not increment views of product %s", product_id, exc_info=True)
            return False
        return bool(updated)

    @staticmethod
    def get_active_by_slug(model, slug: str, label: str):
        obj = model.objects.filter(slug=slug, is_active=True).first()
        if obj is None:
            raise EntityNotFound(f'{label} not found')
        return obj

    @staticmethod
    def brands_in_category(category_slug: Optional[str] = None):
        """Active brands with at least one active product (in the category tree)."""
        products = Product.objects.filter(is_active=True)
        products = ProductListingService.apply_category(products, category_slug)
        return Brand.objects.filter(
            is_active=True,
            pk__in=products.values('brand_id'),
        ).order_by('name')

    @staticmethod
    def collections_in_category(category_slug: Optional[str] = None, brand_slug: Optional[str] = None):
        products = Product.objects.filter(is_active=True)
        products = ProductListingService.apply_category(products, category_slug)
        if brand_slug:
            products = products.filter(brand__slug=brand_slug)
        return Collection.objects.filter(
            is_active=True,
            pk__in=products.values('collection_id'),
        ).select_related('brand').order_by('name')

    @staticmethod
    def attribute_filter_values(context: Dict) -> List[Dict]:
        """
        Standardized attributes with their active values and how many
        products in the current context carry each value.

        The selection of an attribute does not narrow its own counts, so
        alternative values of that attribute stay visible.
        """
        base = Product.objects.filter(is_active=True)
        base = ProductListingService.apply_category(base, context.get('category'))
        if context.get('brand'):
            base = base.filter(brand__slug=context['brand'])
        if context.get('collection'):
            base = base.filter(collection__slug=context['collection'])
        base = ProductListingService.apply_store_location(base, context.get('store_location'))
        selected = parse_attribute_filters(context.get('attributes'))

        result = []
        attributes = ProductAttribute.objects.filter(
            value_type__in=STANDARDIZED_VALUE_TYPES
        ).prefetch_related('values').order_by('name')

        for attribute in attributes:
            others = {
                key: ids for key, ids in selected.items()
                if key not in attribute.keys()
            }
            products = ProductListingService.apply_attribute_filters(base, others)
            counts = dict(
                ProductAttributeValue.objects.filter(
                    attribute=attribute,
                    product__in=products.values('pk'),
                )
                .values('value_id')
                .annotate(count=Count('product', distinct=True))
                .values_list('value_id', 'count')
            )

            values = [
                {
                    'id': value.pk,
                    'value': value.value,
                    'slug': value.slug,
                    'count': counts.get(value.pk, 0),
                }
                for value in attribute.values.all()
                if value.is_active
            ]
            if not values:
                continue

            result.append({
                'attributeId': str(attribute.pk),
                'name': attribute.name,
                'slug': attribute.slug,
                'allowMultipleValues': attribute.allow_multiple_values,
                'values': values,
            })
        return result


class SearchService:
    """Autocomplete suggestions for the storefront search box."""

    @staticmethod
    def suggestions(query, limit: int = 10) -> List[Dict]:
        """
        Categories, brands and collections first (limit // 2 each), then
        products; deduplicated case-insensitively and cut to limit.
        """
        term = normalize_search(query)
        if not term:
            return []

        try:
            limit = max(int(limit), 1)
        except (TypeError, ValueError):
            limit = 10
        group_limit = max(limit // 2, 1)

        match = Q(name__icontains=term)
        groups = [
            ('category', Category.objects.filter(match, is_active=True).order_by('order', 'name')[:group_limit]),
            ('brand', Brand.objects.filter(match, is_active=True).order_by('name')[:group_limit]),
            ('collection', Collection.objects.filter(match, is_active=True).order_by('name')[:group_limit]),
            ('product', ProductListingService.apply_sort(
                ProductListingService.apply_search(Product.objects.filter(is_active=True), term),
                search=term,
            )[:limit]),
        ]

        seen = set()
        suggestions = []
        for kind, queryset in groups:
            for obj in queryset:
                key = obj.name.strip().lower()
                if key in seen:
                    continue
                seen.add(key)
                suggestions.append({'type': kind, 'text': obj.name, 'slug': obj.slug})
        return suggestions[:limit]

    @staticmethod
    def popular_terms(limit: int = 8) -> List[str]:
        """Names of active categories, in menu order."""
        return list(
            Category.objects.filter(is_active=True)
            .order_by('order', 'name')
            .values_list('name', flat=True)[:limit]
        )
