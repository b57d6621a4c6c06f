"""
Product queries for the dashboard and storefront lists:
search, filters, sorting and pagination.
"""

import math
import re
from typing import Dict, List, Optional, Tuple

from django.db.models import Case, Exists, F, IntegerField, OuterRef, Prefetch, Q, Value, When
from django.db.models.functions import Lower, StrIndex

from apps.catalog.constants import MIN_SEARCH_LENGTH
from apps.catalog.exceptions import InvalidInput
from apps.catalog.models import (
    Category,
    Product,
    ProductAttributeValue,
    ProductVariation,
)

SORT_FIELDS = {
    'name': ('name', 'id'),
    'price-asc': ('price', 'name'),
    'price-desc': ('-price', 'name'),
    'newest': ('-created_at', '-id'),
    'oldest': ('created_at', 'id'),
}


def normalize_search(raw) -> Optional[str]:
    """Trim and collapse whitespace; None when shorter than the minimum."""
    if not raw:
        return None
    term = re.sub(r'\s+', ' ', str(raw)).strip()
    if len(term) < MIN_SEARCH_LENGTH:
        return None
    return term


def parse_attribute_filters(raw) -> Dict[str, List[int]]:
    """
    Parse "attrId:valueId,valueId;attrId:valueId" into {attrId: [valueIds]}.
    A dict is accepted as is.
    """
    if not raw:
        return {}
    if isinstance(raw, dict):
        items = raw.items()
    else:
        items = []
        for group in str(raw).split(';'):
            if ':' not in group:
                continue
            attribute_id, values = group.split(':', 1)
            items.append((attribute_id, values.split(',')))

    filters = {}
    for attribute_id, values in items:
        attribute_id = str(attribute_id).strip()
        if isinstance(values, (str, int)):
            values = str(values).split(',')
        ids = []
        for value in values:
            try:
                ids.append(int(str(value).strip()))
            except ValueError:
                continue
        if attribute_id and ids:
            filters[attribute_id] = ids
    return filters


class ProductListingService:
    """Builds product querysets for listings."""

    @staticmethod
    def with_variations(queryset):
        return queryset.select_related('category', 'brand', 'collection').prefetch_related(
            Prefetch(
                'variations',
                queryset=ProductVariation.objects.order_by('sort', 'id').prefetch_related('attributes'),
            ),
            'store_locations',
        )

    @staticmethod
    def apply_search(queryset, term: Optional[str]):
        term = normalize_search(term)
        if not term:
            return queryset
        return queryset.filter(
            Q(name__icontains=term)
            | Q(slug__icontains=term)
            | Q(sku__icontains=term)
            | Q(brand__slug__icontains=term)
            | Q(brand__name__icontains=term)
            | Q(collection__slug__icontains=term)
            | Q(collection__name__icontains=term)
            | Q(category__slug__icontains=term)
            | Q(category__name__icontains=term)
        )

    @staticmethod
    def apply_sort(queryset, sort: Optional[str] = None, search: Optional[str] = None):
        """
        Explicit sorts win; a search without one ranks by where the term
        appears in the name (name matches first, earlier is better).
        """
        if sort in SORT_FIELDS:
            return queryset.order_by(*SORT_FIELDS[sort])

        term = normalize_search(search)
        if term:
            return queryset.annotate(
                match_position=StrIndex(Lower('name'), Lower(Value(term))),
            ).annotate(
                relevance=Case(
                    When(match_position=0, then=Value(1000000)),
                    default=F('match_position'),
                    output_field=IntegerField(),
                ),
            ).order_by('relevance', 'name', 'id')

        return queryset.order_by(*SORT_FIELDS['name'])

    @staticmethod
    def apply_category(queryset, category):
        """Filter by a category (instance or slug) including its descendants."""
        if not category:
            return queryset
        if not isinstance(category, Category):
            category = Category.objects.filter(slug=category).first()
            if category is None:
                return queryset.none()
        return queryset.filter(category_id__in=category.get_tree_ids())

    @staticmethod
    def apply_attribute_filters(queryset, filters: Dict[str, List[int]]):
        """AND across attributes, OR across the values of one attribute."""
        for attribute_id, value_ids in parse_attribute_filters(filters).items():
            if attribute_id.isdigit():
                attribute = Q(attribute_id=int(attribute_id))
            else:
                attribute = Q(attribute__slug=attribute_id)
            queryset = queryset.filter(Exists(
                ProductAttributeValue.objects.filter(
                    attribute,
                    product=OuterRef('pk'),
                    value_id__in=value_ids,
                )
            ))
        return queryset

    @staticmethod
    def apply_store_location(queryset, store_location):
        if store_location is None or store_location == '':
            return queryset
        try:
            store_location = int(store_location)
        except (TypeError, ValueError):
            raise InvalidInput('store_location must be a number')
        return queryset.filter(store_locations__pk=store_location)

    @staticmethod
    def paginate(queryset, page=None, limit=None) -> Tuple[List, Dict]:
        """
        Slice a queryset into a page.

        Returns:
            (items, {"page", "limit", "totalCount", "totalPages",
                     "hasNextPage", "hasPreviousPage"})
            Without page/limit everything is returned as one page.
        """
        total = queryset.count()
        try:
            page = max(int(page), 1) if page else None
            limit = max(int(limit), 1) if limit else None
        except (TypeError, ValueError):
            page = limit = None

        if not page or not limit:
            items = list(queryset)
            return items, {
                'page': 1,
                'limit': total,
                'totalCount': total,
                'totalPages': 1,
                'hasNextPage': False,
                'hasPreviousPage': False,
            }

        offset = (page - 1) * limit
        items = list(queryset[offset:offset + limit])
        total_pages = math.ceil(total / limit) if total else 0
        return items, {
            'page': page,
            'limit': limit,
            'totalCount': total,
            'totalPages': total_pages,
            'hasNextPage': page < total_pages,
            'hasPreviousPage': page > 1,
        }

    @staticmethod
    def recommended(page=1, limit=20) -> Tuple[List[Product], Dict]:
        """Active featured products; fetches one extra row to know if more exist."""
        try:
            page = max(int(page or 1), 1)
            limit = max(int(limit or 20), 1)
        except (TypeError, ValueError):
            page, limit = 1, 20

        offset = (page - 1) * limit
        queryset = ProductListingService.with_variations(
            Product.objects.filter(is_active=True, is_featured=True).order_by('name', 'id')
        )
        rows = list(queryset[offset:offset + limit + 1])
        return rows[:limit], {
            'page': page,
            'limit': limit,
            'hasNextPage': len(rows) > limit,
            'hasPreviousPage': page > 1,
        }
