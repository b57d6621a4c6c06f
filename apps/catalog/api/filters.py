from django_filters import rest_framework as filters

from apps.catalog.constants import PRODUCT_SORT_CHOICES
from apps.catalog.models import Product
from apps.catalog.services.listing import ProductListingService


class ProductFilter(filters.FilterSet):
    """Dashboard product list: search, exact category/brand/collection, sort."""

    search = filters.CharFilter(method='filter_search')
    category = filters.CharFilter(field_name='category__slug')
    brand = filters.CharFilter(field_name='brand__slug')
    collection = filters.CharFilter(field_name='collection__slug')
    sort = filters.ChoiceFilter(choices=PRODUCT_SORT_CHOICES, method='filter_sort')

    class Meta:
        model = Product
        fields = ['search', 'category', 'brand', 'collection', 'is_active', 'is_featured', 'sort']

    def filter_search(self, queryset, name, value):
        return ProductListingService.apply_search(queryset, value)

    def filter_sort(self, queryset, name, value):
        # Ordering depends on the search term, see filter_queryset
        return queryset

    def filter_queryset(self, queryset):
        queryset = super().filter_queryset(queryset)
        return ProductListingService.apply_sort(
            queryset,
            self.form.cleaned_data.get('sort'),
            self.form.cleaned_data.get('search'),
        )


class StoreProductFilter(ProductFilter):
    """
    Storefront catalog: category includes subcategories, plus store
    location and attribute value filters.

    attributes format: attrId:valueId,valueId;attrId:valueId
    Example: ?attributes=3:10,11;7:42
    """

    category = filters.CharFilter(method='filter_category')
    store_location = filters.NumberFilter(method='filter_store_location')
    attributes = filters.CharFilter(method='filter_attributes')

    class Meta:
        model = Product
        fields = ['search', 'category', 'brand', 'collection', 'store_location', 'attributes', 'sort']

    def filter_category(self, queryset, name, value):
        return ProductListingService.apply_category(queryset, value)

    def filter_store_location(self, queryset, name, value):
        return ProductListingService.apply_store_location(queryset, int(value))

    def filter_attributes(self, queryset, name, value):
        return ProductListingService.apply_attribute_filters(queryset, value)
