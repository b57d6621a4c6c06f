from .attributes import AttributeService
from .dashboard import DashboardService
from .images import ProductImageService
from .listing import ProductListingService
from .products import ProductService
from .storefront import SearchService, StorefrontService
from .variation_sort import sort_variations_for_display

__all__ = [
    'AttributeService',
    'DashboardService',
    'ProductImageService',
    'ProductListingService',
    'ProductService',
    'SearchService',
    'StorefrontService',
    'sort_variations_for_display',
]
