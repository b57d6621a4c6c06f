from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    AttributeFilterViewSet,
    AttributeValueViewSet,
    AttributeViewSet,
    BrandViewSet,
    CategoryViewSet,
    CollectionViewSet,
    DashboardStatsViewSet,
    ProductImageViewSet,
    ProductViewSet,
    SearchViewSet,
    StoreBrandViewSet,
    StoreCategoryViewSet,
    StoreCollectionViewSet,
    StoreLocationPublicViewSet,
    StoreLocationViewSet,
    StoreProductViewSet,
)

dashboard_router = DefaultRouter()
dashboard_router.register(r'products', ProductViewSet, basename='dashboard-product')
dashboard_router.register(r'categories', CategoryViewSet, basename='dashboard-category')
dashboard_router.register(r'brands', BrandViewSet, basename='dashboard-brand')
dashboard_router.register(r'collections', CollectionViewSet, basename='dashboard-collection')
dashboard_router.register(r'store-locations', StoreLocationViewSet, basename='dashboard-store-location')
dashboard_router.register(r'attributes', AttributeViewSet, basename='dashboard-attribute')
dashboard_router.register(r'attribute-values', AttributeValueViewSet, basename='dashboard-attribute-value')
dashboard_router.register(r'images', ProductImageViewSet, basename='dashboard-image')
dashboard_router.register(r'stats', DashboardStatsViewSet, basename='dashboard-stats')

store_router = DefaultRouter()
store_router.register(r'products', StoreProductViewSet, basename='store-product')
store_router.register(r'categories', StoreCategoryViewSet, basename='store-category')
store_router.register(r'brands', StoreBrandViewSet, basename='store-brand')
store_router.register(r'collections', StoreCollectionViewSet, basename='store-collection')
store_router.register(r'store-locations', StoreLocationPublicViewSet, basename='store-location')
store_router.register(r'attribute-filters', AttributeFilterViewSet, basename='store-attribute-filter')
store_router.register(r'search', SearchViewSet, basename='store-search')

urlpatterns = [
    path('dashboard/', include(dashboard_router.urls)),
    path('store/', include(store_router.urls)),
]
