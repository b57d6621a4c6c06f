from .serializers import (
    AttributeSerializer,
    AttributeValueSerializer,
    BrandSerializer,
    CategorySerializer,
    CollectionSerializer,
    ProductDetailSerializer,
    ProductListSerializer,
    ProductWriteSerializer,
    StoreLocationSerializer,
)

__all__ = [
    'AttributeSerializer',
    'AttributeValueSerializer',
    'BrandSerializer',
    'CategorySerializer',
    'CollectionSerializer',
    'ProductDetailSerializer',
    'ProductListSerializer',
    'ProductWriteSerializer',
    'StoreLocationSerializer',
]
