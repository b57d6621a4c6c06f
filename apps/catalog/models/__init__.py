"""
Catalog models for the flooring storefront.

Model Hierarchy:
- Category: Hierarchical categories (parent/children)
- Brand, Collection: Manufacturer and its product lines
- ProductAttribute: Named characteristics (free-text or standardized)
- AttributeValue: Allowed values of standardized attributes
- Product: Base product with price, images and attribute values
- ProductVariation: Individual SKU with its own price and attributes
- StoreLocation: Physical stores where products are available
"""

from .category import Category
from .brand import Brand, Collection
from .attribute import ProductAttribute, AttributeValue
from .product import Product, ProductAttributeValue, parse_product_attributes, split_values
from .variation import ProductVariation, VariationAttribute
from .store_location import StoreLocation, ProductStoreLocation

__all__ = [
    'Category',
    'Brand',
    'Collection',
    'ProductAttribute',
    'AttributeValue',
    'Product',
    'ProductAttributeValue',
    'ProductVariation',
    'VariationAttribute',
    'StoreLocation',
    'ProductStoreLocation',
    'parse_product_attributes',
    'split_values',
]
