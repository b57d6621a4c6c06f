from rest_framework import serializers

from apps.catalog.constants import PRODUCT_TAGS, VALUE_TYPE_CHOICES
from apps.catalog.models import (
    AttributeValue,
    Brand,
    Category,
    Collection,
    Product,
    ProductAttribute,
    ProductVariation,
    StoreLocation,
)
from apps.catalog.services.images import image_url


# =============================================================================
# Catalog structure
# =============================================================================

class CategorySerializer(serializers.ModelSerializer):
    parent_slug = serializers.CharField(source='parent.slug', read_only=True, default=None)
    image_url = serializers.SerializerMethodField()
    full_path = serializers.CharField(read_only=True)
    level = serializers.IntegerField(read_only=True)
    product_count = serializers.IntegerField(read_only=True, required=False)

    class Meta:
        model = Category
        fields = [
            'id', 'name', 'slug', 'parent', 'parent_slug', 'image', 'image_url',
            'is_active', 'order', 'full_path', 'level', 'product_count'
        ]
        # Duplicate slugs are reported as conflicts by the view
        extra_kwargs = {'slug': {'validators': [], 'required': True}}

    def get_image_url(self, obj):
        return image_url(obj.image) or None

    def validate(self, attrs):
        parent = attrs.get('parent')
        if parent is not None and self.instance is not None:
            if parent.pk == self.instance.pk or parent.pk in self.instance.get_tree_ids():
                raise serializers.ValidationError({'parent': 'A category cannot be its own ancestor'})
        return attrs


class CategoryTreeSerializer(serializers.ModelSerializer):
    children = serializers.SerializerMethodField()

    class Meta:
        model = Category
        fields = ['id', 'name', 'slug', 'image', 'order', 'children']

    def get_children(self, obj):
        children = [child for child in obj.children.all() if child.is_active]
        return CategoryTreeSerializer(children, many=True, context=self.context).data


class BrandSerializer(serializers.ModelSerializer):
    image_url = serializers.SerializerMethodField()
    product_count = serializers.IntegerField(read_only=True, required=False)

    class Meta:
        model = Brand
        fields = ['id', 'name', 'slug', 'image', 'image_url', 'country', 'is_active', 'product_count']
        extra_kwargs = {'slug': {'validators': [], 'required': True}}

    def get_image_url(self, obj):
        return image_url(obj.image) or None


class CollectionSerializer(serializers.ModelSerializer):
    brand_name = serializers.CharField(source='brand.name', read_only=True)
    brand_slug = serializers.CharField(source='brand.slug', read_only=True)
    product_count = serializers.IntegerField(read_only=True, required=False)

    class Meta:
        model = Collection
        fields = ['id', 'name', 'slug', 'brand', 'brand_name', 'brand_slug', 'is_active', 'product_count']
        extra_kwargs = {'slug': {'validators': [], 'required': True}}


class StoreLocationSerializer(serializers.ModelSerializer):
    class Meta:
        model = StoreLocation
        fields = ['id', 'address', 'description', 'opening_hours', 'is_active', 'order', 'created_at']
        read_only_fields = ['created_at']

    def validate_address(self, value):
        if not value.strip():
            raise serializers.ValidationError('Address is required')
        return value.strip()


# =============================================================================
# Attributes
# =============================================================================

class AttributeValueSerializer(serializers.ModelSerializer):
    product_count = serializers.SerializerMethodField()

    class Meta:
        model = AttributeValue
        fields = ['id', 'attribute', 'value', 'slug', 'sort_order', 'is_active', 'product_count', 'created_at']
        read_only_fields = ['attribute', 'created_at']
        # Uniqueness per attribute is checked by AttributeService (409)
        validators = []

    def get_product_count(self, obj):
        counts = self.context.get('product_counts')
        if counts is None:
            return None
        return counts.get(obj.pk, 0)


class AttributeSerializer(serializers.ModelSerializer):
    product_count = serializers.IntegerField(read_only=True, required=False)
    value_count = serializers.IntegerField(read_only=True, required=False)
    value_type = serializers.ChoiceField(choices=VALUE_TYPE_CHOICES, required=False)

    class Meta:
        model = ProductAttribute
        fields = ['id', 'name', 'slug', 'value_type', 'allow_multiple_values', 'product_count', 'value_count']
        extra_kwargs = {
            'name': {'validators': []},
            'slug': {'validators': []},
        }


# =============================================================================
# Products
# =============================================================================

class AttributeEntrySerializer(serializers.Serializer):
    attributeId = serializers.CharField()
    value = serializers.CharField(allow_blank=True)


class ProductVariationSerializer(serializers.ModelSerializer):
    discounted_price = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    attributes = serializers.SerializerMethodField()

    class Meta:
        model = ProductVariation
        fields = ['id', 'sku', 'price', 'discount', 'discounted_price', 'sort', 'attributes']

    def get_attributes(self, obj):
        return obj.get_attribute_list()


class ProductListSerializer(serializers.ModelSerializer):
    """Product cards for catalog and dashboard lists."""
    category = serializers.CharField(source='category.slug', read_only=True, default=None)
    category_name = serializers.CharField(source='category.name', read_only=True, default=None)
    brand = serializers.CharField(source='brand.slug', read_only=True, default=None)
    brand_name = serializers.CharField(source='brand.name', read_only=True, default=None)
    collection = serializers.CharField(source='collection.slug', read_only=True, default=None)
    collection_name = serializers.CharField(source='collection.name', read_only=True, default=None)
    images = serializers.ListField(source='image_list', read_only=True)
    image_urls = serializers.SerializerMethodField()
    discounted_price = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    variations = ProductVariationSerializer(many=True, read_only=True)

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'slug', 'sku', 'category', 'category_name',
            'brand', 'brand_name', 'collection', 'collection_name',
            'images', 'image_urls', 'price', 'discount', 'discounted_price',
            'square_meters_per_pack', 'unit_of_measurement', 'tags',
            'is_active', 'is_featured', 'has_variations', 'view_count',
            'created_at', 'variations'
        ]

    def get_image_urls(self, obj):
        return [image_url(path) for path in obj.image_list]


class ProductDetailSerializer(ProductListSerializer):
    """Full product with attributes, store locations and ordered variations."""
    attributes = serializers.SerializerMethodField()
    brand_detail = BrandSerializer(source='brand', read_only=True)
    store_locations = StoreLocationSerializer(many=True, read_only=True)
    variations = serializers.SerializerMethodField()

    class Meta(ProductListSerializer.Meta):
        fields = ProductListSerializer.Meta.fields + [
            'description', 'important_note', 'dimensions', 'attributes',
            'brand_detail', 'store_locations'
        ]

    def get_attributes(self, obj):
        return obj.get_attribute_list()

    def get_variations(self, obj):
        variations = getattr(obj, 'sorted_variations', None)
        if variations is None:
            variations = obj.variations.all()
        return ProductVariationSerializer(variations, many=True, context=self.context).data


class VariationInputSerializer(serializers.Serializer):
    id = serializers.IntegerField(required=False, allow_null=True)
    sku = serializers.CharField(required=False, allow_blank=True, default='')
    price = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    discount = serializers.IntegerField(required=False, allow_null=True)
    sort = serializers.IntegerField(required=False, allow_null=True)
    attributes = AttributeEntrySerializer(many=True, required=False)


class ProductWriteSerializer(serializers.Serializer):
    """
    Dashboard product form. Required fields and business rules are checked
    by ProductService so that the messages match for every caller.

    category/brand/collection are slugs: "" keeps the current value, null
    or a missing key clears it.
    """
    name = serializers.CharField(required=False, allow_blank=True)
    slug = serializers.CharField(required=False, allow_blank=True)
    sku = serializers.CharField(required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    important_note = serializers.CharField(required=False, allow_blank=True)
    tags = serializers.ListField(
        child=serializers.ChoiceField(choices=PRODUCT_TAGS),
        required=False,
    )
    price = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    discount = serializers.IntegerField(required=False, allow_null=True)
    square_meters_per_pack = serializers.DecimalField(
        max_digits=10, decimal_places=3, required=False, allow_null=True
    )
    unit_of_measurement = serializers.CharField(required=False, allow_blank=True)
    category = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    brand = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    collection = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    dimensions = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    is_active = serializers.BooleanField(required=False, default=True)
    is_featured = serializers.BooleanField(required=False, default=False)
    has_variations = serializers.BooleanField(required=False, default=False)
    images = serializers.JSONField(required=False)
    attributes = AttributeEntrySerializer(many=True, required=False)
    variations = VariationInputSerializer(many=True, required=False)
    store_location_ids = serializers.ListField(child=serializers.IntegerField(), required=False)


# =============================================================================
# Images
# =============================================================================

class ImageUploadSerializer(serializers.Serializer):
    file = serializers.FileField()
    folder = serializers.CharField(required=False, allow_blank=True)
    slug = serializers.CharField(required=False, allow_blank=True)
    category_slug = serializers.CharField(required=False, allow_blank=True)
    product_name = serializers.CharField(required=False, allow_blank=True)
    staging = serializers.BooleanField(required=False, default=False)


class ImageDeleteSerializer(serializers.Serializer):
    filename = serializers.CharField()
    current_images = serializers.JSONField(required=False)
