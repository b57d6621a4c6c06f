import logging

from django.db.models import Count
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from apps.catalog.exceptions import EntityConflict
from apps.catalog.models import (
    AttributeValue,
    Brand,
    Category,
    Collection,
    Product,
    StoreLocation,
)
from apps.catalog.services import (
    AttributeService,
    DashboardService,
    ProductImageService,
    ProductListingService,
    ProductService,
    SearchService,
    StorefrontService,
)
from .filters import ProductFilter, StoreProductFilter
from .pagination import ProductPagination
from .serializers import (
    AttributeSerializer,
    AttributeValueSerializer,
    BrandSerializer,
    CategorySerializer,
    CategoryTreeSerializer,
    CollectionSerializer,
    ImageDeleteSerializer,
    ImageUploadSerializer,
    ProductDetailSerializer,
    ProductListSerializer,
    ProductWriteSerializer,
    StoreLocationSerializer,
)

logger = logging.getLogger(__name__)


class UniqueSlugMixin:
    """Reports a duplicate slug as 409 instead of a validation error."""

    def check_slug(self, serializer):
        slug = serializer.validated_data.get('slug')
        if not slug:
            return
        model = self.get_queryset().model
        others = model.objects.filter(slug=slug)
        if serializer.instance is not None:
            others = others.exclude(pk=serializer.instance.pk)
        if others.exists():
            raise EntityConflict(f'{model.__name__} with slug "{slug}" already exists')

    def perform_create(self, serializer):
        self.check_slug(serializer)
        instance = serializer.save()
        logger.info("Created %s %s", instance._meta.model_name, instance.pk)

    def perform_update(self, serializer):
        self.check_slug(serializer)
        serializer.save()


# =============================================================================
# Dashboard (staff only, see REST_FRAMEWORK settings)
# =============================================================================

class CategoryViewSet(UniqueSlugMixin, viewsets.ModelViewSet):
    """
    API endpoint for categories.

    Deleting a category deletes its subcategories and their products.
    """
    queryset = Category.objects.select_related('parent').annotate(product_count=Count('products'))
    serializer_class = CategorySerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['parent', 'is_active']
    search_fields = ['name', 'slug']
    ordering = ['order', 'name']


class BrandViewSet(UniqueSlugMixin, viewsets.ModelViewSet):
    """
    API endpoint for brands.

    A brand still used by products cannot be deleted (409).
    """
    queryset = Brand.objects.annotate(product_count=Count('products'))
    serializer_class = BrandSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['country', 'is_active']
    search_fields = ['name', 'slug']
    ordering = ['name']

    def perform_destroy(self, instance):
        DashboardService.delete_brand(instance)


class CollectionViewSet(UniqueSlugMixin, viewsets.ModelViewSet):
    queryset = Collection.objects.select_related('brand').annotate(product_count=Count('products'))
    serializer_class = CollectionSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['brand', 'brand__slug', 'is_active']
    search_fields = ['name', 'slug', 'brand__name']
    ordering = ['name']


class StoreLocationViewSet(viewsets.ModelViewSet):
    queryset = StoreLocation.objects.all()
    serializer_class = StoreLocationSerializer
    filterset_fields = ['is_active']


class AttributeViewSet(viewsets.ModelViewSet):
    """
    API endpoint for product attributes.

    values: GET lists the allowed values with product counts,
            POST adds a value.
    """
    serializer_class = AttributeSerializer
    filter_backends = [filters.SearchFilter]
    search_fields = ['name', 'slug']

    def get_queryset(self):
        return AttributeService.attributes_with_counts()

    def perform_create(self, serializer):
        serializer.instance = AttributeService.create_attribute(serializer.validated_data)

    def perform_update(self, serializer):
        serializer.instance = AttributeService.update_attribute(
            serializer.instance, serializer.validated_data
        )

    def perform_destroy(self, instance):
        AttributeService.delete_attribute(instance)

    @action(detail=True, methods=['get', 'post'])
    def values(self, request, pk=None):
        attribute = self.get_object()

        if request.method == 'POST':
            serializer = AttributeValueSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            value = AttributeService.create_value(attribute, serializer.validated_data)
            return Response(
                AttributeValueSerializer(value).data,
                status=status.HTTP_201_CREATED,
            )

        values = AttributeValue.objects.filter(attribute=attribute).order_by('sort_order', 'value')
        serializer = AttributeValueSerializer(
            values,
            many=True,
            context={'product_counts': AttributeService.value_product_counts(attribute)},
        )
        return Response(serializer.data)


class AttributeValueViewSet(mixins.RetrieveModelMixin,
                            mixins.UpdateModelMixin,
                            mixins.DestroyModelMixin,
                            mixins.ListModelMixin,
                            viewsets.GenericViewSet):
    """
    API endpoint for single attribute values.

    Renaming a value renames it in every product; deleting removes it
    from every product first.
    """
    queryset = AttributeValue.objects.select_related('attribute')
    serializer_class = AttributeValueSerializer
    filterset_fields = ['attribute', 'is_active']

    def perform_update(self, serializer):
        serializer.instance = AttributeService.update_value(
            serializer.instance, serializer.validated_data
        )

    def destroy(self, request, *args, **kwargs):
        value = self.get_object()
        updated = AttributeService.delete_value(value)
        return Response({'success': True, 'updated_products': updated})


class ProductViewSet(viewsets.ModelViewSet):
    """
    API endpoint for products in the dashboard (active and inactive).

    list: ?search=&category=&brand=&collection=&sort=&page=&limit=
    create/update: ProductWriteSerializer payload, handled by ProductService
    """
    queryset = ProductListingService.with_variations(Product.objects.all())
    filterset_class = ProductFilter
    pagination_class = ProductPagination
    http_method_names = ['get', 'post', 'put', 'delete', 'head', 'options']

    def get_serializer_class(self):
        if self.action == 'list':
            return ProductListSerializer
        if self.action in ('create', 'update'):
            return ProductWriteSerializer
        return ProductDetailSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        product = ProductService.create_product(serializer.validated_data)
        return Response(self._detail(product.pk), status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        product = ProductService.update_product(kwargs['pk'], serializer.validated_data)
        return Response(self._detail(product.pk))

    def destroy(self, request, *args, **kwargs):
        return Response(ProductService.delete_product(kwargs['pk']))

    def _detail(self, pk):
        product = self.get_queryset().get(pk=pk)
        return ProductDetailSerializer(product, context=self.get_serializer_context()).data

    @action(detail=False, methods=['get'], url_path=r'by-slug/(?P<slug>[^/]+)')
    def by_slug(self, request, slug=None):
        product = self.get_queryset().filter(slug=slug).first()
        if product is None:
            return Response({'detail': 'Product not found'}, status=status.HTTP_404_NOT_FOUND)
        return Response(ProductDetailSerializer(product, context=self.get_serializer_context()).data)

    @action(detail=False, methods=['get'], url_path='attribute-errors')
    def attribute_errors(self, request):
        return Response({'count': AttributeService.count_products_with_attribute_errors()})


class ProductImageViewSet(viewsets.ViewSet):
    """
    Image storage for the dashboard.

    create: multipart upload -> {"filename", "url"}
    delete: {"filename", "current_images"}; skipped while still in use
    """
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    def create(self, request):
        serializer = ImageUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = ProductImageService.upload(
            data['file'],
            folder=data.get('folder') or None,
            slug=data.get('slug') or None,
            category_slug=data.get('category_slug') or None,
            product_name=data.get('product_name') or None,
            staging=data.get('staging', False),
        )
        return Response(result, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['post'], url_path='delete')
    def remove(self, request):
        serializer = ImageDeleteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = ProductImageService.delete_product_image(
            serializer.validated_data['filename'],
            serializer.validated_data.get('current_images'),
        )
        return Response(result)


class DashboardStatsViewSet(viewsets.ViewSet):
    """
    list: totals per entity
    product-counts: ?by=category|brand|collection|attribute-value
    """

    def list(self, request):
        return Response(DashboardService.entity_counts())

    @action(detail=False, methods=['get'], url_path='product-counts')
    def product_counts(self, request):
        return Response(DashboardService.product_counts(request.query_params.get('by', 'category')))


# =============================================================================
# Storefront (public)
# =============================================================================

class StoreProductViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Active products.

    list: ?search=&category=&brand=&collection=&store_location=&attributes=&sort=&page=&limit=
    retrieve: by slug, variations in display order
    """
    permission_classes = [AllowAny]
    queryset = ProductListingService.with_variations(Product.objects.filter(is_active=True))
    serializer_class = ProductListSerializer
    filterset_class = StoreProductFilter
    pagination_class = ProductPagination
    lookup_field = 'slug'
    lookup_value_regex = '[^/]+'

    def retrieve(self, request, *args, **kwargs):
        product = StorefrontService.get_product_detail(kwargs['slug'])
        return Response(ProductDetailSerializer(product, context=self.get_serializer_context()).data)

    @action(detail=False, methods=['get'])
    def recommended(self, request):
        products, meta = ProductListingService.recommended(
            request.query_params.get('page', 1),
            request.query_params.get('limit', 20),
        )
        serializer = ProductListSerializer(products, many=True, context=self.get_serializer_context())
        return Response({'products': serializer.data, 'pagination': meta})

    @action(detail=False, methods=['post'], url_path=r'(?P<product_id>[0-9]+)/view')
    def register_view(self, request, product_id=None):
        return Response({'success': StorefrontService.increment_product_view(product_id)})


class StoreCategoryViewSet(viewsets.ReadOnlyModelViewSet):
    permission_classes = [AllowAny]
    queryset = Category.objects.filter(is_active=True).select_related('parent')
    serializer_class = CategorySerializer
    lookup_field = 'slug'
    lookup_value_regex = '[^/]+'
    filterset_fields = ['parent']

    @action(detail=False, methods=['get'])
    def tree(self, request):
        roots = Category.objects.filter(is_active=True, parent__isnull=True).prefetch_related('children')
        return Response(CategoryTreeSerializer(roots, many=True).data)


class StoreBrandViewSet(viewsets.ReadOnlyModelViewSet):
    """filtered: brands with active products, ?category= narrows to a category tree."""
    permission_classes = [AllowAny]
    queryset = Brand.objects.filter(is_active=True)
    serializer_class = BrandSerializer
    lookup_field = 'slug'
    lookup_value_regex = '[^/]+'

    @action(detail=False, methods=['get'])
    def filtered(self, request):
        brands = StorefrontService.brands_in_category(request.query_params.get('category'))
        return Response(BrandSerializer(brands, many=True).data)


class StoreCollectionViewSet(viewsets.ReadOnlyModelViewSet):
    permission_classes = [AllowAny]
    queryset = Collection.objects.filter(is_active=True).select_related('brand')
    serializer_class = CollectionSerializer
    lookup_field = 'slug'
    lookup_value_regex = '[^/]+'
    filterset_fields = ['brand__slug']

    @action(detail=False, methods=['get'])
    def filtered(self, request):
        collections = StorefrontService.collections_in_category(
            request.query_params.get('category'),
            request.query_params.get('brand'),
        )
        return Response(CollectionSerializer(collections, many=True).data)


class StoreLocationPublicViewSet(viewsets.ReadOnlyModelViewSet):
    permission_classes = [AllowAny]
    queryset = StoreLocation.objects.filter(is_active=True)
    serializer_class = StoreLocationSerializer


class AttributeFilterViewSet(viewsets.ViewSet):
    """Attribute facets for ?category=&brand=&collection=&store_location=&attributes="""
    permission_classes = [AllowAny]

    def list(self, request):
        params = request.query_params
        return Response(StorefrontService.attribute_filter_values({
            'category': params.get('category'),
            'brand': params.get('brand'),
            'collection': params.get('collection'),
            'store_location': params.get('store_location'),
            'attributes': params.get('attributes'),
        }))


class SearchViewSet(viewsets.ViewSet):
    """list: suggestions for ?q=&limit=; popular: popular search terms."""
    permission_classes = [AllowAny]

    def list(self, request):
        return Response(SearchService.suggestions(
            request.query_params.get('q', ''),
            request.query_params.get('limit', 10),
        ))

    @action(detail=False, methods=['get'])
    def popular(self, request):
        return Response(SearchService.popular_terms())
