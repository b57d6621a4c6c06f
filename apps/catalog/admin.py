from django.contrib import admin
from django.utils.html import format_html
from import_export import resources, fields
from import_export.admin import ImportExportModelAdmin
from import_export.widgets import ForeignKeyWidget
from adminsortable2.admin import SortableAdminMixin, SortableAdminBase, SortableInlineAdminMixin
from simple_history.admin import SimpleHistoryAdmin

from .models import (
    AttributeValue,
    Brand,
    Category,
    Collection,
    Product,
    ProductAttribute,
    ProductStoreLocation,
    ProductVariation,
    StoreLocation,
    VariationAttribute,
)
from .services.images import image_url


# =============================================================================
# Import/Export Resources
# =============================================================================

class ProductResource(resources.ModelResource):
    """Resource for importing/exporting products."""

    category = fields.Field(
        column_name='category',
        attribute='category',
        widget=ForeignKeyWidget(Category, 'slug')
    )
    brand = fields.Field(
        column_name='brand',
        attribute='brand',
        widget=ForeignKeyWidget(Brand, 'slug')
    )
    collection = fields.Field(
        column_name='collection',
        attribute='collection',
        widget=ForeignKeyWidget(Collection, 'slug')
    )

    class Meta:
        model = Product
        import_id_fields = ['slug']
        fields = (
            'slug', 'name', 'sku', 'category', 'brand', 'collection',
            'price', 'discount', 'square_meters_per_pack', 'unit_of_measurement',
            'is_active', 'is_featured', 'has_variations', 'dimensions'
        )
        export_order = fields


class AttributeValueResource(resources.ModelResource):
    """Resource for importing/exporting allowed attribute values."""

    attribute = fields.Field(
        column_name='attribute',
        attribute='attribute',
        widget=ForeignKeyWidget(ProductAttribute, 'slug')
    )

    class Meta:
        model = AttributeValue
        import_id_fields = ['attribute', 'value']
        fields = ('attribute', 'value', 'slug', 'sort_order', 'is_active')


# =============================================================================
# Inlines
# =============================================================================

class AttributeValueInline(SortableInlineAdminMixin, admin.TabularInline):
    model = AttributeValue
    extra = 1
    fields = ['value', 'slug', 'is_active', 'sort_order']


class VariationAttributeInline(admin.TabularInline):
    model = VariationAttribute
    extra = 1
    fields = ['attribute_id', 'value']


class ProductVariationInline(admin.TabularInline):
    model = ProductVariation
    extra = 0
    fields = ['sku', 'price', 'discount', 'sort']
    show_change_link = True


class ProductStoreLocationInline(admin.TabularInline):
    model = ProductStoreLocation
    extra = 0
    autocomplete_fields = ['store_location']


# =============================================================================
# Model Admins
# =============================================================================

@admin.register(Category)
class CategoryAdmin(SortableAdminMixin, admin.ModelAdmin):
    list_display = ['name', 'slug', 'parent', 'product_count', 'is_active', 'order']
    list_filter = ['is_active', 'parent']
    search_fields = ['name', 'slug']
    prepopulated_fields = {'slug': ('name',)}

    def product_count(self, obj):
        return obj.products.count()
    product_count.short_description = 'Товаров'


@admin.register(Brand)
class BrandAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'country', 'logo_preview', 'is_active']
    list_filter = ['country', 'is_active']
    search_fields = ['name', 'slug']
    prepopulated_fields = {'slug': ('name',)}

    def logo_preview(self, obj):
        if obj.image:
            return format_html(
                '<img src="{}" style="max-height: 40px; max-width: 80px;" />',
                image_url(obj.image)
            )
        return '-'
    logo_preview.short_description = 'Логотип'


@admin.register(Collection)
class CollectionAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'brand', 'is_active']
    list_filter = ['brand', 'is_active']
    search_fields = ['name', 'slug', 'brand__name']
    autocomplete_fields = ['brand']
    prepopulated_fields = {'slug': ('name',)}


@admin.register(StoreLocation)
class StoreLocationAdmin(SortableAdminMixin, admin.ModelAdmin):
    list_display = ['address', 'opening_hours', 'is_active', 'order']
    search_fields = ['address']


@admin.register(ProductAttribute)
class ProductAttributeAdmin(SortableAdminBase, admin.ModelAdmin):
    list_display = ['name', 'slug', 'value_type', 'allow_multiple_values', 'value_count']
    list_filter = ['value_type']
    search_fields = ['name', 'slug']
    prepopulated_fields = {'slug': ('name',)}
    inlines = [AttributeValueInline]

    def value_count(self, obj):
        return obj.values.count()
    value_count.short_description = 'Значений'


@admin.register(AttributeValue)
class AttributeValueAdmin(ImportExportModelAdmin):
    resource_class = AttributeValueResource
    list_display = ['value', 'attribute', 'sort_order', 'is_active']
    list_filter = ['attribute', 'is_active']
    list_editable = ['sort_order', 'is_active']
    search_fields = ['value', 'attribute__name']
    autocomplete_fields = ['attribute']


@admin.register(Product)
class ProductAdmin(ImportExportModelAdmin, SimpleHistoryAdmin):
    resource_class = ProductResource
    list_display = [
        'name', 'slug', 'category', 'brand', 'price', 'discount',
        'variation_count', 'is_active', 'is_featured', 'primary_image_preview'
    ]
    list_filter = ['is_active', 'is_featured', 'has_variations', 'category', 'brand']
    list_editable = ['price', 'is_active', 'is_featured']
    search_fields = ['name', 'slug', 'sku', 'description']
    autocomplete_fields = ['category', 'brand', 'collection']
    prepopulated_fields = {'slug': ('name',)}
    readonly_fields = ['view_count', 'created_at']
    inlines = [ProductVariationInline, ProductStoreLocationInline]
    list_per_page = 50

    fieldsets = (
        (None, {
            'fields': ('name', 'slug', 'sku', 'category', 'brand', 'collection')
        }),
        ('Цена', {
            'fields': ('price', 'discount', 'square_meters_per_pack', 'unit_of_measurement')
        }),
        ('Описание', {
            'fields': ('description', 'important_note', 'dimensions', 'tags', 'product_attributes', 'images')
        }),
        ('Статус', {
            'fields': ('is_active', 'is_featured', 'has_variations')
        }),
        ('Информация', {
            'fields': ('view_count', 'created_at'),
            'classes': ('collapse',)
        }),
    )

    actions = ['activate_products', 'deactivate_products']

    def primary_image_preview(self, obj):
        path = obj.primary_image
        if path:
            return format_html(
                '<img src="{}" style="max-height: 40px; max-width: 60px;" />',
                image_url(path)
            )
        return '-'
    primary_image_preview.short_description = 'Изображение'

    @admin.action(description='Активировать выбранные товары')
    def activate_products(self, request, queryset):
        count = queryset.update(is_active=True)
        self.message_user(request, f'{count} товаров активировано.')

    @admin.action(description='Деактивировать выбранные товары')
    def deactivate_products(self, request, queryset):
        count = queryset.update(is_active=False)
        self.message_user(request, f'{count} товаров деактивировано.')


@admin.register(ProductVariation)
class ProductVariationAdmin(admin.ModelAdmin):
    list_display = ['sku', 'product', 'price', 'discount', 'sort']
    search_fields = ['sku', 'product__name']
    autocomplete_fields = ['product']
    inlines = [VariationAttributeInline]


# =============================================================================
# Admin Site Configuration
# =============================================================================

admin.site.site_header = 'BFloor Admin'
admin.site.site_title = 'BFloor'
admin.site.index_title = 'Панель управления'
