from django.contrib import admin
from import_export import resources
from import_export.admin import ExportMixin

from .models import Order, OrderItem


class OrderResource(resources.ModelResource):
    """Export of orders for accounting."""

    class Meta:
        model = Order
        fields = (
            'id', 'created_at', 'status', 'payment_status', 'customer_name',
            'customer_email', 'customer_phone', 'subtotal_amount',
            'discount_amount', 'shipping_amount', 'total_amount', 'currency'
        )
        export_order = fields


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    fields = ['product', 'product_variation', 'quantity', 'unit_amount', 'discount_percentage', 'final_amount']
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(ExportMixin, admin.ModelAdmin):
    resource_class = OrderResource
    list_display = ['id', 'customer_name', 'total_amount', 'currency', 'status', 'payment_status', 'created_at']
    list_filter = ['status', 'payment_status', 'created_at']
    list_editable = ['status', 'payment_status']
    search_fields = ['customer_name', 'customer_email', 'customer_phone']
    readonly_fields = [
        'subtotal_amount', 'discount_amount', 'shipping_amount', 'total_amount',
        'currency', 'created_at', 'completed_at'
    ]
    date_hierarchy = 'created_at'
    inlines = [OrderItemInline]
