from rest_framework import serializers

from apps.orders.models import Order, OrderItem


class CartItemInputSerializer(serializers.Serializer):
    productId = serializers.IntegerField()
    variationId = serializers.IntegerField(required=False, allow_null=True)
    quantity = serializers.IntegerField(required=False, default=1)


class CustomerInfoSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    email = serializers.EmailField(required=False, allow_blank=True, default='')
    phone = serializers.CharField(max_length=50)
    address = serializers.CharField(required=False, allow_blank=True, default='')
    shipping_method = serializers.CharField(required=False, allow_blank=True, default='')
    payment_method = serializers.CharField(required=False, allow_blank=True, default='')
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class CheckoutSerializer(serializers.Serializer):
    """Customer info plus optional explicit items; the session cart is used otherwise."""
    customer = CustomerInfoSerializer()
    items = CartItemInputSerializer(many=True, required=False)


class OrderItemSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    product_slug = serializers.CharField(source='product.slug', read_only=True)
    sku = serializers.CharField(source='product_variation.sku', read_only=True, default=None)

    class Meta:
        model = OrderItem
        fields = [
            'id', 'product', 'product_name', 'product_slug', 'product_variation', 'sku',
            'quantity', 'unit_amount', 'discount_percentage', 'final_amount', 'attributes'
        ]


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    item_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'status', 'payment_status', 'customer_name', 'customer_email',
            'customer_phone', 'shipping_address', 'subtotal_amount', 'discount_amount',
            'shipping_amount', 'total_amount', 'currency', 'payment_method',
            'shipping_method', 'notes', 'created_at', 'completed_at', 'item_count', 'items'
        ]
        read_only_fields = [
            'customer_name', 'customer_email', 'customer_phone', 'shipping_address',
            'subtotal_amount', 'discount_amount', 'shipping_amount', 'total_amount',
            'currency', 'payment_method', 'shipping_method', 'notes',
            'created_at', 'completed_at'
        ]
