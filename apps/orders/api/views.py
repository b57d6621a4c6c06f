from django.utils import timezone
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from apps.catalog.exceptions import InvalidInput
from apps.orders.cart import Cart
from apps.orders.models import Order
from apps.orders.services import OrderNotificationService, OrderService
from .serializers import CartItemInputSerializer, CheckoutSerializer, OrderSerializer


class CartViewSet(viewsets.ViewSet):
    """
    Session cart.

    list:   GET    current cart with totals
    create: POST   {"productId", "variationId", "quantity"} adds a line
    update: POST   update/ {"productId", "variationId", "quantity"} sets quantity
    remove: POST   remove/ {"productId", "variationId"}
    clear:  POST   clear/
    """
    permission_classes = [AllowAny]

    def list(self, request):
        return Response(Cart(request).as_dict())

    def create(self, request):
        serializer = CartItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        cart = Cart(request)
        cart.add(data['productId'], data['quantity'], data.get('variationId'))
        return Response(cart.as_dict(), status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['post'], url_path='update')
    def update_quantity(self, request):
        serializer = CartItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        cart = Cart(request)
        cart.update_quantity(data['productId'], data['quantity'], data.get('variationId'))
        return Response(cart.as_dict())

    @action(detail=False, methods=['post'])
    def remove(self, request):
        serializer = CartItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        cart = Cart(request)
        cart.remove(serializer.validated_data['productId'], serializer.validated_data.get('variationId'))
        return Response(cart.as_dict())

    @action(detail=False, methods=['post'])
    def clear(self, request):
        cart = Cart(request)
        cart.clear()
        return Response(cart.as_dict())


class CheckoutViewSet(viewsets.ViewSet):
    """
    create: place an order from the session cart (or the given items),
    send the emails and empty the cart.
    """
    permission_classes = [AllowAny]

    def create(self, request):
        serializer = CheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        cart = Cart(request)
        items = data.get('items')
        if not items:
            items = cart.items
        if not items:
            raise InvalidInput('Cart is empty')

        order = OrderService.create_order(data['customer'], items)
        warnings = OrderNotificationService.send_order_emails(order)
        cart.clear()

        return Response(
            {'orderId': order.pk, 'emailWarnings': warnings},
            status=status.HTTP_201_CREATED,
        )


class OrderViewSet(mixins.ListModelMixin,
                   mixins.RetrieveModelMixin,
                   mixins.UpdateModelMixin,
                   viewsets.GenericViewSet):
    """
    Dashboard orders. Only status and payment_status can be changed.
    """
    queryset = Order.objects.prefetch_related('items__product', 'items__product_variation')
    serializer_class = OrderSerializer
    filterset_fields = ['status', 'payment_status']

    def perform_update(self, serializer):
        status_value = serializer.validated_data.get('status')
        completed_at = serializer.instance.completed_at
        if status_value == 'delivered' and completed_at is None:
            completed_at = timezone.now()
        serializer.save(completed_at=completed_at)

    @action(detail=False, methods=['get'])
    def count(self, request):
        return Response({'count': Order.objects.count()})
