from django.urls import path, include
from rest_framework.routers import SimpleRouter

from .views import CartViewSet, CheckoutViewSet, OrderViewSet

store_router = SimpleRouter()
store_router.register(r'cart', CartViewSet, basename='store-cart')
store_router.register(r'checkout', CheckoutViewSet, basename='store-checkout')

dashboard_router = SimpleRouter()
dashboard_router.register(r'orders', OrderViewSet, basename='dashboard-order')

urlpatterns = [
    path('store/', include(store_router.urls)),
    path('dashboard/', include(dashboard_router.urls)),
]
