from django.urls import path, include
from rest_framework.routers import DefaultRouter

from . import auth
from .views import AssetViewSet, DashboardViewSet, ItemViewSet, TransactionViewSet

router = DefaultRouter()
router.register(r'items', ItemViewSet, basename='item')
router.register(r'assets', AssetViewSet, basename='asset')
router.register(r'transactions', TransactionViewSet, basename='transaction')
router.register(r'dashboard', DashboardViewSet, basename='dashboard')

app_name = 'api'

urlpatterns = [
    path('auth/login/', auth.login, name='auth-login'),
    path('auth/register/', auth.register, name='auth-register'),
    path('auth/me/', auth.me, name='auth-me'),
    path('', include(router.urls)),
]
