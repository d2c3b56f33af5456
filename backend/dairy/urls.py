"""URL routing for the dairy API."""

from django.urls import include, path
from rest_framework.routers import DefaultRouter
from rest_framework_nested import routers

from .views.activities import ActivityViewSet
from .views.auth import (
    ChangePasswordView,
    LoginView,
    ProfileView,
    RegisterView,
    UserDetailView,
    UserListView,
)
from .views.buyers import BuyerMilkPurchaseViewSet, BuyerPaymentHistoryViewSet, BuyerViewSet
from .views.dashboard import (
    daily_profit_loss,
    dashboard_summary,
    financial_overview,
    milk_analytics,
    monthly_trends,
    outstanding_balances_report,
    payment_analytics,
)
from .views.expenses import ExpenseViewSet
from .views.income import IncomeViewSet
from .views.milk_distribution import MilkDistributionViewSet
from .views.milk_store import MilkStoreViewSet
from .views.payments import BuyerPaymentViewSet, SellerPaymentViewSet
from .views.sellers import SellerMilkSaleViewSet, SellerPaymentHistoryViewSet, SellerViewSet

router = DefaultRouter()
router.register(r'buyers', BuyerViewSet, basename='buyer')
router.register(r'sellers', SellerViewSet, basename='seller')
router.register(r'milk-store', MilkStoreViewSet, basename='milk-store')
router.register(r'milk-distribution', MilkDistributionViewSet, basename='milk-distribution')
router.register(r'buyer-payments', BuyerPaymentViewSet, basename='buyer-payment')
router.register(r'seller-payments', SellerPaymentViewSet, basename='seller-payment')
router.register(r'income', IncomeViewSet, basename='income')
router.register(r'expense', ExpenseViewSet, basename='expense')
router.register(r'activities', ActivityViewSet, basename='activity')

buyers_router = routers.NestedSimpleRouter(router, r'buyers', lookup='buyer')
buyers_router.register(r'milk-purchases', BuyerMilkPurchaseViewSet, basename='buyer-milk-purchases')
buyers_router.register(r'payments', BuyerPaymentHistoryViewSet, basename='buyer-payments')

sellers_router = routers.NestedSimpleRouter(router, r'sellers', lookup='seller')
sellers_router.register(r'milk-sales', SellerMilkSaleViewSet, basename='seller-milk-sales')
sellers_router.register(r'payments', SellerPaymentHistoryViewSet, basename='seller-payments')

urlpatterns = [
    path('auth/register/', RegisterView.as_view(), name='register'),
    path('auth/login/', LoginView.as_view(), name='login'),
    path('auth/profile/', ProfileView.as_view(), name='profile'),
    path('auth/change-password/', ChangePasswordView.as_view(), name='change-password'),
    path('auth/users/', UserListView.as_view(), name='user-list'),
    path('auth/users/<int:pk>/', UserDetailView.as_view(), name='user-detail'),
    path('dashboard/summary/', dashboard_summary, name='dashboard-summary'),
    path('dashboard/financial-overview/', financial_overview, name='financial-overview'),
    path('dashboard/daily-profit-loss/<str:day>/', daily_profit_loss, name='daily-profit-loss'),
    path(
        'dashboard/monthly-trends/<int:year>/<int:month>/',
        monthly_trends,
        name='monthly-trends',
    ),
    path('dashboard/milk-analytics/', milk_analytics, name='milk-analytics'),
    path('dashboard/payment-analytics/', payment_analytics, name='payment-analytics'),
    path(
        'dashboard/outstanding-balances/',
        outstanding_balances_report,
        name='outstanding-balances',
    ),
    path('', include(router.urls)),
    path('', include(buyers_router.urls)),
    path('', include(sellers_router.urls)),
]
