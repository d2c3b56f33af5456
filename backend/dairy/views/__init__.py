"""Expose public API views for the application."""

from .activities import ActivityViewSet
from .auth import (
    ChangePasswordView,
    LoginView,
    ProfileView,
    RegisterView,
    UserDetailView,
    UserListView,
)
from .buyers import BuyerMilkPurchaseViewSet, BuyerPaymentHistoryViewSet, BuyerViewSet
from .dashboard import (
    daily_profit_loss,
    dashboard_summary,
    financial_overview,
    milk_analytics,
    monthly_trends,
    outstanding_balances_report,
    payment_analytics,
)
from .expenses import ExpenseViewSet
from .income import IncomeViewSet
from .milk_distribution import MilkDistributionViewSet
from .milk_store import MilkStoreViewSet
from .payments import BuyerPaymentViewSet, SellerPaymentViewSet
from .sellers import SellerMilkSaleViewSet, SellerPaymentHistoryViewSet, SellerViewSet

__all__ = [
    'ActivityViewSet',
    'BuyerMilkPurchaseViewSet',
    'BuyerPaymentHistoryViewSet',
    'BuyerPaymentViewSet',
    'BuyerViewSet',
    'ChangePasswordView',
    'ExpenseViewSet',
    'IncomeViewSet',
    'LoginView',
    'MilkDistributionViewSet',
    'MilkStoreViewSet',
    'ProfileView',
    'RegisterView',
    'SellerMilkSaleViewSet',
    'SellerPaymentHistoryViewSet',
    'SellerPaymentViewSet',
    'SellerViewSet',
    'UserDetailView',
    'UserListView',
    'daily_profit_loss',
    'dashboard_summary',
    'financial_overview',
    'milk_analytics',
    'monthly_trends',
    'outstanding_balances_report',
    'payment_analytics',
]
