# ledgerbook_accounting/urls.py
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views.ledger import LedgerViewSet
from .views.transaction import TransactionViewSet

router = DefaultRouter(trailing_slash=False)
router.include_root_view = False
router.register(r'ledgers', LedgerViewSet, basename='ledger')
router.register(r'transactions', TransactionViewSet, basename='transaction')

urlpatterns = [
    path('', include(router.urls)),
]
