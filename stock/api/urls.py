# stock/api/urls.py

from django.urls import path

from stock.api.views import FefoSuggestionView, StockMovementCreateView

urlpatterns = [
    path("movements/", StockMovementCreateView.as_view(), name="stock-movement-create"),
    path("fefo-suggestions/", FefoSuggestionView.as_view(), name="stock-fefo-suggestions"),
]
