# offers/urls.py
from django.urls import path
from . import views

urlpatterns = [
    path("", views.offer_collection_view, name="offer_collection"),
    path("search/", views.offer_search_view, name="offer_search"),
    path("find-by-customer-names/", views.offer_find_by_customer_names_view, name="offer_find_by_customer_names"),
    path("find-by-prices-between/", views.offer_find_by_prices_between_view, name="offer_find_by_prices_between"),
    path("<int:pk>/", views.offer_detail_view, name="offer_detail"),
]
