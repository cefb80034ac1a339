# vehicles/urls.py
from django.urls import path
from . import views

urlpatterns = [
    path("", views.vehicle_collection_view, name="vehicle_collection"),
    path("search/", views.vehicle_search_view, name="vehicle_search"),
    path("find-by-brand-and-model/", views.vehicle_find_by_brand_and_model_view, name="vehicle_find_by_brand_and_model"),
    path("find-by-year-range/", views.vehicle_find_by_year_range_view, name="vehicle_find_by_year_range"),
    path("<int:pk>/", views.vehicle_detail_view, name="vehicle_detail"),
    path("<int:pk>/with-offers/", views.vehicle_with_offers_view, name="vehicle_with_offers"),
]
