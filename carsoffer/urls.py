# carsoffer/urls.py
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path("admin/", admin.site.urls),
    path("cars/", include("vehicles.urls")),
    path("offers/", include("offers.urls")),
]
