# vehicles/views.py
"""
Endpoints JSON de veículos (/cars/...).

As views só leem parâmetros e corpo, chamam o VehicleService e serializam
o resultado. Erros de domínio sobem e viram JSON no ApiErrorMiddleware.
"""
from dataclasses import asdict

from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods

from core.http import json_response, query_bool, query_int, query_str, query_value, read_json

from .criteria import VehicleSearchCriteria
from .services import VehicleService


# -----------------------------
# Coleção e item
# -----------------------------
@csrf_exempt
@require_http_methods(["GET", "POST"])
def vehicle_collection_view(request):
    service = VehicleService()
    if request.method == "GET":
        page = service.list_all(query_int(request, "page", 0), query_int(request, "size", 20))
        return json_response(page.to_dict())

    vehicle = service.create(read_json(request))
    return json_response({"message": "Car successfully created", "car": asdict(vehicle)}, status=201)


@csrf_exempt
@require_http_methods(["GET", "PUT", "DELETE"])
def vehicle_detail_view(request, pk):
    service = VehicleService()
    if request.method == "GET":
        return json_response(asdict(service.get(pk)))

    if request.method == "PUT":
        vehicle = service.update(pk, read_json(request))
        return json_response({"message": "Car successfully updated", "car": asdict(vehicle)})

    service.delete(pk)
    return json_response({"message": "Successfully deleted car!"})


@require_GET
def vehicle_with_offers_view(request, pk):
    return json_response(asdict(VehicleService().get_with_offers(pk)))


# -----------------------------
# Buscas
# -----------------------------
@require_GET
def vehicle_search_view(request):
    """
    Busca livre: brand, model, color (substring), year (a partir de),
    fuel_type (exato), sort_by, asc, page, size.
    """
    criteria = VehicleSearchCriteria(
        brand=query_str(request, "brand"),
        model=query_str(request, "model"),
        year=query_int(request, "year"),
        color=query_str(request, "color"),
        fuel_type=query_value(request, "fuel_type"),
        sort_field=query_str(request, "sort_by"),
        ascending=query_bool(request, "asc", True),
        page=query_int(request, "page", 0),
        page_size=query_int(request, "size", 10),
    )
    vehicles = VehicleService().search(criteria)
    return json_response([asdict(v) for v in vehicles])


@require_GET
def vehicle_find_by_brand_and_model_view(request):
    page = VehicleService().find_by_brand_and_model(
        query_str(request, "brand"),
        query_str(request, "model"),
        query_int(request, "page", 0),
        query_int(request, "size", 10),
    )
    return json_response(page.to_dict())


@require_GET
def vehicle_find_by_year_range_view(request):
    page = VehicleService().find_by_year_range(
        query_int(request, "start_year"),
        query_int(request, "end_year"),
        query_int(request, "page", 0),
        query_int(request, "size", 10),
    )
    return json_response(page.to_dict())
