# offers/views.py
from dataclasses import asdict

from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods

from core.http import json_response, query_bool, query_date, query_decimal, query_int, query_str, read_json

from .criteria import OfferSearchCriteria
from .services import OfferService


@csrf_exempt
@require_http_methods(["GET", "POST"])
def offer_collection_view(request):
    service = OfferService()
    if request.method == "GET":
        page = service.list_all(query_int(request, "page", 0), query_int(request, "size", 10))
        return json_response(page.to_dict())

    offer = service.create(read_json(request))
    return json_response({"message": "Offer successfully created", "offer": asdict(offer)}, status=201)


@csrf_exempt
@require_http_methods(["GET", "PUT", "DELETE"])
def offer_detail_view(request, pk):
    service = OfferService()
    if request.method == "GET":
        return json_response(asdict(service.get(pk)))

    if request.method == "PUT":
        offer = service.update(pk, read_json(request))
        return json_response({"message": "Offer successfully updated", "offer": asdict(offer)})

    service.delete(pk)
    return json_response({"message": "Successfully deleted offer!"})


@require_GET
def offer_search_view(request):
    criteria = OfferSearchCriteria(
        customer_first_name=query_str(request, "customer_first_name"),
        customer_last_name=query_str(request, "customer_last_name"),
        min_price=query_decimal(request, "min_price"),
        max_price=query_decimal(request, "max_price"),
        start_date=query_date(request, "start_date", "Start date"),
        end_date=query_date(request, "end_date", "End date"),
        sort_field=query_str(request, "sort_by"),
        ascending=query_bool(request, "asc", True),
        page=query_int(request, "page", 0),
        page_size=query_int(request, "size", 10),
    )
    offers = OfferService().search(criteria)
    return json_response([asdict(o) for o in offers])


@require_GET
def offer_find_by_customer_names_view(request):
    page = OfferService().find_by_customer_name(
        query_str(request, "first_name"),
        query_str(request, "last_name"),
        query_int(request, "page", 0),
        query_int(request, "size", 10),
    )
    return json_response(page.to_dict())


@require_GET
def offer_find_by_prices_between_view(request):
    page = OfferService().find_by_price_range(
        query_decimal(request, "min_price"),
        query_decimal(request, "max_price"),
        query_int(request, "page", 0),
        query_int(request, "size", 10),
    )
    return json_response(page.to_dict())
