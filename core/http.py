# core/http.py
"""
Utilidades para as views JSON: leitura de query params e do corpo da
requisição. Entrada malformada vira InvalidArgument (HTTP 400).
"""
import json
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Dict, Optional

from django.http import JsonResponse

from .exceptions import InvalidArgument

TRUE_VALUES = ("1", "true", "yes", "on")
FALSE_VALUES = ("0", "false", "no", "off")


def json_response(data, status: int = 200) -> JsonResponse:
    return JsonResponse(data, status=status, safe=False, json_dumps_params={"ensure_ascii": False})


def read_json(request) -> Dict:
    try:
        data = json.loads(request.body.decode("utf-8") or "{}")
    except (UnicodeDecodeError, json.JSONDecodeError):
        raise InvalidArgument("Invalid JSON payload.")
    if not isinstance(data, dict):
        raise InvalidArgument("JSON payload must be an object.")
    return data


def query_value(request, name: str) -> Optional[str]:
    """Valor aparado, ou None se ausente/em branco."""
    value = request.GET.get(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def query_str(request, name: str) -> Optional[str]:
    # Texto em branco continua sendo repassado: quem decide se é "vazio" é o
    # motor de critérios.
    return request.GET.get(name)


def query_int(request, name: str, default: Optional[int] = None) -> Optional[int]:
    raw = query_value(request, name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise InvalidArgument(f"{name} must be an integer.")


def query_decimal(request, name: str) -> Optional[Decimal]:
    raw = query_value(request, name)
    if raw is None:
        return None
    try:
        value = Decimal(raw)
    except InvalidOperation:
        raise InvalidArgument(f"{name} must be a number.")
    if not value.is_finite():
        raise InvalidArgument(f"{name} must be a number.")
    return value


def query_bool(request, name: str, default: bool = True) -> bool:
    raw = query_value(request, name)
    if raw is None:
        return default
    if raw.lower() in TRUE_VALUES:
        return True
    if raw.lower() in FALSE_VALUES:
        return False
    raise InvalidArgument(f"{name} must be true or false.")


def query_date(request, name: str, label: str) -> Optional[date]:
    raw = query_value(request, name)
    if raw is None:
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise InvalidArgument(f"{label} must be in the format 'YYYY-MM-DD'. Example: 2024-09-27.")
