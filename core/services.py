# core/services.py
"""
Regras comuns aos serviços: teto de page_size, campos obrigatórios
(update é substituição completa) e validação do model antes de qualquer
escrita.
"""
from typing import Any, Dict, Iterable, Mapping, Optional

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db.models import Model

from .exceptions import InvalidArgument


def max_page_size() -> int:
    return getattr(settings, "MAX_PAGE_SIZE", 100)


def check_page_size(page_size: Optional[int]) -> None:
    limit = max_page_size()
    if page_size is not None and page_size > limit:
        raise InvalidArgument(f"Page size too large. Maximum is {limit}")


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def require_fields(data: Mapping, fields: Iterable[str]) -> Dict[str, Any]:
    """
    Devolve só os campos pedidos, com strings aparadas.

    Todos são obrigatórios: campo ausente no payload não é "mantido do
    valor anterior", é erro.
    """
    if not isinstance(data, Mapping):
        raise InvalidArgument("Payload must be an object.")
    fields = tuple(fields)
    missing = [name for name in fields if _is_missing(data.get(name))]
    if missing:
        raise InvalidArgument(
            f"Missing required fields: {', '.join(missing)}",
            errors={name: ["This field is required."] for name in missing},
        )
    values = {}
    for name in fields:
        value = data[name]
        values[name] = value.strip() if isinstance(value, str) else value
    return values


def validate_instance(instance: Model, exclude: Optional[Iterable[str]] = None) -> None:
    # Unicidade (VIN) é checada à parte, para virar DuplicateKey.
    try:
        instance.full_clean(exclude=list(exclude or ()), validate_unique=False)
    except ValidationError as exc:
        raise InvalidArgument("Validation failed.", errors=exc.message_dict) from exc
