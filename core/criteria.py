# core/criteria.py
"""
Motor de critérios: transforma filtros opcionais em um plano de consulta
determinístico e executa esse plano contra um repositório.

Regras principais:
- Filtro de texto nulo ou em branco não entra na lista de predicados.
- Texto preenchido vira `__icontains` (substring, sem diferenciar caixa).
- Faixas com um só limite são completadas com o mínimo/máximo do tipo.
- Todos os predicados são combinados com AND.
- Ordenação só por campos de um mapa fechado; qualquer outro nome gera
  InvalidSortField. O `id` entra sempre como critério de desempate.
- offset = page * page_size, limit = page_size. Sem teto de page_size aqui:
  essa política é dos serviços.
"""
import hashlib
import json
from dataclasses import asdict, dataclass
from typing import Any, List, Mapping, Optional, Protocol, Sequence, Tuple

from django.db.models import Q

from .exceptions import InvalidArgument, InvalidSortField
from .pagination import Page

DEFAULT_SORT_FIELD = "id"

Predicate = Tuple[str, Any]


def is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


# -----------------------------
# Critérios de busca
# -----------------------------
@dataclass(frozen=True)
class SearchCriteria:
    """
    Ordenação e paginação comuns a todas as buscas.

    É validado na construção: page < 0 ou page_size <= 0 falham na hora.
    """

    sort_field: Optional[str] = None
    ascending: bool = True
    page: int = 0
    page_size: int = 10

    def __post_init__(self):
        if is_blank(self.sort_field):
            object.__setattr__(self, "sort_field", DEFAULT_SORT_FIELD)
        else:
            object.__setattr__(self, "sort_field", self.sort_field.strip())
        if self.page is None or self.page_size is None or self.page < 0 or self.page_size <= 0:
            raise InvalidArgument("Page and size must be valid positive numbers.")

    @property
    def offset(self) -> int:
        return self.page * self.page_size

    def cache_key(self) -> str:
        """Chave estável derivada da tupla completa de filtros/ordenação/paginação."""
        raw = json.dumps(
            {"kind": type(self).__name__, **asdict(self)},
            sort_keys=True,
            default=str,
        )
        return hashlib.md5(raw.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class QueryPlan:
    predicates: Tuple[Predicate, ...] = ()
    ordering: Tuple[str, ...] = (DEFAULT_SORT_FIELD,)
    page: int = 0
    page_size: int = 10

    @property
    def offset(self) -> int:
        return self.page * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size

    def as_q(self) -> Q:
        return Q(*self.predicates)


def resolve_ordering(sort_field: Optional[str], ascending: bool, sort_fields: Mapping[str, str]) -> Tuple[str, ...]:
    name = DEFAULT_SORT_FIELD if is_blank(sort_field) else sort_field.strip()
    column = sort_fields.get(name)
    if column is None:
        raise InvalidSortField(name, sort_fields.keys())
    prefix = "" if ascending else "-"
    if column == "id":
        return (f"{prefix}id",)
    return (f"{prefix}{column}", f"{prefix}id")


class PlanBuilder:
    """Acumula predicados na ordem em que os filtros são declarados."""

    def __init__(self):
        self._predicates: List[Predicate] = []

    def contains(self, field: str, value: Optional[str]) -> "PlanBuilder":
        if not is_blank(value):
            self._predicates.append((f"{field}__icontains", value.strip()))
        return self

    def equals(self, field: str, value: Any) -> "PlanBuilder":
        if value is not None:
            self._predicates.append((field, value))
        return self

    def at_least(self, field: str, value: Any) -> "PlanBuilder":
        if value is not None:
            self._predicates.append((f"{field}__gte", value))
        return self

    def between(self, field: str, low: Any, high: Any, message: str) -> "PlanBuilder":
        if low > high:
            raise InvalidArgument(message)
        self._predicates.append((f"{field}__range", (low, high)))
        return self

    def optional_range(self, field: str, low: Any, high: Any, floor: Any, ceiling: Any, message: str) -> "PlanBuilder":
        # Sem nenhum limite: sem predicado. Com um só: o outro lado vai até o
        # mínimo/máximo do tipo (e continua sendo um BETWEEN inclusivo).
        if low is None and high is None:
            return self
        return self.between(
            field,
            floor if low is None else low,
            ceiling if high is None else high,
            message,
        )

    def build(self, criteria: SearchCriteria, sort_fields: Mapping[str, str]) -> QueryPlan:
        return QueryPlan(
            predicates=tuple(self._predicates),
            ordering=resolve_ordering(criteria.sort_field, criteria.ascending, sort_fields),
            page=criteria.page,
            page_size=criteria.page_size,
        )


# -----------------------------
# Execução
# -----------------------------
class EntityStore(Protocol):
    def query(self, predicates: Sequence[Predicate], ordering: Sequence[str], offset: int, limit: int) -> List[Any]: ...

    def count(self, predicates: Sequence[Predicate]) -> int: ...


def execute_page(store: EntityStore, plan: QueryPlan) -> Page:
    """Consulta paginada + contagem total com os mesmos predicados."""
    items = store.query(plan.predicates, plan.ordering, plan.offset, plan.limit)
    total = store.count(plan.predicates)
    return Page.build(items, total, plan.page, plan.page_size)


def execute_slice(store: EntityStore, plan: QueryPlan) -> List[Any]:
    """Só a fatia pedida, sem contagem."""
    return store.query(plan.predicates, plan.ordering, plan.offset, plan.limit)
