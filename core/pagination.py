# core/pagination.py
import math
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Generic, List, TypeVar

T = TypeVar("T")


def total_pages_for(total_items: int, page_size: int) -> int:
    if page_size <= 0:
        return 0
    return math.ceil(total_items / page_size)


@dataclass(frozen=True)
class Page(Generic[T]):
    """
    Uma página de resultados.

    `items` e `total_items` saem do mesmo conjunto de predicados, mas de
    consultas separadas: não há garantia de mesmo snapshot do banco.
    """

    items: List[T] = field(default_factory=list)
    total_items: int = 0
    total_pages: int = 0
    current_page: int = 0
    page_size: int = 0

    @classmethod
    def build(cls, items: List[T], total_items: int, page: int, page_size: int) -> "Page[T]":
        return cls(
            items=list(items),
            total_items=total_items,
            total_pages=total_pages_for(total_items, page_size),
            current_page=page,
            page_size=page_size,
        )

    def map(self, fn) -> "Page":
        return Page(
            items=[fn(i) for i in self.items],
            total_items=self.total_items,
            total_pages=self.total_pages,
            current_page=self.current_page,
            page_size=self.page_size,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [asdict(i) for i in self.items],
            "total_items": self.total_items,
            "total_pages": self.total_pages,
            "current_page": self.current_page,
            "page_size": self.page_size,
        }
