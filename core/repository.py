# core/repository.py
"""
Acesso ao banco (Entity Store) sobre o ORM do Django.

Buscas pontuais devolvem None quando não acham nada; quem converte isso em
NotFound é o serviço.
"""
from typing import Any, Iterable, List, Optional, Sequence

from django.db.models import F, Model, Q, QuerySet

from .criteria import Predicate


class Repository:
    model = None

    def get_queryset(self) -> QuerySet:
        return self.model.objects.all()

    def find_by_id(self, pk: Any) -> Optional[Model]:
        return self.get_queryset().filter(pk=pk).first()

    def lock(self, pk: Any) -> Optional[Model]:
        """Lê a linha com SELECT ... FOR UPDATE (precisa de transação aberta)."""
        return self.model.objects.select_for_update().filter(pk=pk).first()

    def exists(self, pk: Any) -> bool:
        return self.model.objects.filter(pk=pk).exists()

    def insert(self, instance: Model) -> Model:
        instance.save(force_insert=True)
        return instance

    def replace(self, instance: Model, fields: Iterable[str]) -> bool:
        """
        Grava `fields` da instância somente se a versão no banco ainda for a
        que foi lida. Devolve False quando outra escrita ganhou a corrida.
        """
        values = {name: getattr(instance, name) for name in fields}
        updated = self.model.objects.filter(pk=instance.pk, version=instance.version).update(
            version=F("version") + 1, **values
        )
        if updated:
            instance.version += 1
        return updated > 0

    def delete(self, pk: Any) -> bool:
        deleted, _ = self.model.objects.filter(pk=pk).delete()
        return deleted > 0

    def query(self, predicates: Sequence[Predicate], ordering: Sequence[str], offset: int, limit: int) -> List[Model]:
        qs = self.get_queryset().filter(Q(*predicates)).order_by(*ordering)
        return list(qs[offset:offset + limit])

    def count(self, predicates: Sequence[Predicate]) -> int:
        return self.model.objects.filter(Q(*predicates)).count()
