# core/cache.py
"""
Coordenador de cache.

Caches nomeados (backends do framework de cache do Django) na frente das
leituras pontuais e das listagens, mais o protocolo de invalidação que roda
depois de cada mutação confirmada no banco.

Garantias:
- Leitura read-through: na falta, calcula, guarda e devolve.
- Faltas concorrentes na mesma chave viram um único cálculo (lock por chave).
- Cada invalidação incrementa a geração do cache; um valor calculado antes de
  uma invalidação que começou durante o cálculo é descartado, nunca gravado.
- clear() é atômico: nenhum leitor vê um cache pela metade.

O coordenador não é um singleton de módulo. É montado uma vez no startup
(CoreConfig.ready) e entregue aos serviços; os testes montam os seus com
CacheCoordinator.in_memory().
"""
import logging
import threading
import uuid
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from django.apps import apps
from django.conf import settings
from django.core.cache import caches
from django.core.cache.backends.base import BaseCache
from django.core.cache.backends.locmem import LocMemCache
from django.core.exceptions import ImproperlyConfigured

logger = logging.getLogger(__name__)

VEHICLE_BY_ID = "vehicle-by-id"
VEHICLE_WITH_OFFERS_BY_ID = "vehicle-with-offers-by-id"
OFFER_BY_ID = "offer-by-id"
OFFER_LIST = "offer-list"
VEHICLE_SEARCH = "vehicle-search"

CACHE_NAMES = (
    VEHICLE_BY_ID,
    VEHICLE_WITH_OFFERS_BY_ID,
    OFFER_BY_ID,
    OFFER_LIST,
    VEHICLE_SEARCH,
)

# Caches cuja chave é a tupla de critérios: crescem com a variedade de
# consultas, então têm limite de tamanho (LRU).
CRITERIA_CACHES = (OFFER_LIST, VEHICLE_SEARCH)

_MISSING = object()


class NamedCache:
    def __init__(self, name: str, backend: BaseCache):
        self.name = name
        self.backend = backend
        self._lock = threading.Lock()
        self._generation = 0
        self._key_locks: Dict[str, list] = {}

    @contextmanager
    def _locked(self, key: str):
        with self._lock:
            entry = self._key_locks.setdefault(key, [threading.Lock(), 0])
            entry[1] += 1
        entry[0].acquire()
        try:
            yield
        finally:
            entry[0].release()
            with self._lock:
                entry[1] -= 1
                if entry[1] == 0:
                    self._key_locks.pop(key, None)

    def get(self, key: Any, default: Any = None) -> Any:
        return self.backend.get(str(key), default)

    def __contains__(self, key: Any) -> bool:
        return self.backend.get(str(key), _MISSING) is not _MISSING

    def get_or_compute(self, key: Any, compute: Callable[[], Any]) -> Any:
        key = str(key)
        value = self.backend.get(key, _MISSING)
        if value is not _MISSING:
            return value

        with self._locked(key):
            # Outro leitor pode ter preenchido enquanto esperávamos o lock.
            value = self.backend.get(key, _MISSING)
            if value is not _MISSING:
                return value

            with self._lock:
                generation = self._generation
            logger.debug("Cache miss on %s[%s]", self.name, key)
            value = compute()
            with self._lock:
                if generation == self._generation:
                    self.backend.set(key, value)
                else:
                    logger.debug("Discarding value for %s[%s]: invalidated while computing", self.name, key)
        return value

    def invalidate(self, key: Any) -> None:
        with self._lock:
            self._generation += 1
            self.backend.delete(str(key))
        logger.debug("Invalidated %s[%s]", self.name, key)

    def clear(self) -> None:
        with self._lock:
            self._generation += 1
            self.backend.clear()
        logger.debug("Cleared cache %s", self.name)


class CacheCoordinator:
    def __init__(self, backends: Mapping[str, BaseCache], strict_cross_entity: bool = True):
        missing = [name for name in CACHE_NAMES if name not in backends]
        if missing:
            raise ImproperlyConfigured(f"Missing cache backends: {', '.join(missing)}")
        self._caches = {name: NamedCache(name, backends[name]) for name in CACHE_NAMES}
        self.strict_cross_entity = strict_cross_entity

    @classmethod
    def from_settings(cls) -> "CacheCoordinator":
        try:
            backends = {name: caches[name] for name in CACHE_NAMES}
        except Exception as exc:
            raise ImproperlyConfigured(f"CACHES must declare the aliases {CACHE_NAMES}") from exc
        return cls(backends, strict_cross_entity=getattr(settings, "CACHE_STRICT_CROSS_ENTITY", True))

    @classmethod
    def in_memory(
        cls,
        strict_cross_entity: bool = True,
        search_max_entries: int = 1000,
        timeout: Optional[int] = None,
    ) -> "CacheCoordinator":
        """Caches LocMem isolados (nome único), úteis em testes e scripts."""
        suffix = uuid.uuid4().hex
        backends = {}
        for name in CACHE_NAMES:
            max_entries = search_max_entries if name in CRITERIA_CACHES else 10000
            backends[name] = LocMemCache(
                f"{name}-{suffix}",
                {
                    "TIMEOUT": timeout,
                    "OPTIONS": {"MAX_ENTRIES": max_entries, "CULL_FREQUENCY": max_entries},
                },
            )
        return cls(backends, strict_cross_entity=strict_cross_entity)

    def cache(self, name: str) -> NamedCache:
        return self._caches[name]

    def clear_all(self) -> None:
        for cache in self._caches.values():
            cache.clear()

    # -----------------------------
    # Leituras
    # -----------------------------
    def vehicle(self, vehicle_id: int, compute: Callable[[], Any]) -> Any:
        return self._caches[VEHICLE_BY_ID].get_or_compute(vehicle_id, compute)

    def vehicle_with_offers(self, vehicle_id: int, compute: Callable[[], Any]) -> Any:
        return self._caches[VEHICLE_WITH_OFFERS_BY_ID].get_or_compute(vehicle_id, compute)

    def offer(self, offer_id: int, compute: Callable[[], Any]) -> Any:
        return self._caches[OFFER_BY_ID].get_or_compute(offer_id, compute)

    def offer_list(self, page: int, page_size: int, compute: Callable[[], Any]) -> Any:
        return self._caches[OFFER_LIST].get_or_compute(f"{page}:{page_size}", compute)

    def vehicle_search(self, criteria, compute: Callable[[], Any]) -> Any:
        return self._caches[VEHICLE_SEARCH].get_or_compute(criteria.cache_key(), compute)

    # -----------------------------
    # Protocolo de invalidação
    # -----------------------------
    def vehicle_created(self, vehicle_id: int) -> None:
        logger.debug("Invalidating after vehicle %s created", vehicle_id)
        self._caches[VEHICLE_BY_ID].clear()
        self._caches[VEHICLE_SEARCH].clear()

    def vehicle_updated(self, vehicle_id: int) -> None:
        logger.debug("Invalidating after vehicle %s updated", vehicle_id)
        self._caches[VEHICLE_BY_ID].invalidate(vehicle_id)
        self._caches[VEHICLE_WITH_OFFERS_BY_ID].invalidate(vehicle_id)
        self._caches[VEHICLE_SEARCH].clear()

    def vehicle_deleted(self, vehicle_id: int, offer_ids: Iterable[int] = ()) -> None:
        logger.debug("Invalidating after vehicle %s deleted", vehicle_id)
        self._caches[VEHICLE_BY_ID].invalidate(vehicle_id)
        self._caches[VEHICLE_WITH_OFFERS_BY_ID].invalidate(vehicle_id)
        self._caches[VEHICLE_SEARCH].clear()
        if self.strict_cross_entity:
            for offer_id in offer_ids:
                self._caches[OFFER_BY_ID].invalidate(offer_id)
            self._caches[OFFER_LIST].clear()

    def offer_created(self, offer_id: int, car_id: int) -> None:
        logger.debug("Invalidating after offer %s created", offer_id)
        self._caches[OFFER_BY_ID].clear()
        self._caches[OFFER_LIST].clear()
        if self.strict_cross_entity:
            self._caches[VEHICLE_WITH_OFFERS_BY_ID].invalidate(car_id)

    def offer_updated(self, offer_id: int, car_ids: Iterable[int] = ()) -> None:
        logger.debug("Invalidating after offer %s updated", offer_id)
        self._caches[OFFER_BY_ID].invalidate(offer_id)
        self._caches[OFFER_LIST].clear()
        if self.strict_cross_entity:
            for car_id in set(car_ids):
                self._caches[VEHICLE_WITH_OFFERS_BY_ID].invalidate(car_id)

    def offer_deleted(self, offer_id: int, car_id: Optional[int] = None) -> None:
        logger.debug("Invalidating after offer %s deleted", offer_id)
        self._caches[OFFER_BY_ID].invalidate(offer_id)
        self._caches[OFFER_LIST].clear()
        if self.strict_cross_entity and car_id is not None:
            self._caches[VEHICLE_WITH_OFFERS_BY_ID].invalidate(car_id)


def get_cache_coordinator() -> CacheCoordinator:
    return apps.get_app_config("core").cache_coordinator
