from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core"

    def ready(self):
        from .cache import CacheCoordinator

        # Um coordenador por processo, montado a partir de settings.CACHES.
        self.cache_coordinator = CacheCoordinator.from_settings()
