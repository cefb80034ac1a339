# carsoffer/settings.py
"""
Configurações do projeto carsoffer.

Tudo que varia por ambiente vem de variáveis de ambiente (arquivo .env
carregado via python-dotenv), com valores padrão que funcionam localmente
com SQLite.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "dev-insecure-carsoffer-key")
DEBUG = _env_bool("DJANGO_DEBUG", True)
ALLOWED_HOSTS = [h.strip() for h in os.getenv("DJANGO_ALLOWED_HOSTS", "*").split(",") if h.strip()]

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "core",
    "vehicles",
    "offers",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "core.middleware.ApiErrorMiddleware",
]

ROOT_URLCONF = "carsoffer.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "carsoffer.wsgi.application"

# -----------------------------
# Banco de dados
# -----------------------------
# PostgreSQL quando POSTGRES_DB estiver definido; caso contrário SQLite local.
if os.getenv("POSTGRES_DB"):
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": os.getenv("POSTGRES_DB"),
            "USER": os.getenv("POSTGRES_USER", "postgres"),
            "PASSWORD": os.getenv("POSTGRES_PASSWORD", "postgres"),
            "HOST": os.getenv("POSTGRES_HOST", "localhost"),
            "PORT": os.getenv("POSTGRES_PORT", "5432"),
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": os.getenv("SQLITE_PATH", str(BASE_DIR / "db.sqlite3")),
        }
    }

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "pt-br"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"

# -----------------------------
# Paginação e cache
# -----------------------------
MAX_PAGE_SIZE = _env_int("MAX_PAGE_SIZE", 100)

# None = entradas nunca expiram; a coerência vem da invalidação.
CACHE_TTL_SECONDS = _env_int("CACHE_TTL_SECONDS", None)
CACHE_SEARCH_MAX_ENTRIES = _env_int("CACHE_SEARCH_MAX_ENTRIES", 1000)
CACHE_POINT_MAX_ENTRIES = _env_int("CACHE_POINT_MAX_ENTRIES", 10000)

# Liga a invalidação cruzada Vehicle <-> Offer (ver DESIGN.md).
CACHE_STRICT_CROSS_ENTITY = _env_bool("CACHE_STRICT_CROSS_ENTITY", True)


def _locmem(location: str, max_entries: int) -> dict:
    # CULL_FREQUENCY == MAX_ENTRIES faz o LocMemCache remover uma entrada
    # por vez, sempre a menos recentemente usada.
    return {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": location,
        "TIMEOUT": CACHE_TTL_SECONDS,
        "OPTIONS": {"MAX_ENTRIES": max_entries, "CULL_FREQUENCY": max_entries},
    }


CACHES = {
    "default": _locmem("default", CACHE_POINT_MAX_ENTRIES),
    "vehicle-by-id": _locmem("vehicle-by-id", CACHE_POINT_MAX_ENTRIES),
    "vehicle-with-offers-by-id": _locmem("vehicle-with-offers-by-id", CACHE_POINT_MAX_ENTRIES),
    "offer-by-id": _locmem("offer-by-id", CACHE_POINT_MAX_ENTRIES),
    "offer-list": _locmem("offer-list", CACHE_SEARCH_MAX_ENTRIES),
    "vehicle-search": _locmem("vehicle-search", CACHE_SEARCH_MAX_ENTRIES),
}

# -----------------------------
# Logging
# -----------------------------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {"format": LOG_FORMAT, "datefmt": LOG_DATE_FORMAT},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "default"},
    },
    "root": {"handlers": ["console"], "level": LOG_LEVEL},
    "loggers": {
        "django": {"handlers": ["console"], "level": "WARNING", "propagate": False},
    },
}
