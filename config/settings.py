"""
Storefront – Django Settings (Infrastructure Only)
==================================================
Django serves as the framework container for the storefront.
The access policy engine is the authority on who may touch which row;
Django provides the ORM, sessions and identities.

Environment overrides:
    STOREFRONT_SECRET_KEY, STOREFRONT_DEBUG, STOREFRONT_DB_PATH,
    STOREFRONT_ADMIN_EMAIL, STOREFRONT_ENFORCE_ORDER_TRANSITIONS,
    STOREFRONT_LOG_LEVEL
"""

import os
from pathlib import Path


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


# ── Paths ─────────────────────────────────────────────────────
# BASE_DIR = project root
BASE_DIR = Path(__file__).resolve().parent.parent

# ── Security ──────────────────────────────────────────────────
SECRET_KEY = os.environ.get(
    "STOREFRONT_SECRET_KEY",
    "storefront-dev-key-replace-before-deployment",
)

DEBUG = _env_flag("STOREFRONT_DEBUG", True)

ALLOWED_HOSTS = ["localhost", "127.0.0.1", "testserver"]

# ── Installed Apps ────────────────────────────────────────────
# Identity registry first: catalog and orders reference principals.
INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    # ── Storefront Modules ────────────────────────────────
    "core.identity_store",
    "core.catalog_store",
    "core.orders_store",
]

# ── Middleware ────────────────────────────────────────────────
# Sessions + authentication supply request.user, the caller identity.
MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
]

# ── URL ───────────────────────────────────────────────────────
ROOT_URLCONF = "config.urls"

# ── Database ──────────────────────────────────────────────────
# SQLite for development. Production DB configured separately.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("STOREFRONT_DB_PATH", str(BASE_DIR / "db.sqlite3")),
    }
}

# ── Internationalization ──────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# ── Default Primary Key ──────────────────────────────────────
# Storefront tables use UUIDs explicitly. This is a Django fallback only.
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ── Storefront ────────────────────────────────────────────────
# Email of the administrator ensured by bootstrap_configured_admin().
STOREFRONT_ADMIN_EMAIL = os.environ.get("STOREFRONT_ADMIN_EMAIL", "")

# Off: any admin may set any known status. On: forward-only lifecycle.
STOREFRONT_ENFORCE_ORDER_TRANSITIONS = _env_flag(
    "STOREFRONT_ENFORCE_ORDER_TRANSITIONS", False
)

# ── Logging ───────────────────────────────────────────────────
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    },
    "loggers": {
        "storefront": {
            "handlers": ["console"],
            "level": os.environ.get("STOREFRONT_LOG_LEVEL", "INFO"),
            "propagate": True,
        },
    },
}
