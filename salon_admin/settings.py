# salon_admin/settings.py
#
# Purpose:
# - Django settings for the salon admin project.
# - Everything deployment-specific comes from the environment (or a .env file)
#   through python-decouple's `config`, with development-friendly defaults.
#
from pathlib import Path

from decouple import config, Csv

BASE_DIR = Path(__file__).resolve().parent.parent


# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = config("SECRET_KEY", default="django-insecure-salon-admin-dev-key-change-me")

DEBUG = config("DEBUG", default=True, cast=bool)

ALLOWED_HOSTS = config("ALLOWED_HOSTS", default="*", cast=Csv())


# Application definition

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "catalog",
    "staff",
    "booking",
    "uploads",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "salon_admin.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [BASE_DIR / "templates"],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "salon_admin.wsgi.application"


# Database
# SQLite for local development; point DB_ENGINE/DB_NAME/... at Postgres in production.
DATABASES = {
    "default": {
        "ENGINE": config("DB_ENGINE", default="django.db.backends.sqlite3"),
        "NAME": config("DB_NAME", default=str(BASE_DIR / "db.sqlite3")),
        "USER": config("DB_USER", default=""),
        "PASSWORD": config("DB_PASSWORD", default=""),
        "HOST": config("DB_HOST", default=""),
        "PORT": config("DB_PORT", default=""),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"


# Internationalization

LANGUAGE_CODE = "en-us"
TIME_ZONE = config("TIME_ZONE", default="Europe/Berlin")
USE_I18N = True
USE_TZ = True

# Catalog content locales (service translations, pricing page).
CATALOG_LOCALES = ("de", "ru", "en")
DEFAULT_LOCALE = config("DEFAULT_LOCALE", default="de")


# Static files and uploads
#
# Uploaded files live under UPLOADS_DIR and are exposed as /uploads/<relative path>,
# so a stored public URL always mirrors the on-disk layout.

STATIC_URL = "/static/"
STATIC_ROOT = config("STATIC_ROOT", default=str(BASE_DIR / "staticfiles"))

UPLOADS_DIR = Path(config("UPLOADS_DIR", default=str(BASE_DIR / "public" / "uploads")))
UPLOADS_URL = "/uploads/"
MEDIA_ROOT = UPLOADS_DIR
MEDIA_URL = UPLOADS_URL

AVATAR_MAX_BYTES = 5 * 1024 * 1024
AVATAR_ALLOWED_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/webp")

# Image maintenance defaults (optimize_uploads command)
IMAGE_MAX_WIDTH = config("IMAGE_MAX_WIDTH", default=1600, cast=int)
IMAGE_WEBP_QUALITY = config("IMAGE_WEBP_QUALITY", default=82, cast=int)


# Auth
LOGIN_URL = "admin:login"


# Django REST Framework
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "rest_framework.authentication.SessionAuthentication",
    ],
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
}


# Logging
LOG_LEVEL = config("LOG_LEVEL", default="INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "catalog": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "staff": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "booking": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "uploads": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
    },
}


# Security settings for production
if not DEBUG:
    SECURE_SSL_REDIRECT = config("SECURE_SSL_REDIRECT", default=True, cast=bool)
    SESSION_COOKIE_SECURE = True
    CSRF_COOKIE_SECURE = True
    SECURE_CONTENT_TYPE_NOSNIFF = True
    X_FRAME_OPTIONS = "DENY"
    SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
