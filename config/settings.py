"""Django settings for the competencias project.

Settings are pulled from environment variables so the same file works
locally (.env) and on the deployment host:
- SECRET_KEY/DEBUG/ALLOWED_HOSTS/DB keys via python-decouple
- WhiteNoise enabled for static files (admin)
- Push notification scheduler switched on with NOTIFICACIONES_PROGRAMADOR_ACTIVO
"""

from pathlib import Path
import os

from decouple import config
import dj_database_url
from dotenv import load_dotenv
import certifi

# ------------------------------------------------------------
# Base paths / env
# ------------------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / ".env")

# Certificate bundle (FCM and Postgres over SSL)
os.environ["SSL_CERT_FILE"] = certifi.where()

# ------------------------------------------------------------
# Core security
# ------------------------------------------------------------
SECRET_KEY = config("SECRET_KEY", default="CHANGE_ME_IN_ENV")
DEBUG = config("DEBUG", cast=bool, default=False)

ALLOWED_HOSTS = [h.strip() for h in config(
    "ALLOWED_HOSTS",
    default="localhost,127.0.0.1"
).split(",") if h.strip()]

# ------------------------------------------------------------
# Application definition
# ------------------------------------------------------------
INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",

    # terceros
    "rest_framework",
    "corsheaders",

    # rutas
    "db",
    "academico_api",

    # notificaciones push
    "notificaciones",
]

MIDDLEWARE = [
    "corsheaders.middleware.CorsMiddleware",

    "django.middleware.security.SecurityMiddleware",
    "whitenoise.middleware.WhiteNoiseMiddleware",

    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "config.urls"

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

WSGI_APPLICATION = "config.wsgi.application"

# ------------------------------------------------------------
# Database
# ------------------------------------------------------------
DATABASES = {
    "default": dj_database_url.config(
        default=config(
            "DATABASE_URL",
            default="sqlite:///" + str(BASE_DIR / "db.sqlite3"),
        ),
        conn_max_age=600,
        ssl_require=config("DB_SSL_REQUIRE", cast=bool, default=False),
    )
}

# ------------------------------------------------------------
# CORS
# ------------------------------------------------------------
CORS_ALLOW_ALL_ORIGINS = config("CORS_ALLOW_ALL_ORIGINS", cast=bool, default=True)

# ------------------------------------------------------------
# Internationalization
# ------------------------------------------------------------
DEFAULT_CHARSET = "utf-8"
LANGUAGE_CODE = "es-ar"
TIME_ZONE = config("TIME_ZONE", default="America/Argentina/Buenos_Aires")
USE_I18N = True
USE_TZ = True

# ------------------------------------------------------------
# Static (WhiteNoise)
# ------------------------------------------------------------
STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage"},
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ------------------------------------------------------------
# DRF / JWT
# ------------------------------------------------------------
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": (
        "usuarios_api.authentication.UsuariosJWTAuthentication",
    ),
    "DEFAULT_PERMISSION_CLASSES": (
        "rest_framework.permissions.IsAuthenticated",
    ),
}

from datetime import timedelta
SIMPLE_JWT = {
    "USER_ID_CLAIM": "uid",
    "ACCESS_TOKEN_LIFETIME": timedelta(hours=6),
    "REFRESH_TOKEN_LIFETIME": timedelta(days=7),
}

# ------------------------------------------------------------
# Firebase / push notifications
# ------------------------------------------------------------
FIREBASE_SERVICE_ACCOUNT_PATH = config(
    "FIREBASE_SERVICE_ACCOUNT_PATH",
    default=str(BASE_DIR / "serviceAccountKey.json"),
)

# segundos por intento de entrega
FCM_TIMEOUT = config("FCM_TIMEOUT", cast=float, default=10)
FCM_MAX_CONCURRENCIA = config("FCM_MAX_CONCURRENCIA", cast=int, default=4)

# el programador se arranca desde config/wsgi.py
NOTIFICACIONES_PROGRAMADOR_ACTIVO = config(
    "NOTIFICACIONES_PROGRAMADOR_ACTIVO", cast=bool, default=False
)
NOTIFICACIONES_RETRASO_INICIAL = config(
    "NOTIFICACIONES_RETRASO_INICIAL", cast=int, default=30
)

# ------------------------------------------------------------
# Logging
# ------------------------------------------------------------
LOG_LEVEL = config("LOG_LEVEL", default="INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "{asctime} {levelname} {name}: {message}",
            "style": "{",
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
        "level": LOG_LEVEL,
    },
    "loggers": {
        "apscheduler": {
            "handlers": ["console"],
            "level": "WARNING",
            "propagate": False,
        },
    },
}

# ------------------------------------------------------------
# Production security (behind proxy)
# ------------------------------------------------------------
if not DEBUG:
    SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
    SESSION_COOKIE_SECURE = True
    CSRF_COOKIE_SECURE = True
