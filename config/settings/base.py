# config/settings/base.py
from pathlib import Path
import os
from dotenv import load_dotenv


BASE_DIR = Path(__file__).resolve().parent.parent.parent
load_dotenv(BASE_DIR / ".env")

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "unsafe-dev-key")
DEBUG = os.getenv("DJANGO_DEBUG", "0") == "1"
ALLOWED_HOSTS = ["*"]

INSTALLED_APPS = [
    # Django (contenttypes/auth back DRF's AnonymousUser)
    "django.contrib.contenttypes",
    "django.contrib.auth",

    # Third-party
    "corsheaders",
    "rest_framework",
    "drf_spectacular",

    # Domain apps
    "clinic_core.iam.apps.IamConfig",
    "clinic_core.patients.apps.PatientsConfig",
]

MIDDLEWARE = [
    "corsheaders.middleware.CorsMiddleware",
    "clinic_core.common.middleware.RequestLogMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
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
            ],
        },
    }
]

WSGI_APPLICATION = "config.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.getenv("DB_NAME", "patients"),
        "USER": os.getenv("DB_USER", "patients"),
        "PASSWORD": os.getenv("DB_PASSWORD", "patients"),
        "HOST": os.getenv("DB_HOST", "127.0.0.1"),
        "PORT": os.getenv("DB_PORT", "5432"),
        "OPTIONS": {
            "application_name": "patients",
        },
    }
}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
DEFAULT_AUTO_FIELD = "django.db.models.AutoField"

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": (
        "clinic_core.iam.auth.IdentityServiceAuthentication",
    ),
    "DEFAULT_PERMISSION_CLASSES": (
        "rest_framework.permissions.IsAuthenticated",
    ),
    "DEFAULT_RENDERER_CLASSES": (
        "rest_framework.renderers.JSONRenderer",
    ),
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",

    # Standard error envelope
    "EXCEPTION_HANDLER": "clinic_core.common.api.exceptions.api_exception_handler",

    "UNAUTHENTICATED_USER": None,
}

# Identity service (token verification)
IDENTITY_SERVICE_URL = os.getenv("IDENTITY_SERVICE_URL", "http://127.0.0.1:8001")
IDENTITY_VERIFY_PATH = os.getenv("IDENTITY_VERIFY_PATH", "/api/v1/tokens/verify")
IDENTITY_SERVICE_TIMEOUT = float(os.getenv("IDENTITY_SERVICE_TIMEOUT", "10"))

SPECTACULAR_SETTINGS = {
    "TITLE": "Patients API",
    "DESCRIPTION": "Patient aggregate (patient + emergency contacts), admin only",
    "VERSION": "0.1.0",

    "COMPONENT_SPLIT_REQUEST": True,
    "SORT_OPERATIONS": True,
    "SORT_OPERATION_PARAMETERS": True,

    # Scheme declared by IdentityServiceAuthenticationScheme (clinic_core/iam/openapi.py)
    "SECURITY": [
        {"BearerToken": []}
    ],
}

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
SQL_DEBUG = os.getenv("SQL_DEBUG", "0") == "1"

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "clinic_core": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
        # every SQL statement, only when SQL_DEBUG=1 (Django emits these only with DEBUG on)
        "django.db.backends": {
            "handlers": ["console"],
            "level": "DEBUG" if SQL_DEBUG else "WARNING",
            "propagate": False,
        },
    },
}

# CORS settings
# Development
CORS_ALLOW_ALL_ORIGINS = True  # Only for development!
