import os
from pathlib import Path

# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent.parent

# Import local config, falling back to the environment
try:
    import config
except ImportError:
    config = None


def _config(name, default=None):
    if config is not None and hasattr(config, name):
        return getattr(config, name)
    return os.environ.get(name, default)


def _config_bool(name, default=False):
    value = _config(name, default)
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'on')
    return bool(value)


SECRET_KEY = _config('SECRET_KEY', 'insecure-dev-key-change-me')
DEBUG = _config_bool('DEBUG', False)
ALLOWED_HOSTS = _config('ALLOWED_HOSTS', ['localhost', '127.0.0.1', 'testserver'])
if isinstance(ALLOWED_HOSTS, str):
    ALLOWED_HOSTS = [h.strip() for h in ALLOWED_HOSTS.split(',') if h.strip()]

SITE_URL = _config('SITE_URL', 'http://localhost:8000')

# Application definition
INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    # Local apps
    'tracking',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
    'tracking.middleware.SearchTrackingMiddleware',
]

ROOT_URLCONF = 'app.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [BASE_DIR / 'templates'],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
                'tracking.context_processors.tiktok_pixel',
            ],
        },
    },
]

WSGI_APPLICATION = 'app.wsgi.application'

# Database
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
    }
}

# Use PostgreSQL when explicitly requested
if _config_bool('USE_POSTGRES', False):
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.postgresql',
            'NAME': _config('DATABASE_NAME', 'tiktok_tracking'),
            'USER': _config('DATABASE_USER', 'tiktok_tracking'),
            'PASSWORD': _config('DATABASE_PASSWORD', 'password'),
            'HOST': _config('DATABASE_HOST', 'localhost'),
            'PORT': _config('DATABASE_PORT', '5432'),
        }
    }

# Internationalization
LANGUAGE_CODE = 'en-us'
TIME_ZONE = _config('TIME_ZONE', 'UTC')
USE_I18N = True
USE_TZ = True

# Static files
STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

# Default primary key field type
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

LOGIN_URL = '/admin/login/'

# Redis and Celery
REDIS_URL = _config('REDIS_URL', '')
CELERY_BROKER_URL = REDIS_URL or 'memory://'
CELERY_RESULT_BACKEND = REDIS_URL or None
CELERY_ACCEPT_CONTENT = ['json']
CELERY_TASK_SERIALIZER = 'json'
CELERY_RESULT_SERIALIZER = 'json'
CELERY_TIMEZONE = TIME_ZONE
# Without a broker, run tasks inline
CELERY_TASK_ALWAYS_EAGER = _config_bool('CELERY_TASK_ALWAYS_EAGER', not REDIS_URL)

# Cache (daily counters live here)
if REDIS_URL:
    CACHES = {
        'default': {
            'BACKEND': 'django.core.cache.backends.redis.RedisCache',
            'LOCATION': REDIS_URL,
        }
    }
else:
    CACHES = {
        'default': {
            'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
            'LOCATION': 'tiktok-tracking',
        }
    }

# TikTok Events API
TIKTOK_PIXEL_ID = _config('TIKTOK_PIXEL_ID', '')
TIKTOK_ACCESS_TOKEN = _config('TIKTOK_ACCESS_TOKEN', '')
TIKTOK_API_VERSION = _config('TIKTOK_API_VERSION', '')
TIKTOK_TEST_EVENT_CODE = _config('TIKTOK_TEST_EVENT_CODE', '')
TIKTOK_TRACKING_ENABLED = _config_bool('TIKTOK_TRACKING_ENABLED', True)
TIKTOK_VALIDATE_EVENTS = _config_bool('TIKTOK_VALIDATE_EVENTS', False)
TIKTOK_SEARCH_PARAMS = ('s', 'q')
TIKTOK_DEFAULT_CURRENCY = _config('TIKTOK_DEFAULT_CURRENCY', 'EUR')

# Security settings for production
if not DEBUG:
    SECURE_CONTENT_TYPE_NOSNIFF = True
    X_FRAME_OPTIONS = 'DENY'
    SECURE_SSL_REDIRECT = _config_bool('SECURE_SSL_REDIRECT', False)
    SESSION_COOKIE_SECURE = SECURE_SSL_REDIRECT
    CSRF_COOKIE_SECURE = SECURE_SSL_REDIRECT

# Logging
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {module} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'file': {
            'level': 'ERROR',
            'class': 'logging.FileHandler',
            'filename': BASE_DIR / 'logs' / 'django.log',
            'formatter': 'verbose',
        },
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'INFO',
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'tracking': {
            'handlers': ['console', 'file'],
            'level': 'INFO',
            'propagate': False,
        },
    },
}

# Create logs directory
(BASE_DIR / 'logs').mkdir(exist_ok=True)
