import os
from pathlib import Path
from decouple import config


# BASE DIRECTORY
# BASE_DIR points to the project root (where manage.py is)
BASE_DIR = Path(__file__).resolve().parent.parent


# SECURITY SETTINGS

# SECURITY WARNING: keep the secret key used in production secret!
# Generate new key: python -c 'from django.core.management.utils import get_random_secret_key; print(get_random_secret_key())'
SECRET_KEY = config('SECRET_KEY', default='django-insecure-CHANGE-THIS-IN-PRODUCTION')

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = config('DEBUG', default=True, cast=bool)

# Format: 'domain.com,www.domain.com,api.domain.com'
ALLOWED_HOSTS = config('ALLOWED_HOSTS', default='localhost,127.0.0.1,0.0.0.0').split(',')


# INSTALLED APPS

INSTALLED_APPS = [
    # Django built-in apps
    'django.contrib.admin',  # Admin interface
    'django.contrib.auth',  # Authentication framework
    'django.contrib.contenttypes',  # Content types framework
    'django.contrib.sessions',  # Session framework
    'django.contrib.messages',  # Messaging framework
    'django.contrib.staticfiles',  # Static files management

    # Third-party apps
    'corsheaders',  # CORS headers support (intake webhook)
    'taggit',  # Campaign tags on leads

    # Our custom apps
    # IMPORTANT: accounts holds the custom user model
    'apps.accounts',  # Agents and the directory service
    'apps.core',  # Reference data (centres, languages, sources, statuses)
    'apps.leads',  # Lead workflow engine
]


# MIDDLEWARE

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',  # Security enhancements
    'django.contrib.sessions.middleware.SessionMiddleware',  # Session support
    'corsheaders.middleware.CorsMiddleware',  # CORS support (must be before CommonMiddleware)
    'django.middleware.common.CommonMiddleware',  # Common utilities
    'django.middleware.csrf.CsrfViewMiddleware',  # CSRF protection
    'django.contrib.auth.middleware.AuthenticationMiddleware',  # Authentication
    'django.contrib.messages.middleware.MessageMiddleware',  # Messages framework
    'django.middleware.clickjacking.XFrameOptionsMiddleware',  # Clickjacking protection
]


# URL CONFIGURATION

ROOT_URLCONF = 'config.urls'


# TEMPLATES
# Only the admin renders templates
TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',  # Debug info
                'django.template.context_processors.request',  # Request object
                'django.contrib.auth.context_processors.auth',  # User object
                'django.contrib.messages.context_processors.messages',  # Messages
            ],
        },
    },
]


# ASGI/WSGI APPLICATION

ASGI_APPLICATION = 'config.asgi.application'
WSGI_APPLICATION = 'config.wsgi.application'


# DATABASE

# PostgreSQL; row locks (SELECT ... FOR UPDATE) are part of the workflow
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': config('DB_NAME', default='leadflow_db'),
        'USER': config('DB_USER', default='leadflow_user'),
        'PASSWORD': config('DB_PASSWORD', default='leadflow_pass'),
        'HOST': config('DB_HOST', default='db'),  # 'db' is Docker service name
        'PORT': config('DB_PORT', default='5432'),

        'CONN_MAX_AGE': 600,  # Keep connection open for 10 minutes

        'OPTIONS': {
            'connect_timeout': 10,
        }
    }
}


# AUTHENTICATION

# IMPORTANT: This MUST be set before first migration!
AUTH_USER_MODEL = 'accounts.User'

# The JSON endpoints reuse the admin session
LOGIN_URL = '/admin/login/'


# INTERNATIONALIZATION

LANGUAGE_CODE = 'en-us'
TIME_ZONE = config('TIME_ZONE', default='Asia/Kolkata')
USE_I18N = True

# All datetimes in database are stored in UTC
USE_TZ = True


# STATIC FILES

STATIC_URL = '/static/'

# Directory where collectstatic collects admin assets
STATIC_ROOT = BASE_DIR / 'staticfiles'


# CORS HEADERS (Cross-Origin Resource Sharing)

# In development: allow all
# In production: only the lead capture sites
if DEBUG:
    CORS_ALLOW_ALL_ORIGINS = True
else:
    CORS_ALLOWED_ORIGINS = [origin for origin in config('CORS_ALLOWED_ORIGINS', default='').split(',') if origin]
    CORS_URLS_REGEX = r'^/leads/intake/$'


# CELERY (Background Tasks)

CELERY_BROKER_URL = config('REDIS_URL', default='redis://redis:6379/0')
CELERY_RESULT_BACKEND = config('REDIS_URL', default='redis://redis:6379/0')

# Task payloads must stay JSON (activity retries carry ISO datetimes)
CELERY_ACCEPT_CONTENT = ['json']
CELERY_TASK_SERIALIZER = 'json'
CELERY_RESULT_SERIALIZER = 'json'

CELERY_TIMEZONE = TIME_ZONE

# Celery task time limit (5 minutes)
CELERY_TASK_TIME_LIMIT = 5 * 60

# Celery task soft time limit (4 minutes - gives 1 min for cleanup)
CELERY_TASK_SOFT_TIME_LIMIT = 4 * 60


# LOGGING

LOG_DIR = BASE_DIR / 'logs'
os.makedirs(LOG_DIR, exist_ok=True)

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,

    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {module} {message}',
            'style': '{',
        },
        'simple': {
            'format': '{levelname} {message}',
            'style': '{',
        },
    },

    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
        'file': {
            'class': 'logging.handlers.RotatingFileHandler',
            'filename': LOG_DIR / 'django.log',
            'maxBytes': 1024 * 1024 * 10,  # 10 MB
            'backupCount': 5,
            'formatter': 'verbose',
        },
    },

    'loggers': {
        'django': {
            'handlers': ['console', 'file'],
            'level': config('LOG_LEVEL', default='INFO'),
            'propagate': True,
        },
        'apps': {  # Our custom apps
            'handlers': ['console', 'file'],
            'level': config('APPS_LOG_LEVEL', default='DEBUG'),
            'propagate': False,
        },
        'celery': {
            'handlers': ['console', 'file'],
            'level': config('LOG_LEVEL', default='INFO'),
            'propagate': False,
        },
    },
}


# LEAD WORKFLOW SETTINGS

# How many activity entries get_workflow_status returns
LEAD_RECENT_ACTIVITY_LIMIT = config('LEAD_RECENT_ACTIVITY_LIMIT', default=10, cast=int)

# Lock candidate agent rows (SELECT ... FOR UPDATE SKIP LOCKED) while picking
# the next one. Off: two simultaneous assignments may pick the same agent.
LEAD_ASSIGNMENT_LOCK_AGENTS = config('LEAD_ASSIGNMENT_LOCK_AGENTS', default=False, cast=bool)

# Seconds before a failed activity write is retried in the background
LEAD_ACTIVITY_RETRY_DELAY = config('LEAD_ACTIVITY_RETRY_DELAY', default=30, cast=int)

# Shared secret for the intake webhook (X-Intake-Secret header); empty disables the check
LEAD_INTAKE_SECRET = config('LEAD_INTAKE_SECRET', default='')


# SECURITY SETTINGS (Production)

if not DEBUG:
    SECURE_SSL_REDIRECT = True
    SESSION_COOKIE_SECURE = True
    CSRF_COOKIE_SECURE = True

    SECURE_CONTENT_TYPE_NOSNIFF = True
    X_FRAME_OPTIONS = 'DENY'

    # HSTS (HTTP Strict Transport Security)
    SECURE_HSTS_SECONDS = 31536000  # 1 year
    SECURE_HSTS_INCLUDE_SUBDOMAINS = True
    SECURE_HSTS_PRELOAD = True


# DEFAULT AUTO FIELD

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'
