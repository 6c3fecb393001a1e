"""
Django settings for supplier_evaluation project.
"""

import os
from pathlib import Path

# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent.parent

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = os.environ.get('DJANGO_DEBUG', 'True').lower() == 'true'

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY')
if not SECRET_KEY:
    if DEBUG:
        SECRET_KEY = 'django-insecure-dev-key-for-development-only-change-in-production'
    else:
        raise ValueError("生产环境必须通过DJANGO_SECRET_KEY环境变量设置SECRET_KEY")

# 允许访问的主机（生产请通过环境变量显式配置）
default_allowed_hosts = ['127.0.0.1', 'localhost', 'testserver']
env_allowed_hosts = [
    host.strip() for host in os.environ.get('DJANGO_ALLOWED_HOSTS', '').split(',')
    if host.strip()
]
ALLOWED_HOSTS = env_allowed_hosts if env_allowed_hosts else default_allowed_hosts

# ============================================================================
# 安全头部配置
# ============================================================================
SECURE_CONTENT_TYPE_NOSNIFF = True
SECURE_CROSS_ORIGIN_OPENER_POLICY = 'same-origin'
X_FRAME_OPTIONS = 'DENY'
SECURE_REFERRER_POLICY = 'same-origin'

# Application definition
INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    # Django REST Framework 与 OpenAPI 文档
    'rest_framework',
    'drf_spectacular',

    # 业务应用
    'supplier_eval.apps.SupplierEvalConfig',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
    # 请求耗时监控
    'supplier_eval.middleware.RequestTimingMiddleware',
]

ROOT_URLCONF = 'config.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
            'debug': DEBUG,
        },
    },
]

WSGI_APPLICATION = 'config.wsgi.application'

REST_FRAMEWORK = {
    'DEFAULT_SCHEMA_CLASS': 'drf_spectacular.openapi.AutoSchema',
    # 评价API无登录态，不做会话认证
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': ['rest_framework.permissions.AllowAny'],
    'EXCEPTION_HANDLER': 'supplier_eval.views.api_exception_handler',
}

SPECTACULAR_SETTINGS = {
    'TITLE': '供应商绩效评价系统 API',
    'DESCRIPTION': '供应商绩效评价的提交、查询与评分量表接口文档',
    'VERSION': '1.0.0',
    'SERVE_INCLUDE_SCHEMA': False,
}

# ============================================================================
# 数据库配置
# SUPPLIER_EVAL_DB_ENGINE: sqlite（默认）/ mysql / postgresql
# ============================================================================
DB_ENGINE = os.environ.get('SUPPLIER_EVAL_DB_ENGINE', 'sqlite').lower()

if DB_ENGINE == 'sqlite':
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': os.environ.get('SUPPLIER_EVAL_DB_NAME', BASE_DIR / 'db.sqlite3'),
            'CONN_MAX_AGE': 600,
            'CONN_HEALTH_CHECKS': True,
            'OPTIONS': {
                'timeout': 20,  # 防止数据库锁定
            },
            'ATOMIC_REQUESTS': False,
        }
    }
elif DB_ENGINE in ('mysql', 'postgresql'):
    DATABASES = {
        'default': {
            'ENGINE': f'django.db.backends.{DB_ENGINE}',
            'NAME': os.environ.get('SUPPLIER_EVAL_DB_NAME', 'srm_db'),
            'USER': os.environ.get('SUPPLIER_EVAL_DB_USER', 'root' if DB_ENGINE == 'mysql' else 'postgres'),
            'PASSWORD': os.environ.get('SUPPLIER_EVAL_DB_PASSWORD', ''),
            'HOST': os.environ.get('SUPPLIER_EVAL_DB_HOST', 'localhost'),
            'PORT': os.environ.get('SUPPLIER_EVAL_DB_PORT', '3306' if DB_ENGINE == 'mysql' else '5432'),
            'CONN_MAX_AGE': 600,
            'CONN_HEALTH_CHECKS': True,
            'ATOMIC_REQUESTS': False,
        }
    }
else:
    raise ValueError(f"不支持的数据库类型: {DB_ENGINE}（可选 sqlite / mysql / postgresql）")

# Password validation
AUTH_PASSWORD_VALIDATORS = [
    {
        'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator',
    },
    {
        'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator',
    },
    {
        'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator',
    },
    {
        'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator',
    },
]

# Internationalization
LANGUAGE_CODE = 'en-us'
TIME_ZONE = os.environ.get('DJANGO_TIME_ZONE', 'Asia/Kolkata')
USE_I18N = True
USE_TZ = True

# Session安全设置
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = 'Lax'
SESSION_COOKIE_SECURE = False if DEBUG else True

# 前端通过 X-CSRFToken 提交，CSRF Cookie 需允许 JavaScript 读取
CSRF_COOKIE_HTTPONLY = False
CSRF_COOKIE_SECURE = False if DEBUG else True

# Static files (CSS, JavaScript, Images)
STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

# Default primary key field type
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Admin site customization
ADMIN_SITE_HEADER = '供应商绩效评价系统'
ADMIN_SITE_TITLE = '供应商评价'
ADMIN_INDEX_TITLE = '欢迎使用供应商绩效评价系统'

# ============================================================================
# 日志配置
# ============================================================================
LOG_LEVEL = os.environ.get('DJANGO_LOG_LEVEL', 'INFO').upper()

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '[{asctime}] {levelname} {name}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'loggers': {
        'supplier_eval': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
        'performance': {
            'handlers': ['console'],
            'level': 'WARNING',
            'propagate': False,
        },
    },
}

# ============================================================================
# 供应商评价配置
# ============================================================================
SUPPLIER_EVAL_CONFIG = {
    'RUBRIC_PATH': os.environ.get(
        'SUPPLIER_EVAL_RUBRIC_PATH',
        BASE_DIR / 'supplier_eval' / 'config' / 'rubric.yml',
    ),
    'DATABASE_ALIAS': 'default',
    'RECENT_LIMIT': 100,  # 最近评价列表最大条数
    'LISTEN_ADDRESS': os.environ.get('SUPPLIER_EVAL_LISTEN', '0.0.0.0:3000'),
    # 启动时存储连通性检查
    'STARTUP_CONNECT_ATTEMPTS': int(os.environ.get('SUPPLIER_EVAL_STARTUP_ATTEMPTS', '3')),
    'STARTUP_RETRY_DELAY': float(os.environ.get('SUPPLIER_EVAL_STARTUP_DELAY', '2')),
    # 存储不可用时：True 终止启动，False 降级运行
    'FAIL_FAST_ON_STORE_UNAVAILABLE': os.environ.get(
        'SUPPLIER_EVAL_FAIL_FAST', 'True'
    ).lower() == 'true',
    'SLOW_REQUEST_THRESHOLD': 1.0,  # 慢请求阈值（秒）
}
