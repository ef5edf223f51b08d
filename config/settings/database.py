"""
PostgreSQL connection for the ledger.
.env has already been read by base.py when this runs; test settings replace
DATABASES with in-memory SQLite and set STUDIO_SKIP_DB_CHECK.
"""
from django.core.exceptions import ImproperlyConfigured

POSTGRES_ENGINE = 'django.db.backends.postgresql'


def _config_from_parts(env):
    name = env.str('DB_NAME', default='').strip()
    user = env.str('DB_USER', default='').strip()
    if not (name and user):
        return None
    return {
        'ENGINE': POSTGRES_ENGINE,
        'NAME': name,
        'USER': user,
        'PASSWORD': env.str('DB_PASSWORD', default=''),
        'HOST': env.str('DB_HOST', default='localhost'),
        'PORT': env.str('DB_PORT', default='5432'),
    }


def get_database_config(env):
    """
    DATABASES['default'] from DATABASE_URL, or from DB_NAME / DB_USER
    (plus DB_PASSWORD, DB_HOST, DB_PORT) when no URL is given.
    """
    url = env.str('DATABASE_URL', default='').strip()
    config = env.db_url_config(url) if url else _config_from_parts(env)

    if config is None:
        if env.bool('STUDIO_SKIP_DB_CHECK', default=False):
            return {}
        raise ImproperlyConfigured(
            'No ledger database configured: set DATABASE_URL or DB_NAME and DB_USER.'
        )

    config.setdefault('CONN_MAX_AGE', env.int('DB_CONN_MAX_AGE', default=0))
    config.setdefault('OPTIONS', {})
    config['OPTIONS'].setdefault('connect_timeout', env.int('DB_CONNECT_TIMEOUT', default=10))
    return config
