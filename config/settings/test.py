"""
Test settings - in-memory SQLite, fast password hashing.
"""
import os

os.environ.setdefault('STUDIO_SKIP_DB_CHECK', 'True')

from .base import *

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    },
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

LOGGING['root']['level'] = 'CRITICAL'
for _name in list(LOGGING['loggers']):
    LOGGING['loggers'][_name]['level'] = 'CRITICAL'
