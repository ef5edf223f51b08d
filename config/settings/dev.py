"""
Development settings
"""
from .base import *

DEBUG = True

# Verbose service logs while developing
for _name in ('classes', 'payments', 'reports'):
    LOGGING['loggers'][_name]['level'] = 'DEBUG'
