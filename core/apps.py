import logging
from django.apps import AppConfig
from django.db import connection

logger = logging.getLogger(__name__)


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'core'
    verbose_name = 'Core (clock, money, errors)'

    def ready(self):
        vendor = connection.vendor
        logger.info('DB=%s', vendor)
