from django.apps import AppConfig


class LedgerbookCoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'ledgerbook_core'
    verbose_name = 'Ledgerbook Core'
