from django.apps import AppConfig


class LedgerbookAccountingConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'ledgerbook_accounting'
    verbose_name = 'Bookkeeping'
