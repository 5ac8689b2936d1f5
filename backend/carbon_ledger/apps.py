from django.apps import AppConfig


class CarbonLedgerConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'carbon_ledger'
    verbose_name = 'Carbon Ledger'
