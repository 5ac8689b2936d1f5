"""
Django management command to verify a corporate buyer as the platform authority.
"""

from django.core.management.base import BaseCommand, CommandError
from carbon_ledger.errors import LedgerError
from carbon_ledger.services import get_ledger_service


class Command(BaseCommand):
    help = 'Verify a registered corporate buyer so it can purchase credits'

    def add_arguments(self, parser):
        parser.add_argument(
            'buyer',
            type=str,
            help='Identity of the registered buyer',
        )

    def handle(self, *args, **options):
        service = get_ledger_service()
        buyer = options['buyer']

        try:
            service.verify_buyer(service.authority, buyer)
        except LedgerError as e:
            raise CommandError(f"Buyer verification failed: {e.message}")

        self.stdout.write(self.style.SUCCESS(f"Buyer {buyer} verified"))
