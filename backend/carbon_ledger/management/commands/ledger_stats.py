"""
Django management command to print platform and marketplace statistics.
"""

import json
from django.core.management.base import BaseCommand
from carbon_ledger.services import get_ledger_service


class Command(BaseCommand):
    help = 'Print platform and marketplace statistics as JSON'

    def add_arguments(self, parser):
        parser.add_argument(
            '--section',
            type=str,
            choices=['platform', 'marketplace', 'all'],
            default='all',
            help='Which statistics to print (default: all)',
        )

    def handle(self, *args, **options):
        service = get_ledger_service()
        section = options['section']

        output = {}
        if section in ('platform', 'all'):
            output['platform'] = service.platform_statistics()
        if section in ('marketplace', 'all'):
            output['marketplace'] = service.marketplace_statistics()

        self.stdout.write(json.dumps(output, indent=2, sort_keys=True))
