"""
Tests for ledger management commands and configuration.
"""

import json
import os
from io import StringIO
from unittest.mock import patch

from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import connection
from django.db.migrations.recorder import MigrationRecorder
from django.test import SimpleTestCase, TestCase

from ..config import DEFAULT_AUTHORITY, get_authority, get_ledger_config
from ..models import CorporateBuyer
from ..services import get_ledger_service, reset_ledger_service
from .factories import BUYER


class TestLedgerConfig(SimpleTestCase):

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = get_ledger_config()

        self.assertEqual(config['authority'], DEFAULT_AUTHORITY)
        self.assertEqual(config['platform_fee_bps'], 250)
        self.assertEqual(config['initial_average_price'], 2500)
        self.assertEqual(config['limits']['max_practices'], 10)

    def test_environment_overrides(self):
        with patch.dict(os.environ, {'LEDGER_AUTHORITY': 'registry-admin', 'LEDGER_PLATFORM_FEE_BPS': '300'}):
            config = get_ledger_config()
            self.assertEqual(get_authority(), 'registry-admin')

        self.assertEqual(config['platform_fee_bps'], 300)
        self.assertEqual(get_authority(config), 'registry-admin')


class TestManagementCommands(TestCase):

    def setUp(self):
        reset_ledger_service()

    def tearDown(self):
        reset_ledger_service()

    def test_ledger_stats(self):
        out = StringIO()
        call_command('ledger_stats', stdout=out)

        output = json.loads(out.getvalue())
        self.assertEqual(output['platform']['average_price'], 2500)
        self.assertEqual(output['platform']['platform_fee_bps'], 250)
        self.assertEqual(output['marketplace']['transaction_count'], 0)

    def test_ledger_stats_single_section(self):
        out = StringIO()
        call_command('ledger_stats', section='marketplace', stdout=out)

        output = json.loads(out.getvalue())
        self.assertEqual(list(output), ['marketplace'])

    def test_verify_buyer(self):
        get_ledger_service().register_buyer(BUYER, 'Acme Corp', [], 5000)

        out = StringIO()
        call_command('verify_buyer', BUYER, stdout=out)

        self.assertIn(f"Buyer {BUYER} verified", out.getvalue())
        self.assertTrue(CorporateBuyer.objects.get(pk=BUYER).is_verified)

    def test_verify_unknown_buyer(self):
        with self.assertRaises(CommandError):
            call_command('verify_buyer', 'nobody', stdout=StringIO())


class TestLedgerMigrations(TestCase):

    def test_models_match_migrations(self):
        out = StringIO()
        call_command('makemigrations', 'carbon_ledger', check=True, dry_run=True, stdout=out)
        self.assertIn('No changes detected', out.getvalue())

    def test_migrate_creates_ledger_tables(self):
        applied = MigrationRecorder(connection).applied_migrations()
        self.assertIn(('carbon_ledger', '0001_initial'), applied)

        tables = connection.introspection.table_names()
        for table in ('ledger_farm', 'ledger_carbon_credit', 'ledger_platform_statistics', 'ledger_sequence'):
            self.assertIn(table, tables)
