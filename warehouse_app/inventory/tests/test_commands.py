from io import StringIO

from django.contrib.auth.models import User
from django.core.management import call_command
from django.test import TestCase

from ..models import Asset, Item, TransactionLog


class SeedDemoCommandTest(TestCase):

    def test_seed_demo(self):
        out = StringIO()
        call_command('seed_demo', transactions=15, stdout=out)

        self.assertEqual(Item.objects.count(), 10)
        self.assertEqual(Asset.objects.count(), 7)
        self.assertTrue(User.objects.filter(username='admin@example.com', is_staff=True).exists())
        self.assertLessEqual(TransactionLog.objects.count(), 15)
        self.assertIn('Demo data created', out.getvalue())

    def test_seed_demo_twice_with_clear(self):
        call_command('seed_demo', transactions=5, stdout=StringIO())
        call_command('seed_demo', '--clear', transactions=5, stdout=StringIO())

        self.assertEqual(Item.objects.count(), 10)
        self.assertLessEqual(TransactionLog.objects.count(), 5)


class CheckDataIntegrityCommandTest(TestCase):

    def test_seeded_data_is_consistent(self):
        call_command('seed_demo', transactions=20, stdout=StringIO())

        out = StringIO()
        call_command('check_data_integrity', stdout=out)
        self.assertIn('No errors found', out.getvalue())

    def test_reports_loaned_asset_without_issue(self):
        machine = Item.objects.create(
            code='VC001', name='Vacuum cleaner', category=Item.Category.MACHINE, unit='unit'
        )
        Asset.objects.create(serial_number='VC001-001', item=machine, status=Asset.Status.ON_LOAN)

        out = StringIO()
        call_command('check_data_integrity', stdout=out)
        self.assertIn('VC001-001', out.getvalue())
        self.assertIn('Found 1 errors', out.getvalue())
