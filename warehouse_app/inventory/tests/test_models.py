from django.contrib.auth.models import User
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models.deletion import ProtectedError
from django.test import TestCase

from ..exceptions import ImmutableLogError
from ..models import Asset, Item, ItemKind, TransactionLog


class ItemModelTest(TestCase):

    def setUp(self):
        self.chemical = Item.objects.create(
            code='KB001', name='Floor cleaner', category=Item.Category.CHEMICAL,
            stock=10, unit='litre', minimum_stock=5
        )
        self.machine = Item.objects.create(
            code='VC001', name='Vacuum cleaner', category=Item.Category.MACHINE,
            unit='unit', minimum_stock=5
        )

    def test_str(self):
        self.assertEqual(str(self.chemical), 'KB001 - Floor cleaner')

    def test_kind_follows_category(self):
        """CHEMICAL and EQUIPMENT are consumables, MACHINE is tracked by assets"""
        equipment = Item.objects.create(
            code='PR001', name='Mop', category=Item.Category.EQUIPMENT, unit='piece'
        )
        self.assertEqual(self.chemical.kind, ItemKind.CONSUMABLE)
        self.assertEqual(equipment.kind, ItemKind.CONSUMABLE)
        self.assertEqual(self.machine.kind, ItemKind.MACHINE)

    def test_unknown_category_has_no_kind(self):
        self.chemical.category = 'FURNITURE'
        with self.assertRaises(ValueError):
            self.chemical.kind

    def test_is_critical(self):
        self.assertFalse(self.chemical.is_critical)
        self.chemical.stock = 5
        self.assertTrue(self.chemical.is_critical)

    def test_machine_is_never_critical(self):
        self.assertEqual(self.machine.stock, 0)
        self.assertFalse(self.machine.is_critical)

    def test_critical_stock_queryset(self):
        low = Item.objects.create(
            code='KB002', name='Glass cleaner', category=Item.Category.CHEMICAL,
            stock=2, unit='litre', minimum_stock=3
        )
        self.assertEqual(list(Item.objects.critical_stock()), [low])

    def test_is_in_use(self):
        self.assertFalse(self.machine.is_in_use())
        Asset.objects.create(serial_number='VC001-001', item=self.machine)
        self.assertTrue(self.machine.is_in_use())


class AssetModelTest(TestCase):

    def setUp(self):
        self.machine = Item.objects.create(
            code='VC001', name='Vacuum cleaner', category=Item.Category.MACHINE, unit='unit'
        )

    def test_default_status_is_available(self):
        asset = Asset.objects.create(serial_number='VC001-001', item=self.machine)
        self.assertEqual(asset.status, Asset.Status.AVAILABLE)
        self.assertTrue(asset.is_available)

    def test_clean_rejects_consumable_item(self):
        chemical = Item.objects.create(
            code='KB001', name='Floor cleaner', category=Item.Category.CHEMICAL, unit='litre'
        )
        asset = Asset(serial_number='X-1', item=chemical)
        with self.assertRaises(DjangoValidationError):
            asset.clean()

    def test_item_with_assets_is_protected(self):
        Asset.objects.create(serial_number='VC001-001', item=self.machine)
        with self.assertRaises(ProtectedError):
            self.machine.delete()


class TransactionLogModelTest(TestCase):
    """Log entries are append-only"""

    def setUp(self):
        self.user = User.objects.create_user(username='gudang', password='pass12345')
        self.item = Item.objects.create(
            code='KB001', name='Floor cleaner', category=Item.Category.CHEMICAL,
            stock=10, unit='litre'
        )
        self.entry = TransactionLog.objects.create(
            requester_name='Budi', area='Lobby', quantity=2,
            movement_type=TransactionLog.MovementType.OUT,
            item=self.item, user=self.user
        )

    def test_requested_at_defaults_to_now(self):
        self.assertIsNotNone(self.entry.requested_at)

    def test_save_existing_entry_is_refused(self):
        self.entry.quantity = 5
        with self.assertRaises(ImmutableLogError):
            self.entry.save()
        self.entry.refresh_from_db()
        self.assertEqual(self.entry.quantity, 2)

    def test_delete_is_refused(self):
        with self.assertRaises(ImmutableLogError):
            self.entry.delete()
        self.assertEqual(TransactionLog.objects.count(), 1)

    def test_bulk_update_and_delete_are_refused(self):
        with self.assertRaises(ImmutableLogError):
            TransactionLog.objects.filter(pk=self.entry.pk).update(quantity=9)
        with self.assertRaises(ImmutableLogError):
            TransactionLog.objects.all().delete()

    def test_issues_queryset(self):
        TransactionLog.objects.create(
            requester_name='Sari', area='Lobby', quantity=1,
            movement_type=TransactionLog.MovementType.IN,
            item=self.item, user=self.user
        )
        self.assertEqual(list(TransactionLog.objects.issues()), [self.entry])
