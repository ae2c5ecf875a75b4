import random
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone
from faker import Faker

from ...exceptions import InventoryError
from ...models import Asset, Item, TransactionLog
from ...services import CatalogService, TransactionService

User = get_user_model()


CONSUMABLES = [
    ('KB001', 'Floor cleaner concentrate', Item.Category.CHEMICAL, 'litre', 10),
    ('KB002', 'Glass cleaner', Item.Category.CHEMICAL, 'litre', 8),
    ('KB003', 'Disinfectant', Item.Category.CHEMICAL, 'litre', 12),
    ('KB004', 'Toilet bowl cleaner', Item.Category.CHEMICAL, 'bottle', 15),
    ('PR001', 'Microfiber cloth', Item.Category.EQUIPMENT, 'piece', 20),
    ('PR002', 'Mop head', Item.Category.EQUIPMENT, 'piece', 10),
    ('PR003', 'Trash bags (large)', Item.Category.EQUIPMENT, 'box', 5),
]

MACHINES = [
    ('VC001', 'Vacuum cleaner', 3),
    ('FS001', 'Floor scrubber', 2),
    ('PW001', 'Pressure washer', 2),
]


class Command(BaseCommand):
    help = 'Generate demo users, items, assets and transactions'

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fake = Faker('id_ID')

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Delete existing inventory data before seeding'
        )
        parser.add_argument(
            '--transactions',
            type=int,
            default=40,
            help='Number of movements to post'
        )

    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write(self.style.WARNING('Deleting existing inventory data...'))
            self._clear_data()

        self.stdout.write(self.style.SUCCESS('Creating demo data...'))

        with transaction.atomic():
            users = self._create_users()
            self.stdout.write(self.style.SUCCESS(f'✓ {len(users)} users'))

            items = self._create_items()
            self.stdout.write(self.style.SUCCESS(f'✓ {len(items)} items'))

            assets = self._create_assets()
            self.stdout.write(self.style.SUCCESS(f'✓ {len(assets)} assets'))

            posted = self._post_transactions(users, options['transactions'])
            self.stdout.write(self.style.SUCCESS(f'✓ {posted} transactions'))

        self.stdout.write(self.style.SUCCESS('\nDemo data created. Log in with:'))
        self.stdout.write(self.style.SUCCESS('   email: admin@example.com'))
        self.stdout.write(self.style.SUCCESS('   password: admin123'))

    def _clear_data(self):
        # the default manager refuses bulk deletes of log entries
        TransactionLog._base_manager.all().delete()
        Asset.objects.all().delete()
        Item.objects.all().delete()
        User.objects.filter(is_superuser=False).delete()

    def _create_users(self):
        users = []

        admin_user, created = User.objects.get_or_create(
            username='admin@example.com',
            defaults={
                'email': 'admin@example.com',
                'is_staff': True,
                'is_superuser': True,
            }
        )
        if created:
            admin_user.set_password('admin123')
            admin_user.save()
        users.append(admin_user)

        for i in range(3):
            email = f'staff{i + 1}@example.com'
            user, created = User.objects.get_or_create(
                username=email,
                defaults={
                    'email': email,
                    'first_name': self.fake.first_name(),
                    'last_name': self.fake.last_name(),
                }
            )
            if created:
                user.set_password('password123')
                user.save()
            users.append(user)

        return users

    def _create_items(self):
        items = []
        for code, name, category, unit, minimum in CONSUMABLES:
            item = Item.objects.filter(code=code).first()
            if item is None:
                item = CatalogService.create_item(
                    code=code,
                    name=name,
                    category=category,
                    unit=unit,
                    stock=random.randint(minimum, minimum * 6),
                    minimum_stock=minimum,
                )
            items.append(item)

        for code, name, _ in MACHINES:
            item = Item.objects.filter(code=code).first()
            if item is None:
                item = CatalogService.create_item(
                    code=code,
                    name=name,
                    category=Item.Category.MACHINE,
                    unit='unit',
                )
            items.append(item)

        return items

    def _create_assets(self):
        assets = []
        for code, _, count in MACHINES:
            item = Item.objects.get(code=code)
            for number in range(1, count + 1):
                serial = f'{code}-{number:03d}'
                asset = Asset.objects.filter(serial_number=serial).first()
                if asset is None:
                    asset = CatalogService.create_asset(serial_number=serial, item=item)
                assets.append(asset)
        return assets

    def _post_transactions(self, users, count):
        """Post random movements through the engine, oldest first"""
        now = timezone.now()
        moments = sorted(
            now - timedelta(days=random.randint(0, 29), hours=random.randint(0, 8))
            for _ in range(count)
        )
        areas = [f'{self.fake.city()} - Floor {random.randint(1, 12)}' for _ in range(6)]

        posted = 0
        for moment in moments:
            item = random.choice(list(Item.objects.all()))
            kwargs = {
                'item_id': item.pk,
                'requester_name': self.fake.name(),
                'area': random.choice(areas),
                'acting_user_id': random.choice(users).pk,
                'requested_at': moment,
            }

            if item.is_consumable:
                kwargs['movement_type'] = random.choice(['OUT', 'OUT', 'OUT', 'IN'])
                kwargs['quantity'] = random.randint(1, 5)
            else:
                on_loan = list(item.assets.on_loan())
                available = list(item.assets.available())
                if on_loan and (not available or random.random() < 0.4):
                    kwargs['movement_type'] = 'IN'
                    kwargs['asset_id'] = random.choice(on_loan).pk
                elif available:
                    kwargs['movement_type'] = 'OUT'
                    kwargs['asset_id'] = random.choice(available).pk
                else:
                    continue

            try:
                TransactionService.post_transaction(**kwargs)
            except InventoryError as exc:
                self.stdout.write(self.style.WARNING(f'  skipped {item.code}: {exc.message}'))
                continue
            posted += 1

        return posted
