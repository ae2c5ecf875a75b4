from django.core.management.base import BaseCommand
from django.db.models import F, Q

from ...models import Asset, Item, TransactionLog


class Command(BaseCommand):
    help = 'Check inventory data for inconsistencies'

    def handle(self, *args, **options):
        self.stdout.write(self.style.SUCCESS('Checking data integrity...\n'))

        errors = []
        warnings = []

        self.stdout.write('🔍 Checking items...')
        item_issues = self._check_items()
        errors.extend(item_issues['errors'])
        warnings.extend(item_issues['warnings'])

        self.stdout.write('🔍 Checking assets...')
        asset_issues = self._check_assets()
        errors.extend(asset_issues['errors'])
        warnings.extend(asset_issues['warnings'])

        self.stdout.write('🔍 Checking transaction log...')
        log_issues = self._check_transaction_log()
        errors.extend(log_issues['errors'])
        warnings.extend(log_issues['warnings'])

        self.stdout.write('\n' + '=' * 50 + '\n')

        if errors:
            self.stdout.write(self.style.ERROR(f'❌ Found {len(errors)} errors:'))
            for error in errors:
                self.stdout.write(self.style.ERROR(f'   - {error}'))
        else:
            self.stdout.write(self.style.SUCCESS('✅ No errors found'))

        if warnings:
            self.stdout.write(self.style.WARNING(f'\n⚠️  Found {len(warnings)} warnings:'))
            for warning in warnings:
                self.stdout.write(self.style.WARNING(f'   - {warning}'))

        self.stdout.write('\n' + '=' * 50)
        self.stdout.write(self.style.SUCCESS('✅ Integrity check finished'))

    def _check_items(self):
        errors = []
        warnings = []

        for item in Item.objects.filter(Q(stock__lt=0) | Q(minimum_stock__lt=0)):
            errors.append(f'Item {item.code}: negative stock ({item.stock}) or minimum ({item.minimum_stock})')

        for item in Item.objects.critical_stock():
            warnings.append(f'Item {item.code}: stock {item.stock} at or below minimum {item.minimum_stock}')

        return {'errors': errors, 'warnings': warnings}

    def _check_assets(self):
        errors = []
        warnings = []

        misplaced = Asset.objects.exclude(item__category=Item.Category.MACHINE).select_related('item')
        for asset in misplaced:
            errors.append(f'Asset {asset.serial_number}: attached to non-machine item {asset.item.code}')

        for asset in Asset.objects.on_loan():
            latest = asset.transaction_logs.order_by('-requested_at', '-created_at', '-id').first()
            if latest is None or latest.movement_type != TransactionLog.MovementType.OUT:
                errors.append(f'Asset {asset.serial_number}: on loan but its latest movement is not an issue')

        return {'errors': errors, 'warnings': warnings}

    def _check_transaction_log(self):
        errors = []
        warnings = []

        entries = TransactionLog.objects.with_relations()

        consumable_mismatch = entries.filter(item__category__in=Item.CONSUMABLE_CATEGORIES).filter(
            Q(quantity__isnull=True) | Q(asset__isnull=False)
        )
        for entry in consumable_mismatch:
            errors.append(f'Log #{entry.pk}: consumable {entry.item.code} without quantity or with an asset')

        machine_mismatch = entries.filter(item__category=Item.Category.MACHINE).filter(
            Q(asset__isnull=True) | Q(quantity__isnull=False)
        )
        for entry in machine_mismatch:
            errors.append(f'Log #{entry.pk}: machine {entry.item.code} without asset or with a quantity')

        foreign_assets = entries.filter(asset__isnull=False).exclude(asset__item=F('item'))
        for entry in foreign_assets:
            errors.append(f'Log #{entry.pk}: asset {entry.asset.serial_number} does not belong to {entry.item.code}')

        return {'errors': errors, 'warnings': warnings}
