import logging

from django.db import transaction

from ..exceptions import NotFoundError, ValidationError
from ..models import Asset, Item

logger = logging.getLogger(__name__)


ITEM_FIELDS = ('code', 'name', 'category', 'stock', 'unit', 'minimum_stock')
ASSET_FIELDS = ('serial_number', 'status', 'item')

# statuses the catalog may set; ON_LOAN belongs to the transaction engine
MANAGED_STATUSES = (Asset.Status.AVAILABLE, Asset.Status.UNDER_REPAIR)


class CatalogService:
    """Item and asset management"""

    # Items

    @staticmethod
    def get_item(item_id, for_update=False):
        items = Item.objects.select_for_update() if for_update else Item.objects
        try:
            return items.get(pk=item_id)
        except (Item.DoesNotExist, ValueError, TypeError):
            raise NotFoundError('item', item_id)

    @staticmethod
    def list_items():
        return Item.objects.all()

    @staticmethod
    def list_items_by_category(category):
        if category not in Item.Category.values:
            raise ValidationError('invalid_category')
        return Item.objects.filter(category=category)

    @staticmethod
    def list_critical_stock_items():
        return Item.objects.critical_stock().order_by('stock', 'code')

    @staticmethod
    @transaction.atomic
    def create_item(**fields):
        data = {key: value for key, value in fields.items() if key in ITEM_FIELDS}
        if data.get('category') not in Item.Category.values:
            raise ValidationError('invalid_category')
        if Item.objects.filter(code=data.get('code')).exists():
            raise ValidationError('duplicate_code')

        item = Item.objects.create(**data)
        logger.info(f"[CATALOG] Created item {item.code} ({item.category})")
        return item

    @staticmethod
    @transaction.atomic
    def update_item(item_id, **fields):
        """Partial update; fields left out keep their current value."""
        item = CatalogService.get_item(item_id, for_update=True)
        data = {key: value for key, value in fields.items() if key in ITEM_FIELDS}

        if 'code' in data and data['code'] != item.code:
            raise ValidationError('immutable_code')

        if 'category' in data and data['category'] != item.category:
            if data['category'] not in Item.Category.values:
                raise ValidationError('invalid_category')
            if item.is_in_use():
                raise ValidationError('category_locked')

        for field, value in data.items():
            setattr(item, field, value)
        item.save(update_fields=[*data, 'updated_at'])
        return item

    @staticmethod
    @transaction.atomic
    def delete_item(item_id):
        item = CatalogService.get_item(item_id)
        if item.is_in_use():
            raise ValidationError('item_in_use')
        item.delete()
        logger.info(f"[CATALOG] Deleted item {item.code}")

    # Assets

    @staticmethod
    def get_asset(asset_id):
        try:
            return Asset.objects.select_related('item').get(pk=asset_id)
        except (Asset.DoesNotExist, ValueError, TypeError):
            raise NotFoundError('asset', asset_id)

    @staticmethod
    def list_assets():
        return Asset.objects.select_related('item')

    @staticmethod
    def list_available_assets_by_item(item_id):
        return Asset.objects.available().filter(item_id=item_id).select_related('item')

    @staticmethod
    def _resolve_machine(item):
        if not isinstance(item, Item):
            item = CatalogService.get_item(item)
        if item.category != Item.Category.MACHINE:
            raise ValidationError('item_not_machine')
        return item

    @staticmethod
    @transaction.atomic
    def create_asset(**fields):
        data = {key: value for key, value in fields.items() if key in ASSET_FIELDS}
        data['item'] = CatalogService._resolve_machine(data.get('item'))

        status = data.setdefault('status', Asset.Status.AVAILABLE)
        if status != Asset.Status.AVAILABLE:
            raise ValidationError('invalid_asset_status')
        if Asset.objects.filter(serial_number=data.get('serial_number')).exists():
            raise ValidationError('duplicate_serial_number')

        asset = Asset.objects.create(**data)
        logger.info(f"[CATALOG] Registered asset {asset.serial_number} for {asset.item.code}")
        return asset

    @staticmethod
    @transaction.atomic
    def update_asset(asset_id, **fields):
        """Partial update; status may only move between AVAILABLE and UNDER_REPAIR."""
        asset = CatalogService.get_asset(asset_id)
        # lock in the same order as postings: item row, then the asset row
        Item.objects.select_for_update().filter(pk=asset.item_id).first()
        asset = Asset.objects.select_for_update().get(pk=asset.pk)
        data = {key: value for key, value in fields.items() if key in ASSET_FIELDS}

        if 'status' in data and data['status'] != asset.status:
            if asset.status == Asset.Status.ON_LOAN:
                raise ValidationError('asset_on_loan')
            if data['status'] not in MANAGED_STATUSES:
                raise ValidationError('invalid_asset_status')

        if 'item' in data:
            data['item'] = CatalogService._resolve_machine(data['item'])

        serial = data.get('serial_number')
        if serial and Asset.objects.filter(serial_number=serial).exclude(pk=asset.pk).exists():
            raise ValidationError('duplicate_serial_number')

        for field, value in data.items():
            setattr(asset, field, value)
        asset.save(update_fields=[*data, 'updated_at'])
        return asset

    @staticmethod
    @transaction.atomic
    def delete_asset(asset_id):
        asset = CatalogService.get_asset(asset_id)
        if asset.transaction_logs.exists():
            raise ValidationError('asset_in_use')
        asset.delete()
        logger.info(f"[CATALOG] Deleted asset {asset.serial_number}")
