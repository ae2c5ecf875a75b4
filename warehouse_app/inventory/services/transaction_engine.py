import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from ..exceptions import (
    AssetUnavailableError, InsufficientStockError, InventoryError,
    NotFoundError, ValidationError,
)
from ..models import Asset, Item, ItemKind, TransactionLog
from .transaction_log import TransactionLogService

logger = logging.getLogger(__name__)


class TransactionService:
    """Posting of stock movements against the catalog"""

    @staticmethod
    def post_transaction(item_id, movement_type, requester_name, area, acting_user_id,
                         quantity=None, asset_id=None, requested_at=None):
        """
        Validate and post one movement, returning the created log entry.

        Consumable items move stock by `quantity`; machine items move the
        asset given by `asset_id` between AVAILABLE and ON_LOAN. The stock or
        asset change and the log entry are written in one database
        transaction, so a rejected posting leaves nothing behind.
        """
        try:
            entry = TransactionService._post(
                item_id, movement_type, requester_name, area, acting_user_id,
                quantity, asset_id, requested_at,
            )
        except InventoryError as exc:
            logger.warning(
                f"[POSTING] Rejected {movement_type} for item {item_id}: {exc.code} ({exc.message})"
            )
            raise

        logger.info(
            f"[POSTING] {entry.movement_type} #{entry.pk} item={entry.item.code} "
            f"qty={entry.quantity} asset={entry.asset_id} user={entry.user_id}"
        )
        return entry

    @staticmethod
    @transaction.atomic
    def _post(item_id, movement_type, requester_name, area, acting_user_id,
              quantity, asset_id, requested_at):
        user = TransactionService._get_user(acting_user_id)

        if not (requester_name or '').strip() or not (area or '').strip():
            raise ValidationError('missing_required_field')
        if movement_type not in TransactionLog.MovementType.values:
            raise ValidationError('invalid_movement_type')

        try:
            item = Item.objects.select_for_update().get(pk=item_id)
        except (Item.DoesNotExist, ValueError, TypeError):
            raise NotFoundError('item', item_id)

        asset = None
        kind = item.kind
        if kind == ItemKind.CONSUMABLE:
            TransactionService._move_stock(item, movement_type, quantity)
        elif kind == ItemKind.MACHINE:
            asset = TransactionService._move_asset(item, movement_type, asset_id)
            quantity = None
        else:
            raise AssertionError(f"Unhandled item kind: {kind!r}")

        return TransactionLogService.append(
            requested_at=requested_at or timezone.now(),
            requester_name=requester_name.strip(),
            area=area.strip(),
            quantity=quantity,
            movement_type=movement_type,
            item=item,
            asset=asset,
            user=user,
        )

    @staticmethod
    def _get_user(user_id):
        User = get_user_model()
        try:
            return User.objects.get(pk=user_id)
        except (User.DoesNotExist, ValueError, TypeError):
            raise NotFoundError('user', user_id)

    @staticmethod
    def _move_stock(item, movement_type, quantity):
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError('missing_or_invalid_quantity')

        if movement_type == TransactionLog.MovementType.OUT:
            if item.stock < quantity:
                raise InsufficientStockError(item, quantity, item.stock)
            item.stock -= quantity
        else:
            item.stock += quantity

        item.save(update_fields=['stock', 'updated_at'])

    @staticmethod
    def _move_asset(item, movement_type, asset_id):
        asset = None
        if asset_id is not None:
            try:
                asset = Asset.objects.select_for_update().filter(pk=asset_id, item=item).first()
            except (ValueError, TypeError):
                asset = None
        if asset is None:
            raise NotFoundError('asset', asset_id)

        if movement_type == TransactionLog.MovementType.OUT:
            if asset.status != Asset.Status.AVAILABLE:
                raise AssetUnavailableError(asset)
            asset.status = Asset.Status.ON_LOAN
        else:
            asset.status = Asset.Status.AVAILABLE

        asset.save(update_fields=['status', 'updated_at'])
        return asset
