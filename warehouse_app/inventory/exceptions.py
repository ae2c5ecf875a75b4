"""
Typed errors raised by the inventory services.

Every error carries a machine-readable ``code`` and the HTTP status the API
layer answers with, so callers catch by type instead of parsing messages:

    InventoryError
    +-- NotFoundError            unknown item/asset/user reference
    +-- ValidationError          missing or invalid request field
    +-- InsufficientStockError   issue quantity exceeds stock
    +-- AssetUnavailableError    asset is not AVAILABLE when issuing
    +-- ImmutableLogError        attempt to change a posted log entry
"""


class InventoryError(Exception):
    """Base class for inventory errors."""

    code = 'inventory_error'
    status_code = 400
    default_message = 'Inventory operation failed'

    def __init__(self, message=None, code=None):
        self.message = message or self.default_message
        if code:
            self.code = code
        super().__init__(self.message)

    def as_dict(self):
        return {'message': self.message, 'code': self.code}


class NotFoundError(InventoryError):
    """A referenced item, asset or user does not exist."""

    status_code = 404

    def __init__(self, entity, entity_id=None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(
            message=f'{entity.capitalize()} not found',
            code=f'{entity}_not_found',
        )


class ValidationError(InventoryError):
    code = 'validation_error'
    default_message = 'Invalid request'

    MESSAGES = {
        'missing_or_invalid_quantity': 'Quantity required for consumable items',
        'missing_required_field': 'Requester name and area are required',
        'invalid_movement_type': 'Movement type must be OUT or IN',
        'item_in_use': 'Item is referenced by assets or transactions',
        'asset_in_use': 'Asset is referenced by transactions',
        'immutable_code': 'Item code cannot be changed',
        'category_locked': 'Category cannot change once the item has assets or transactions',
        'duplicate_code': 'An item with this code already exists',
        'duplicate_serial_number': 'An asset with this serial number already exists',
        'invalid_asset_status': 'Asset status can only be set to AVAILABLE or UNDER_REPAIR',
        'asset_on_loan': 'Asset is on loan and can only be returned through a transaction',
        'item_not_machine': 'Assets can only belong to machine items',
        'invalid_category': 'Category must be CHEMICAL, EQUIPMENT or MACHINE',
        'invalid_date': 'Dates must be given as YYYY-MM-DD',
        'invalid_date_range': 'Start date must not be after end date',
    }

    def __init__(self, code, message=None):
        super().__init__(message=message or self.MESSAGES.get(code), code=code)


class InsufficientStockError(InventoryError):
    code = 'insufficient_stock'

    def __init__(self, item, requested, available):
        self.item = item
        self.requested = requested
        self.available = available
        super().__init__(
            f'Insufficient stock for {item.code}: requested {requested}, available {available}'
        )


class AssetUnavailableError(InventoryError):
    code = 'asset_unavailable'

    def __init__(self, asset):
        self.asset = asset
        super().__init__(
            f'Asset {asset.serial_number} is not available (status {asset.status})'
        )


class ImmutableLogError(InventoryError):
    code = 'immutable_log'
    default_message = 'Transaction log entries cannot be changed or deleted'
