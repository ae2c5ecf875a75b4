from .items import Item, ItemKind
from .assets import Asset
from .transactions import TransactionLog

__all__ = [
    'Item',
    'ItemKind',
    'Asset',
    'TransactionLog',
]
