from .catalog import CatalogService
from .transaction_log import TransactionLogService
from .transaction_engine import TransactionService
from .dashboard import DashboardService
from .reports import ReportService

__all__ = [
    'CatalogService',
    'TransactionLogService',
    'TransactionService',
    'DashboardService',
    'ReportService',
]
