from datetime import date, datetime

from ..exceptions import NotFoundError
from ..models import TransactionLog


class TransactionLogService:
    """Read and append access to the transaction log"""

    @staticmethod
    def append(**fields):
        """Append a log entry. Only the transaction engine should call this."""
        return TransactionLog.objects.create(**fields)

    @staticmethod
    def get(entry_id):
        try:
            return TransactionLog.objects.with_relations().get(pk=entry_id)
        except (TransactionLog.DoesNotExist, ValueError, TypeError):
            raise NotFoundError('transaction', entry_id)

    @staticmethod
    def list_all():
        return TransactionLog.objects.with_relations()

    @staticmethod
    def list_recent(limit):
        return TransactionLog.objects.with_relations().order_by(
            '-requested_at', '-created_at', '-id'
        )[:limit]

    @staticmethod
    def list_by_date_range(start=None, end=None):
        """
        Entries requested between start and end, both inclusive.

        A bound given as a date covers the whole calendar day in the current
        time zone; a datetime bound is compared as is.
        """
        entries = TransactionLog.objects.with_relations()
        entries = TransactionLogService.filter_date_range(entries, start, end)
        return entries.order_by('-requested_at', '-created_at', '-id')

    @staticmethod
    def filter_date_range(queryset, start=None, end=None):
        if isinstance(start, datetime):
            queryset = queryset.filter(requested_at__gte=start)
        elif isinstance(start, date):
            queryset = queryset.filter(requested_at__date__gte=start)

        if isinstance(end, datetime):
            queryset = queryset.filter(requested_at__lte=end)
        elif isinstance(end, date):
            queryset = queryset.filter(requested_at__date__lte=end)

        return queryset
