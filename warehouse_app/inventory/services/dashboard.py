from datetime import datetime, time, timedelta

from dateutil.relativedelta import relativedelta
from django.db.models import Count
from django.db.models.functions import TruncDate
from django.utils import timezone

from ..conf import get_setting
from ..models import Asset, Item, TransactionLog


class DashboardService:
    """Read-only aggregates for the dashboard"""

    @staticmethod
    def current_month_bounds():
        """Start of this month and start of next month, in local time"""
        today = timezone.localdate()
        start = timezone.make_aware(datetime.combine(today.replace(day=1), time.min))
        return start, start + relativedelta(months=1)

    @staticmethod
    def dashboard_stats():
        month_start, next_month = DashboardService.current_month_bounds()
        return {
            'total_items': Item.objects.count(),
            'assets_on_loan': Asset.objects.on_loan().count(),
            'critical_stock': Item.objects.critical_stock().count(),
            'monthly_transactions': TransactionLog.objects.filter(
                requested_at__gte=month_start,
                requested_at__lt=next_month,
            ).count(),
        }

    @staticmethod
    def usage_trend(days, zero_fill=None):
        """
        Issue (OUT) counts per calendar day over the last `days` days,
        today included, ascending by date.

        With zero filling every day of the window is present; without it
        only days that saw at least one issue are returned.
        """
        if zero_fill is None:
            zero_fill = get_setting('USAGE_TREND_ZERO_FILL')
        if days < 1:
            return []

        today = timezone.localdate()
        first_day = today - timedelta(days=days - 1)

        rows = (
            TransactionLog.objects.issues()
            .filter(requested_at__date__gte=first_day, requested_at__date__lte=today)
            .annotate(day=TruncDate('requested_at'))
            .values('day')
            .annotate(count=Count('id'))
            .order_by('day')
        )
        counts = {row['day']: row['count'] for row in rows}

        if not zero_fill:
            return [{'date': day, 'count': count} for day, count in sorted(counts.items())]

        return [
            {'date': day, 'count': counts.get(day, 0)}
            for day in (first_day + timedelta(days=offset) for offset in range(days))
        ]

    @staticmethod
    def inventory_composition():
        rows = Item.objects.values('category').annotate(count=Count('id')).order_by('category')
        return [{'category': row['category'], 'count': row['count']} for row in rows]
