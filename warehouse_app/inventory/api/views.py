from datetime import timedelta

from dateutil import parser as date_parser
from django.utils import timezone
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..conf import get_setting
from ..exceptions import ValidationError
from ..services import (
    CatalogService, DashboardService, ReportService,
    TransactionLogService, TransactionService,
)
from .serializers import (
    AssetSerializer, ItemSerializer, TransactionLogSerializer,
    TransactionPostSerializer,
)


def parse_date_param(value):
    if not value:
        return None
    try:
        return date_parser.isoparse(value).date()
    except (ValueError, OverflowError):
        raise ValidationError('invalid_date')


def parse_positive_int(value, default):
    """Positive integer from a URL segment, or the default when invalid or zero"""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


class ItemViewSet(viewsets.ModelViewSet):
    """Catalog items; PUT behaves like PATCH"""
    serializer_class = ItemSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['category']
    search_fields = ['code', 'name']
    ordering_fields = ['code', 'name', 'stock', 'created_at']
    ordering = ['-created_at', '-id']

    def get_queryset(self):
        return CatalogService.list_items()

    def update(self, request, *args, **kwargs):
        kwargs['partial'] = True
        return super().update(request, *args, **kwargs)

    def perform_create(self, serializer):
        serializer.instance = CatalogService.create_item(**serializer.validated_data)

    def perform_update(self, serializer):
        serializer.instance = CatalogService.update_item(
            serializer.instance.pk, **serializer.validated_data
        )

    def perform_destroy(self, instance):
        CatalogService.delete_item(instance.pk)

    @action(detail=False, methods=['get'], url_path='critical/stock')
    def critical_stock(self, request):
        items = CatalogService.list_critical_stock_items()
        serializer = self.get_serializer(items, many=True)
        return Response(serializer.data)


class AssetViewSet(viewsets.ModelViewSet):
    serializer_class = AssetSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['status', 'item']
    search_fields = ['serial_number', 'item__code', 'item__name']
    ordering_fields = ['serial_number', 'created_at']
    ordering = ['serial_number']

    def get_queryset(self):
        return CatalogService.list_assets()

    def update(self, request, *args, **kwargs):
        kwargs['partial'] = True
        return super().update(request, *args, **kwargs)

    def perform_create(self, serializer):
        serializer.instance = CatalogService.create_asset(**serializer.validated_data)

    def perform_update(self, serializer):
        serializer.instance = CatalogService.update_asset(
            serializer.instance.pk, **serializer.validated_data
        )

    def perform_destroy(self, instance):
        CatalogService.delete_asset(instance.pk)

    @action(detail=False, methods=['get'], url_path=r'available/(?P<item_id>[^/.]+)')
    def available(self, request, item_id=None):
        """Assets of one machine item that can be issued right now"""
        item = CatalogService.get_item(item_id)
        assets = CatalogService.list_available_assets_by_item(item.pk)
        serializer = self.get_serializer(assets, many=True)
        return Response(serializer.data)


class TransactionViewSet(mixins.CreateModelMixin, viewsets.ReadOnlyModelViewSet):
    """Transaction log: read access plus posting of new movements"""
    serializer_class = TransactionLogSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['movement_type', 'item', 'asset']
    search_fields = ['requester_name', 'area', 'item__code', 'item__name']
    ordering_fields = ['requested_at', 'created_at']
    ordering = ['-requested_at', '-created_at', '-id']

    def get_queryset(self):
        queryset = TransactionLogService.list_all()
        if self.action != 'list':
            return queryset

        start = parse_date_param(self.request.query_params.get('start'))
        end = parse_date_param(self.request.query_params.get('end'))
        if start and end and start > end:
            raise ValidationError('invalid_date_range')
        return TransactionLogService.filter_date_range(queryset, start, end)

    def get_serializer_class(self):
        if self.action == 'create':
            return TransactionPostSerializer
        return TransactionLogSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        entry = TransactionService.post_transaction(
            acting_user_id=request.user.pk,
            **serializer.to_posting_kwargs()
        )
        return Response(TransactionLogSerializer(entry).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'], url_path=r'recent/(?P<limit>[^/.]+)')
    def recent(self, request, limit=None):
        limit = parse_positive_int(limit, get_setting('RECENT_TRANSACTIONS_DEFAULT'))
        entries = TransactionLogService.list_recent(limit)
        return Response(TransactionLogSerializer(entries, many=True).data)

    @action(detail=False, methods=['get'], url_path=r'report/(?P<export_format>csv|pdf)')
    def report(self, request, export_format=None):
        end = parse_date_param(request.query_params.get('end')) or timezone.localdate()
        start = parse_date_param(request.query_params.get('start'))
        if start is None:
            start = end - timedelta(days=get_setting('REPORT_DEFAULT_DAYS') - 1)
        if start > end:
            raise ValidationError('invalid_date_range')

        if export_format == 'pdf':
            return ReportService.generate_transactions_report_pdf(start, end)
        return ReportService.generate_transactions_report_csv(start, end)


class DashboardViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]

    @action(detail=False, methods=['get'])
    def stats(self, request):
        return Response(DashboardService.dashboard_stats())

    @action(detail=False, methods=['get'], url_path=r'usage-trend/(?P<days>[^/.]+)')
    def usage_trend(self, request, days=None):
        days = parse_positive_int(days, get_setting('USAGE_TREND_DEFAULT_DAYS'))
        days = min(days, get_setting('USAGE_TREND_MAX_DAYS'))

        zero_fill = request.query_params.get('zero_fill')
        if zero_fill is not None:
            zero_fill = zero_fill.strip().lower() not in ('false', '0', 'no')

        return Response(DashboardService.usage_trend(days, zero_fill=zero_fill))

    @action(detail=False, methods=['get'], url_path='inventory-composition')
    def inventory_composition(self, request):
        return Response(DashboardService.inventory_composition())
