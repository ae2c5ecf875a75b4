from django import forms
from django.contrib import admin
from django.utils.html import format_html

from .exceptions import ValidationError as InventoryValidationError
from .models import Asset, Item, TransactionLog
from .services.catalog import MANAGED_STATUSES


class CriticalStockFilter(admin.SimpleListFilter):
    title = 'Stock level'
    parameter_name = 'stock_level'

    def lookups(self, request, model_admin):
        return [
            ('critical', 'Critical'),
            ('ok', 'Above minimum'),
        ]

    def queryset(self, request, queryset):
        critical = Item.objects.critical_stock().values('pk')
        if self.value() == 'critical':
            return queryset.filter(pk__in=critical)
        if self.value() == 'ok':
            return queryset.consumables().exclude(pk__in=critical)
        return queryset


class AssetInline(admin.TabularInline):
    model = Asset
    extra = 0
    fields = ('serial_number', 'status')
    readonly_fields = ('status',)


@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'category', 'stock_colored', 'minimum_stock', 'unit', 'created_at']
    list_filter = ['category', CriticalStockFilter]
    search_fields = ['code', 'name']
    ordering = ['code']
    inlines = [AssetInline]

    def get_readonly_fields(self, request, obj=None):
        # code never changes after creation; category is fixed once referenced
        if obj is None:
            return ()
        if obj.is_in_use():
            return ('code', 'category')
        return ('code',)

    def stock_colored(self, obj):
        if not obj.is_consumable:
            return '-'
        color = 'red' if obj.is_critical else 'green'
        return format_html('<span style="color: {};">{}</span>', color, obj.stock)
    stock_colored.short_description = 'Stock'


class AssetAdminForm(forms.ModelForm):
    """Keeps ON_LOAN under the control of transaction postings"""

    class Meta:
        model = Asset
        fields = ['serial_number', 'status', 'item']

    def clean_status(self):
        status = self.cleaned_data['status']
        if self.instance._state.adding:
            if status != Asset.Status.AVAILABLE:
                raise forms.ValidationError(InventoryValidationError('invalid_asset_status').message)
            return status

        current = Asset.objects.filter(pk=self.instance.pk).values_list('status', flat=True).first()
        if status != current:
            if current == Asset.Status.ON_LOAN:
                raise forms.ValidationError(InventoryValidationError('asset_on_loan').message)
            if status not in MANAGED_STATUSES:
                raise forms.ValidationError(InventoryValidationError('invalid_asset_status').message)
        return status


@admin.register(Asset)
class AssetAdmin(admin.ModelAdmin):
    form = AssetAdminForm
    list_display = ['serial_number', 'item', 'status', 'updated_at']
    list_filter = ['status', 'item']
    search_fields = ['serial_number', 'item__code', 'item__name']
    list_select_related = ['item']
    ordering = ['serial_number']


@admin.register(TransactionLog)
class TransactionLogAdmin(admin.ModelAdmin):
    """Posted movements are read-only; new ones go through the API"""
    list_display = ['requested_at', 'movement_type', 'item', 'quantity', 'asset', 'requester_name', 'area', 'user']
    list_filter = ['movement_type', 'requested_at', 'item__category']
    search_fields = ['requester_name', 'area', 'item__code', 'item__name', 'asset__serial_number']
    list_select_related = ['item', 'asset', 'user']
    date_hierarchy = 'requested_at'
    ordering = ['-requested_at']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
