from django.db import models
from django.core.exceptions import ValidationError


class AssetQuerySet(models.QuerySet):

    def available(self):
        return self.filter(status=Asset.Status.AVAILABLE)

    def on_loan(self):
        return self.filter(status=Asset.Status.ON_LOAN)


class Asset(models.Model):
    """A serialized physical unit of a machine item"""

    class Status(models.TextChoices):
        AVAILABLE = 'AVAILABLE', 'Available'
        ON_LOAN = 'ON_LOAN', 'On loan'
        UNDER_REPAIR = 'UNDER_REPAIR', 'Under repair'

    serial_number = models.CharField(
        max_length=100,
        unique=True,
        verbose_name="Serial number"
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.AVAILABLE,
        verbose_name="Status"
    )
    item = models.ForeignKey(
        'inventory.Item',
        on_delete=models.PROTECT,
        related_name='assets',
        limit_choices_to={'category': 'MACHINE'},
        verbose_name="Item"
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Created at"
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name="Updated at"
    )

    objects = AssetQuerySet.as_manager()

    class Meta:
        verbose_name = "asset"
        verbose_name_plural = "assets"
        ordering = ['serial_number']
        indexes = [
            models.Index(fields=['item', 'status'], name='asset_item_status_idx'),
        ]

    def __str__(self):
        return f"{self.serial_number} ({self.get_status_display()})"

    def clean(self):
        if self.item_id and self.item.category != self.item.Category.MACHINE:
            raise ValidationError(
                {'item': "Assets can only belong to machine items"}
            )

    @property
    def is_available(self):
        return self.status == self.Status.AVAILABLE
