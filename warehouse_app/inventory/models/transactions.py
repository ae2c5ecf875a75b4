from django.conf import settings
from django.db import models
from django.utils import timezone

from ..exceptions import ImmutableLogError


class TransactionLogQuerySet(models.QuerySet):

    def with_relations(self):
        return self.select_related('item', 'asset', 'user')

    def issues(self):
        return self.filter(movement_type=TransactionLog.MovementType.OUT)

    def update(self, **kwargs):
        raise ImmutableLogError()

    def delete(self):
        raise ImmutableLogError()


class TransactionLog(models.Model):
    """Append-only record of a posted stock movement"""

    class MovementType(models.TextChoices):
        OUT = 'OUT', 'Issue'
        IN = 'IN', 'Return'

    requested_at = models.DateTimeField(
        default=timezone.now,
        verbose_name="Requested at"
    )
    requester_name = models.CharField(
        max_length=255,
        verbose_name="Requester"
    )
    area = models.CharField(
        max_length=255,
        verbose_name="Area of need"
    )
    quantity = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name="Quantity",
        help_text="Only recorded for chemicals and equipment"
    )
    movement_type = models.CharField(
        max_length=3,
        choices=MovementType.choices,
        verbose_name="Movement type"
    )
    item = models.ForeignKey(
        'inventory.Item',
        on_delete=models.PROTECT,
        related_name='transaction_logs',
        verbose_name="Item"
    )
    asset = models.ForeignKey(
        'inventory.Asset',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='transaction_logs',
        verbose_name="Asset"
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='transaction_logs',
        verbose_name="Posted by"
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Created at"
    )

    objects = TransactionLogQuerySet.as_manager()

    class Meta:
        verbose_name = "transaction log entry"
        verbose_name_plural = "transaction log"
        ordering = ['-requested_at', '-created_at', '-id']
        indexes = [
            models.Index(fields=['requested_at'], name='txlog_requested_at_idx'),
            models.Index(fields=['movement_type', 'requested_at'], name='txlog_type_requested_idx'),
        ]

    def __str__(self):
        return f"{self.get_movement_type_display()} - {self.item.name} ({self.requester_name})"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableLogError()
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableLogError()
