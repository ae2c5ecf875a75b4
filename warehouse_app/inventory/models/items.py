from django.db import models


class ItemKind(models.TextChoices):
    """Tracking variant of an item: stock count or serialized assets"""
    CONSUMABLE = 'CONSUMABLE', 'Consumable'
    MACHINE = 'MACHINE', 'Machine'


class ItemQuerySet(models.QuerySet):

    def consumables(self):
        return self.filter(category__in=Item.CONSUMABLE_CATEGORIES)

    def critical_stock(self):
        """Consumables whose stock fell to or below the minimum threshold"""
        return self.consumables().filter(stock__lte=models.F('minimum_stock'))


class Item(models.Model):
    """Catalog entry for a stocked good or a machine type"""

    class Category(models.TextChoices):
        CHEMICAL = 'CHEMICAL', 'Chemical'
        EQUIPMENT = 'EQUIPMENT', 'Equipment'
        MACHINE = 'MACHINE', 'Machine'

    CONSUMABLE_CATEGORIES = [Category.CHEMICAL, Category.EQUIPMENT]

    code = models.CharField(
        max_length=100,
        unique=True,
        verbose_name="Item code"
    )
    name = models.CharField(
        max_length=255,
        verbose_name="Item name"
    )
    category = models.CharField(
        max_length=20,
        choices=Category.choices,
        verbose_name="Category"
    )
    stock = models.PositiveIntegerField(
        default=0,
        verbose_name="Stock",
        help_text="Only used for chemicals and equipment"
    )
    unit = models.CharField(
        max_length=50,
        verbose_name="Unit",
        help_text="e.g. litre, piece, box"
    )
    minimum_stock = models.PositiveIntegerField(
        default=0,
        verbose_name="Minimum stock"
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Created at"
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name="Updated at"
    )

    objects = ItemQuerySet.as_manager()

    class Meta:
        verbose_name = "item"
        verbose_name_plural = "items"
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['category'], name='item_category_idx'),
        ]

    def __str__(self):
        return f"{self.code} - {self.name}"

    @property
    def kind(self):
        if self.category in self.CONSUMABLE_CATEGORIES:
            return ItemKind.CONSUMABLE
        if self.category == self.Category.MACHINE:
            return ItemKind.MACHINE
        raise ValueError(f"Unknown item category: {self.category!r}")

    @property
    def is_consumable(self):
        return self.kind == ItemKind.CONSUMABLE

    @property
    def is_critical(self):
        return self.is_consumable and self.stock <= self.minimum_stock

    def is_in_use(self):
        """Whether assets or log entries still reference this item"""
        return self.assets.exists() or self.transaction_logs.exists()
