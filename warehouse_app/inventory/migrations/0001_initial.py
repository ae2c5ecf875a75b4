# Generated manually for the item, asset and transaction log tables

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Item',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(max_length=100, unique=True, verbose_name='Item code')),
                ('name', models.CharField(max_length=255, verbose_name='Item name')),
                ('category', models.CharField(choices=[('CHEMICAL', 'Chemical'), ('EQUIPMENT', 'Equipment'), ('MACHINE', 'Machine')], max_length=20, verbose_name='Category')),
                ('stock', models.PositiveIntegerField(default=0, help_text='Only used for chemicals and equipment', verbose_name='Stock')),
                ('unit', models.CharField(help_text='e.g. litre, piece, box', max_length=50, verbose_name='Unit')),
                ('minimum_stock', models.PositiveIntegerField(default=0, verbose_name='Minimum stock')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
            ],
            options={
                'verbose_name': 'item',
                'verbose_name_plural': 'items',
                'ordering': ['-created_at', '-id'],
                'indexes': [models.Index(fields=['category'], name='item_category_idx')],
            },
        ),
        migrations.CreateModel(
            name='Asset',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('serial_number', models.CharField(max_length=100, unique=True, verbose_name='Serial number')),
                ('status', models.CharField(choices=[('AVAILABLE', 'Available'), ('ON_LOAN', 'On loan'), ('UNDER_REPAIR', 'Under repair')], default='AVAILABLE', max_length=20, verbose_name='Status')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('item', models.ForeignKey(limit_choices_to={'category': 'MACHINE'}, on_delete=django.db.models.deletion.PROTECT, related_name='assets', to='inventory.item', verbose_name='Item')),
            ],
            options={
                'verbose_name': 'asset',
                'verbose_name_plural': 'assets',
                'ordering': ['serial_number'],
                'indexes': [models.Index(fields=['item', 'status'], name='asset_item_status_idx')],
            },
        ),
        migrations.CreateModel(
            name='TransactionLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('requested_at', models.DateTimeField(default=django.utils.timezone.now, verbose_name='Requested at')),
                ('requester_name', models.CharField(max_length=255, verbose_name='Requester')),
                ('area', models.CharField(max_length=255, verbose_name='Area of need')),
                ('quantity', models.PositiveIntegerField(blank=True, help_text='Only recorded for chemicals and equipment', null=True, verbose_name='Quantity')),
                ('movement_type', models.CharField(choices=[('OUT', 'Issue'), ('IN', 'Return')], max_length=3, verbose_name='Movement type')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created at')),
                ('asset', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='transaction_logs', to='inventory.asset', verbose_name='Asset')),
                ('item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='transaction_logs', to='inventory.item', verbose_name='Item')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='transaction_logs', to=settings.AUTH_USER_MODEL, verbose_name='Posted by')),
            ],
            options={
                'verbose_name': 'transaction log entry',
                'verbose_name_plural': 'transaction log',
                'ordering': ['-requested_at', '-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['requested_at'], name='txlog_requested_at_idx'),
                    models.Index(fields=['movement_type', 'requested_at'], name='txlog_type_requested_idx'),
                ],
            },
        ),
    ]
