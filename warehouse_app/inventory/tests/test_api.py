from datetime import timedelta
from unittest import mock

from django.contrib.auth.models import User
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from ..models import Asset, Item, TransactionLog


class BaseAPITest(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            username='apiuser@example.com',
            email='apiuser@example.com',
            password='apipass123'
        )
        self.client.force_authenticate(user=self.user)

        self.chemical = Item.objects.create(
            code='KB001', name='Floor cleaner', category=Item.Category.CHEMICAL,
            stock=10, unit='litre', minimum_stock=5
        )
        self.machine = Item.objects.create(
            code='VC001', name='Vacuum cleaner', category=Item.Category.MACHINE, unit='unit'
        )
        self.asset = Asset.objects.create(serial_number='A1', item=self.machine)

    def post_transaction(self, **overrides):
        data = {
            'namaPeminta': 'Budi',
            'areaKebutuhan': 'Lobby',
            'jumlah': 3,
            'tipe': 'KELUAR',
            'barangId': self.chemical.pk,
        }
        data.update(overrides)
        return self.client.post('/api/transactions/', data, format='json')


class AuthenticationRequiredTest(TestCase):

    def test_unauthenticated_requests_get_401(self):
        client = APIClient()
        for url in ('/api/items/', '/api/transactions/', '/api/dashboard/stats/', '/api/auth/me/'):
            with self.subTest(url=url):
                self.assertEqual(client.get(url).status_code, status.HTTP_401_UNAUTHORIZED)


class ItemAPITest(BaseAPITest):

    def test_list_items(self):
        response = self.client.get('/api/items/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['results']), 2)

    def test_filter_by_category(self):
        response = self.client.get('/api/items/', {'category': 'MACHINE'})
        self.assertEqual([row['code'] for row in response.data['results']], ['VC001'])

    def test_create_item(self):
        data = {
            'code': 'PR001',
            'name': 'Mop head',
            'category': 'EQUIPMENT',
            'stock': 20,
            'unit': 'piece',
            'minimum_stock': 5,
        }
        response = self.client.post('/api/items/', data, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['code'], 'PR001')
        self.assertFalse(response.data['is_critical'])
        self.assertTrue(Item.objects.filter(code='PR001').exists())

    def test_put_is_partial(self):
        response = self.client.put(
            f'/api/items/{self.chemical.pk}/', {'minimum_stock': 12}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.chemical.refresh_from_db()
        self.assertEqual(self.chemical.minimum_stock, 12)
        self.assertEqual(self.chemical.name, 'Floor cleaner')

    def test_code_change_is_rejected(self):
        response = self.client.patch(
            f'/api/items/{self.chemical.pk}/', {'code': 'KB999'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'immutable_code')

    def test_retrieve_missing_item(self):
        response = self.client.get('/api/items/9999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_item_in_use(self):
        response = self.client.delete(f'/api/items/{self.machine.pk}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'item_in_use')

    def test_delete_unused_item(self):
        response = self.client.delete(f'/api/items/{self.chemical.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

    def test_critical_stock(self):
        Item.objects.create(
            code='KB002', name='Glass cleaner', category=Item.Category.CHEMICAL,
            stock=1, unit='litre', minimum_stock=2
        )
        response = self.client.get('/api/items/critical/stock/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['code'] for row in response.data], ['KB002'])


class AssetAPITest(BaseAPITest):

    def test_create_asset(self):
        response = self.client.post(
            '/api/assets/', {'serial_number': 'A2', 'item_id': self.machine.pk}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'AVAILABLE')
        self.assertEqual(response.data['item']['code'], 'VC001')

    def test_create_asset_for_consumable(self):
        response = self.client.post(
            '/api/assets/', {'serial_number': 'A2', 'item_id': self.chemical.pk}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'item_not_machine')

    def test_set_on_loan_through_catalog_is_rejected(self):
        response = self.client.patch(
            f'/api/assets/{self.asset.pk}/', {'status': 'ON_LOAN'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.asset.refresh_from_db()
        self.assertEqual(self.asset.status, Asset.Status.AVAILABLE)

    def test_send_to_repair(self):
        response = self.client.put(
            f'/api/assets/{self.asset.pk}/', {'status': 'UNDER_REPAIR'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'UNDER_REPAIR')

    def test_available_by_item(self):
        Asset.objects.create(serial_number='A2', item=self.machine, status=Asset.Status.ON_LOAN)

        response = self.client.get(f'/api/assets/available/{self.machine.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['serial_number'] for row in response.data], ['A1'])

    def test_available_for_unknown_item(self):
        response = self.client.get('/api/assets/available/9999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['code'], 'item_not_found')


class TransactionPostingAPITest(BaseAPITest):
    """Posting movements over HTTP"""

    def test_consumable_issue_scenario(self):
        response = self.post_transaction(jumlah=3)

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['movement_type'], 'OUT')
        self.assertEqual(response.data['quantity'], 3)
        self.assertEqual(response.data['user']['id'], self.user.pk)
        self.chemical.refresh_from_db()
        self.assertEqual(self.chemical.stock, 7)

        response = self.post_transaction(jumlah=10)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'insufficient_stock')
        self.assertIn('message', response.data)
        self.chemical.refresh_from_db()
        self.assertEqual(self.chemical.stock, 7)
        self.assertEqual(TransactionLog.objects.count(), 1)

    def test_machine_loan_scenario(self):
        issue = {'tipe': 'KELUAR', 'barangId': self.machine.pk, 'asetId': self.asset.pk, 'jumlah': None}

        response = self.post_transaction(**issue)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIsNone(response.data['quantity'])
        self.assertEqual(response.data['asset']['serial_number'], 'A1')
        self.asset.refresh_from_db()
        self.assertEqual(self.asset.status, Asset.Status.ON_LOAN)

        response = self.post_transaction(**issue)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'asset_unavailable')

        response = self.post_transaction(**dict(issue, tipe='MASUK'))
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.asset.refresh_from_db()
        self.assertEqual(self.asset.status, Asset.Status.AVAILABLE)

    def test_english_movement_labels(self):
        response = self.post_transaction(tipe='IN', jumlah=5)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.chemical.refresh_from_db()
        self.assertEqual(self.chemical.stock, 15)

    def test_unknown_movement_label(self):
        response = self.post_transaction(tipe='PINJAM')
        self.assertEqual(response.data['code'], 'invalid_movement_type')

    def test_missing_requester(self):
        response = self.post_transaction(namaPeminta='')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'missing_required_field')

    def test_missing_quantity(self):
        response = self.post_transaction(jumlah=None)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'missing_or_invalid_quantity')

    def test_unknown_item_in_body_is_a_bad_request(self):
        response = self.post_transaction(barangId=9999)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'item_not_found')

    def test_request_date(self):
        response = self.post_transaction(tanggalPermintaan='2024-03-01')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        entry = TransactionLog.objects.get()
        self.assertEqual(timezone.localtime(entry.requested_at).date().isoformat(), '2024-03-01')

    def test_unexpected_error_is_hidden(self):
        with mock.patch(
            'inventory.api.views.TransactionService.post_transaction',
            side_effect=RuntimeError('boom')
        ):
            with self.assertLogs('inventory.api.exceptions', level='ERROR'):
                response = self.post_transaction()

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data, {'message': 'Internal server error'})


class TransactionQueryAPITest(BaseAPITest):

    def setUp(self):
        super().setUp()
        now = timezone.now()
        self.entries = []
        for days_ago in (9, 4, 1, 0):
            self.entries.append(TransactionLog.objects.create(
                requested_at=now - timedelta(days=days_ago),
                requester_name='Budi', area='Lobby', quantity=1,
                movement_type=TransactionLog.MovementType.OUT,
                item=self.chemical, user=self.user
            ))

    def test_list_is_newest_first(self):
        response = self.client.get('/api/transactions/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        ids = [row['id'] for row in response.data['results']]
        self.assertEqual(ids, [entry.pk for entry in reversed(self.entries)])

    def test_recent(self):
        response = self.client.get('/api/transactions/recent/2/')
        self.assertEqual(len(response.data), 2)
        self.assertEqual(response.data[0]['id'], self.entries[-1].pk)

    def test_recent_with_invalid_limit_uses_default(self):
        for _ in range(3):
            TransactionLog.objects.create(
                requester_name='Sari', area='Gudang', quantity=1,
                movement_type=TransactionLog.MovementType.IN,
                item=self.chemical, user=self.user
            )
        for limit in ('0', 'abc'):
            with self.subTest(limit=limit):
                response = self.client.get(f'/api/transactions/recent/{limit}/')
                self.assertEqual(response.status_code, status.HTTP_200_OK)
                self.assertEqual(len(response.data), 5)

    def test_date_range_filter(self):
        today = timezone.localdate()
        response = self.client.get('/api/transactions/', {
            'start': (today - timedelta(days=4)).isoformat(),
            'end': (today - timedelta(days=1)).isoformat(),
        })
        ids = [row['id'] for row in response.data['results']]
        self.assertEqual(ids, [self.entries[2].pk, self.entries[1].pk])

    def test_invalid_date(self):
        response = self.client.get('/api/transactions/', {'start': 'yesterday'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'invalid_date')

    def test_retrieve(self):
        response = self.client.get(f'/api/transactions/{self.entries[0].pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['item']['code'], 'KB001')

    def test_log_cannot_be_changed_over_http(self):
        url = f'/api/transactions/{self.entries[0].pk}/'
        self.assertEqual(self.client.delete(url).status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
        self.assertEqual(
            self.client.patch(url, {'area': 'X'}, format='json').status_code,
            status.HTTP_405_METHOD_NOT_ALLOWED
        )


class DashboardAPITest(BaseAPITest):

    def test_stats_scenario(self):
        Item.objects.create(
            code='KB002', name='Glass cleaner', category=Item.Category.CHEMICAL,
            stock=1, unit='litre', minimum_stock=2
        )
        Item.objects.filter(pk=self.chemical.pk).update(stock=5)
        self.post_transaction(tipe='KELUAR', barangId=self.machine.pk, asetId=self.asset.pk)

        response = self.client.get('/api/dashboard/stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['critical_stock'], 2)
        self.assertEqual(response.data['assets_on_loan'], 1)
        self.assertEqual(response.data['total_items'], 3)
        self.assertEqual(response.data['monthly_transactions'], 1)

    def test_usage_trend_defaults_to_thirty_days(self):
        response = self.client.get('/api/dashboard/usage-trend/0/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 30)

    def test_usage_trend_is_capped(self):
        response = self.client.get('/api/dashboard/usage-trend/5000/')
        self.assertEqual(len(response.data), 365)

    def test_usage_trend_without_zero_fill(self):
        self.post_transaction()
        response = self.client.get('/api/dashboard/usage-trend/7/', {'zero_fill': 'false'})
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['count'], 1)

    def test_inventory_composition(self):
        response = self.client.get('/api/dashboard/inventory-composition/')
        self.assertEqual(
            {row['category']: row['count'] for row in response.data},
            {'CHEMICAL': 1, 'MACHINE': 1}
        )
