from django.contrib.auth import get_user_model, password_validation
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from ..models import Asset, Item, TransactionLog

User = get_user_model()


# Indonesian movement labels used by the front end, mapped to log values
MOVEMENT_ALIASES = {
    'KELUAR': TransactionLog.MovementType.OUT,
    'MASUK': TransactionLog.MovementType.IN,
    'OUT': TransactionLog.MovementType.OUT,
    'IN': TransactionLog.MovementType.IN,
}


class UserSerializer(serializers.ModelSerializer):
    role = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'username', 'email', 'role']
        read_only_fields = fields

    def get_role(self, obj):
        return 'ADMIN' if obj.is_staff else 'USER'


class ItemSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Item
        fields = ['id', 'code', 'name', 'category', 'unit']


class ItemSerializer(serializers.ModelSerializer):
    is_critical = serializers.BooleanField(read_only=True)

    class Meta:
        model = Item
        fields = [
            'id', 'code', 'name', 'category', 'stock', 'unit',
            'minimum_stock', 'is_critical', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class AssetSerializer(serializers.ModelSerializer):
    """Asset with its machine item nested for reads"""
    item = ItemSummarySerializer(read_only=True)
    item_id = serializers.PrimaryKeyRelatedField(
        queryset=Item.objects.all(),
        source='item',
        write_only=True
    )

    class Meta:
        model = Asset
        fields = ['id', 'serial_number', 'status', 'item', 'item_id', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']


class AssetSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Asset
        fields = ['id', 'serial_number', 'status']


class TransactionLogSerializer(serializers.ModelSerializer):
    item = ItemSummarySerializer(read_only=True)
    asset = AssetSummarySerializer(read_only=True)
    user = UserSerializer(read_only=True)
    movement_type_display = serializers.CharField(source='get_movement_type_display', read_only=True)

    class Meta:
        model = TransactionLog
        fields = [
            'id', 'requested_at', 'requester_name', 'area', 'quantity',
            'movement_type', 'movement_type_display', 'item', 'asset',
            'user', 'created_at'
        ]
        read_only_fields = fields


class TransactionPostSerializer(serializers.Serializer):
    """
    Request body for posting a movement.

    Field names follow the front end's payload. Business rules (required
    requester/area, quantity vs. asset per item kind, stock and asset
    availability) are enforced by the transaction engine, so this serializer
    only coerces types.
    """
    namaPeminta = serializers.CharField(required=False, allow_blank=True, default='')
    areaKebutuhan = serializers.CharField(required=False, allow_blank=True, default='')
    jumlah = serializers.IntegerField(required=False, allow_null=True, default=None)
    tipe = serializers.CharField(required=False, allow_blank=True, default='')
    barangId = serializers.IntegerField(required=False, allow_null=True, default=None)
    asetId = serializers.IntegerField(required=False, allow_null=True, default=None)
    tanggalPermintaan = serializers.DateTimeField(
        required=False,
        allow_null=True,
        default=None,
        input_formats=['iso-8601', '%Y-%m-%d']
    )

    def validate_tipe(self, value):
        # unknown labels pass through so the engine reports invalid_movement_type
        return MOVEMENT_ALIASES.get(value.strip().upper(), value)

    def to_posting_kwargs(self):
        data = self.validated_data
        return {
            'item_id': data['barangId'],
            'movement_type': data['tipe'],
            'requester_name': data['namaPeminta'],
            'area': data['areaKebutuhan'],
            'quantity': data['jumlah'],
            'asset_id': data['asetId'],
            'requested_at': data['tanggalPermintaan'],
        }


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)


class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("A user with this email already exists")
        return value.lower()

    def validate_password(self, value):
        # same AUTH_PASSWORD_VALIDATORS as the admin and createsuperuser
        try:
            password_validation.validate_password(value)
        except DjangoValidationError as exc:
            raise serializers.ValidationError(list(exc.messages))
        return value

    def create(self, validated_data):
        # registration never grants staff rights
        return User.objects.create_user(
            username=validated_data['email'],
            email=validated_data['email'],
            password=validated_data['password'],
        )
