# backend/dairy/serializers.py
import re

from django.contrib.auth.models import User
from django.db import IntegrityError, transaction
from rest_framework import serializers
from rest_framework.settings import api_settings

from .exceptions import ConflictError, NotFoundError
from .models import (
    MAX_AMOUNT,
    MILK_TYPE_CHOICES,
    PAYMENT_METHOD_CHOICES,
    PAYMENT_TYPE_CHOICES,
    Activity,
    Buyer,
    BuyerPayment,
    Expense,
    Income,
    MilkDistribution,
    MilkStore,
    Seller,
    SellerPayment,
    compute_total,
)

MOBILE_NUMBER_RE = re.compile(r'^[0-9]{10}$')


def _must_be_positive(value):
    if value is not None and value <= 0:
        raise serializers.ValidationError('Must be greater than 0.')
    return value


class StrictFieldsMixin:
    """Reject keys the serializer does not declare instead of ignoring them.

    Partial updates must also carry at least one known field.
    """

    def to_internal_value(self, data):
        if hasattr(data, 'keys'):
            writable = {name for name, field in self.fields.items() if not field.read_only}
            unknown = sorted(set(data.keys()) - writable)
            if unknown:
                raise serializers.ValidationError(
                    {name: ['Unknown field.'] for name in unknown}
                )
            if self.partial and not data:
                raise serializers.ValidationError(
                    {api_settings.NON_FIELD_ERRORS_KEY: ['No valid fields to update']}
                )
        return super().to_internal_value(data)


class ModelWriteSerializer(StrictFieldsMixin, serializers.Serializer):
    """Explicit input DTO that writes validated data onto ``model``."""

    model = None

    def create(self, validated_data):
        return self.model.objects.create(**validated_data)

    def update(self, instance, validated_data):
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save()
        return instance


class CounterpartyReferenceMixin:
    """Resolve ``<party>_id`` to an active counterparty and snapshot its name."""

    party_model = None
    party_field = None
    party_label = None

    def resolve_party(self, attrs):
        party_id = attrs.pop(f'{self.party_field}_id', None)
        if party_id is None:
            return attrs
        party = self.party_model.active.filter(pk=party_id).first()
        if party is None:
            raise NotFoundError(f'{self.party_label} not found')
        attrs[self.party_field] = party
        attrs[f'{self.party_field}_name'] = party.full_name
        return attrs


# Users ---------------------------------------------------------------------

class UserSerializer(serializers.ModelSerializer):
    Id = serializers.IntegerField(source='id', read_only=True)
    Username = serializers.CharField(source='username', read_only=True)
    CreatedAt = serializers.DateTimeField(source='date_joined', read_only=True)

    class Meta:
        model = User
        fields = ['Id', 'Username', 'CreatedAt']


class RegisterSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(write_only=True, trim_whitespace=False)

    def validate_username(self, value):
        if len(value) < 3:
            raise serializers.ValidationError('Username must be at least 3 characters long')
        return value

    def validate_password(self, value):
        if len(value) < 6:
            raise serializers.ValidationError('Password must be at least 6 characters long')
        return value

    def validate(self, attrs):
        if User.objects.filter(username=attrs['username']).exists():
            raise ConflictError('Username already exists')
        return attrs

    def create(self, validated_data):
        try:
            with transaction.atomic():
                return User.objects.create_user(
                    username=validated_data['username'],
                    password=validated_data['password'],
                )
        except IntegrityError as exc:
            raise ConflictError('Username already exists') from exc


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(trim_whitespace=False)


class ChangePasswordSerializer(serializers.Serializer):
    """Serializer to validate password change requests."""

    currentPassword = serializers.CharField(write_only=True, trim_whitespace=False)
    newPassword = serializers.CharField(write_only=True, trim_whitespace=False)

    def validate_newPassword(self, value):
        if len(value) < 6:
            raise serializers.ValidationError('New password must be at least 6 characters long')
        return value

    def validate(self, attrs):
        user = self.context['request'].user
        if not user.check_password(attrs['currentPassword']):
            raise serializers.ValidationError({'currentPassword': 'Current password is incorrect'})
        return attrs


class ActivitySerializer(serializers.ModelSerializer):
    user = serializers.StringRelatedField()
    model = serializers.CharField(source='content_type.model', read_only=True)

    class Meta:
        model = Activity
        fields = ['id', 'user', 'action_type', 'model', 'object_id', 'description', 'timestamp', 'object_repr']


# Buyers and sellers ---------------------------------------------------------

class CounterpartyWriteSerializer(ModelWriteSerializer):
    fullName = serializers.CharField(source='full_name', max_length=255)
    mobileNumber = serializers.CharField(source='mobile_number', max_length=20)
    city = serializers.CharField(max_length=100)

    def validate_mobileNumber(self, value):
        if not MOBILE_NUMBER_RE.match(value):
            raise serializers.ValidationError('Mobile number must be 10 digits')
        return value

    def validate(self, attrs):
        duplicates = self.model.active.filter(mobile_number=attrs['mobile_number'])
        if self.instance is not None:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise ConflictError('Mobile number already exists')
        return attrs

    def save(self, **kwargs):
        try:
            with transaction.atomic():
                return super().save(**kwargs)
        except IntegrityError as exc:
            raise ConflictError('Mobile number already exists') from exc


class BuyerWriteSerializer(CounterpartyWriteSerializer):
    model = Buyer


class SellerWriteSerializer(CounterpartyWriteSerializer):
    model = Seller


class BuyerSerializer(serializers.ModelSerializer):
    Id = serializers.IntegerField(source='id', read_only=True)
    FullName = serializers.CharField(source='full_name')
    MobileNumber = serializers.CharField(source='mobile_number')
    City = serializers.CharField(source='city')
    CreatedAt = serializers.DateTimeField(source='created_at')

    class Meta:
        model = Buyer
        fields = ['Id', 'FullName', 'MobileNumber', 'City', 'CreatedAt']


class SellerSerializer(BuyerSerializer):
    class Meta(BuyerSerializer.Meta):
        model = Seller


# Milk transactions ---------------------------------------------------------

MILK_TYPE_ERRORS = {'invalid_choice': "Milk type must be 'cow' or 'buffalo'"}


def _check_total_amount(price, quantity):
    # The total is also written to the linked income/expense amount.
    if compute_total(price, quantity) > MAX_AMOUNT:
        raise serializers.ValidationError(f'Total amount must not exceed {MAX_AMOUNT}')


class MilkStoreWriteSerializer(CounterpartyReferenceMixin, ModelWriteSerializer):
    model = MilkStore
    party_model = Buyer
    party_field = 'buyer'
    party_label = 'Buyer'

    buyerId = serializers.IntegerField(source='buyer_id')
    milkType = serializers.ChoiceField(
        source='milk_type', choices=MILK_TYPE_CHOICES, error_messages=MILK_TYPE_ERRORS
    )
    buyerPrice = serializers.DecimalField(
        source='buyer_price', max_digits=10, decimal_places=2, validators=[_must_be_positive]
    )
    totalQty = serializers.DecimalField(
        source='total_qty', max_digits=10, decimal_places=2, validators=[_must_be_positive]
    )
    fatPercentage = serializers.DecimalField(
        source='fat_percentage', max_digits=5, decimal_places=2, validators=[_must_be_positive]
    )
    date = serializers.DateField()

    def validate(self, attrs):
        _check_total_amount(attrs['buyer_price'], attrs['total_qty'])
        return self.resolve_party(attrs)


class MilkDistributionWriteSerializer(CounterpartyReferenceMixin, ModelWriteSerializer):
    model = MilkDistribution
    party_model = Seller
    party_field = 'seller'
    party_label = 'Seller'

    sellerId = serializers.IntegerField(source='seller_id')
    milkType = serializers.ChoiceField(
        source='milk_type', choices=MILK_TYPE_CHOICES, error_messages=MILK_TYPE_ERRORS
    )
    sellerPrice = serializers.DecimalField(
        source='seller_price', max_digits=10, decimal_places=2, validators=[_must_be_positive]
    )
    totalQty = serializers.DecimalField(
        source='total_qty', max_digits=10, decimal_places=2, validators=[_must_be_positive]
    )
    fatPercentage = serializers.DecimalField(
        source='fat_percentage', max_digits=5, decimal_places=2, validators=[_must_be_positive]
    )
    date = serializers.DateField()

    def validate(self, attrs):
        _check_total_amount(attrs['seller_price'], attrs['total_qty'])
        return self.resolve_party(attrs)


class MilkStoreSerializer(serializers.ModelSerializer):
    Id = serializers.IntegerField(source='id', read_only=True)
    BuyerId = serializers.IntegerField(source='buyer_id')
    BuyerName = serializers.CharField(source='buyer_name')
    MilkType = serializers.CharField(source='milk_type')
    BuyerPrice = serializers.DecimalField(source='buyer_price', max_digits=10, decimal_places=2)
    TotalQty = serializers.DecimalField(source='total_qty', max_digits=10, decimal_places=2)
    FatPercentage = serializers.DecimalField(source='fat_percentage', max_digits=5, decimal_places=2)
    Date = serializers.DateField(source='date')
    TotalAmount = serializers.DecimalField(source='total_amount', max_digits=12, decimal_places=2)
    CreatedAt = serializers.DateTimeField(source='created_at')

    class Meta:
        model = MilkStore
        fields = [
            'Id',
            'BuyerId',
            'BuyerName',
            'MilkType',
            'BuyerPrice',
            'TotalQty',
            'FatPercentage',
            'Date',
            'TotalAmount',
            'CreatedAt',
        ]


class MilkStoreDetailSerializer(MilkStoreSerializer):
    """Purchase row joined with the buyer's current contact details."""

    BuyerFullName = serializers.CharField(source='buyer.full_name')
    BuyerMobile = serializers.CharField(source='buyer.mobile_number')
    BuyerCity = serializers.CharField(source='buyer.city')

    class Meta(MilkStoreSerializer.Meta):
        fields = MilkStoreSerializer.Meta.fields + ['BuyerFullName', 'BuyerMobile', 'BuyerCity']


class MilkDistributionSerializer(serializers.ModelSerializer):
    Id = serializers.IntegerField(source='id', read_only=True)
    SellerId = serializers.IntegerField(source='seller_id')
    SellerName = serializers.CharField(source='seller_name')
    MilkType = serializers.CharField(source='milk_type')
    SellerPrice = serializers.DecimalField(source='seller_price', max_digits=10, decimal_places=2)
    TotalQty = serializers.DecimalField(source='total_qty', max_digits=10, decimal_places=2)
    FatPercentage = serializers.DecimalField(source='fat_percentage', max_digits=5, decimal_places=2)
    Date = serializers.DateField(source='date')
    TotalAmount = serializers.DecimalField(source='total_amount', max_digits=12, decimal_places=2)
    CreatedAt = serializers.DateTimeField(source='created_at')

    class Meta:
        model = MilkDistribution
        fields = [
            'Id',
            'SellerId',
            'SellerName',
            'MilkType',
            'SellerPrice',
            'TotalQty',
            'FatPercentage',
            'Date',
            'TotalAmount',
            'CreatedAt',
        ]


class MilkDistributionDetailSerializer(MilkDistributionSerializer):
    SellerFullName = serializers.CharField(source='seller.full_name')
    SellerMobile = serializers.CharField(source='seller.mobile_number')
    SellerCity = serializers.CharField(source='seller.city')

    class Meta(MilkDistributionSerializer.Meta):
        fields = MilkDistributionSerializer.Meta.fields + ['SellerFullName', 'SellerMobile', 'SellerCity']


# Payments ------------------------------------------------------------------

PAYMENT_TYPE_ERRORS = {'invalid_choice': "Payment type must be 'advance', 'full', or 'partial'"}
PAYMENT_METHOD_ERRORS = {
    'invalid_choice': "Payment method must be 'cash', 'bank_transfer', 'upi', or 'cheque'"
}


class PaymentWriteSerializer(CounterpartyReferenceMixin, ModelWriteSerializer):
    """Shared payment fields; subclasses add the counterparty id field.

    Used with ``partial=True`` for updates, in which case only the supplied
    fields are validated and written.
    """

    paymentAmount = serializers.DecimalField(
        source='payment_amount', max_digits=12, decimal_places=2, validators=[_must_be_positive]
    )
    paymentType = serializers.ChoiceField(
        source='payment_type', choices=PAYMENT_TYPE_CHOICES, error_messages=PAYMENT_TYPE_ERRORS
    )
    paymentMethod = serializers.ChoiceField(
        source='payment_method', choices=PAYMENT_METHOD_CHOICES, error_messages=PAYMENT_METHOD_ERRORS
    )
    transactionId = serializers.CharField(
        source='transaction_id', max_length=100, required=False, allow_blank=True, allow_null=True
    )
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    date = serializers.DateField()

    def validate(self, attrs):
        for optional in ('transaction_id', 'notes'):
            if optional in attrs and not attrs[optional]:
                attrs[optional] = None
        return self.resolve_party(attrs)


class BuyerPaymentWriteSerializer(PaymentWriteSerializer):
    model = BuyerPayment
    party_model = Buyer
    party_field = 'buyer'
    party_label = 'Buyer'

    buyerId = serializers.IntegerField(source='buyer_id')


class SellerPaymentWriteSerializer(PaymentWriteSerializer):
    model = SellerPayment
    party_model = Seller
    party_field = 'seller'
    party_label = 'Seller'

    sellerId = serializers.IntegerField(source='seller_id')


class PaymentSerializer(serializers.ModelSerializer):
    Id = serializers.IntegerField(source='id', read_only=True)
    PaymentAmount = serializers.DecimalField(source='payment_amount', max_digits=12, decimal_places=2)
    PaymentType = serializers.CharField(source='payment_type')
    PaymentMethod = serializers.CharField(source='payment_method')
    TransactionId = serializers.CharField(source='transaction_id', allow_null=True)
    Notes = serializers.CharField(source='notes', allow_null=True)
    Date = serializers.DateField(source='date')
    CreatedAt = serializers.DateTimeField(source='created_at')

    payment_fields = [
        'Id',
        'PaymentAmount',
        'PaymentType',
        'PaymentMethod',
        'TransactionId',
        'Notes',
        'Date',
        'CreatedAt',
    ]


class BuyerPaymentSerializer(PaymentSerializer):
    BuyerId = serializers.IntegerField(source='buyer_id')
    BuyerName = serializers.CharField(source='buyer_name')

    class Meta:
        model = BuyerPayment
        fields = ['Id', 'BuyerId', 'BuyerName'] + PaymentSerializer.payment_fields[1:]


class SellerPaymentSerializer(PaymentSerializer):
    SellerId = serializers.IntegerField(source='seller_id')
    SellerName = serializers.CharField(source='seller_name')

    class Meta:
        model = SellerPayment
        fields = ['Id', 'SellerId', 'SellerName'] + PaymentSerializer.payment_fields[1:]


# Income and expense --------------------------------------------------------

class IncomeWriteSerializer(ModelWriteSerializer):
    model = Income

    amount = serializers.DecimalField(max_digits=12, decimal_places=2, validators=[_must_be_positive])
    description = serializers.CharField()
    source = serializers.CharField(max_length=255)
    date = serializers.DateField()


class ExpenseWriteSerializer(ModelWriteSerializer):
    model = Expense

    amount = serializers.DecimalField(max_digits=12, decimal_places=2, validators=[_must_be_positive])
    description = serializers.CharField()
    paidTo = serializers.CharField(source='paid_to', max_length=255)
    category = serializers.CharField(max_length=100, required=False, allow_blank=True)
    date = serializers.DateField()

    def validate(self, attrs):
        if 'category' in attrs and not attrs['category']:
            attrs['category'] = Expense.DEFAULT_CATEGORY
        return attrs


class IncomeSerializer(serializers.ModelSerializer):
    Id = serializers.IntegerField(source='id', read_only=True)
    Amount = serializers.DecimalField(source='amount', max_digits=12, decimal_places=2)
    Description = serializers.CharField(source='description')
    Source = serializers.CharField(source='source')
    Date = serializers.DateField(source='date')
    MilkDistributionId = serializers.IntegerField(source='milk_distribution_id', allow_null=True)
    CreatedAt = serializers.DateTimeField(source='created_at')

    class Meta:
        model = Income
        fields = ['Id', 'Amount', 'Description', 'Source', 'Date', 'MilkDistributionId', 'CreatedAt']


class ExpenseSerializer(serializers.ModelSerializer):
    Id = serializers.IntegerField(source='id', read_only=True)
    Amount = serializers.DecimalField(source='amount', max_digits=12, decimal_places=2)
    Description = serializers.CharField(source='description')
    PaidTo = serializers.CharField(source='paid_to')
    Category = serializers.CharField(source='category')
    Date = serializers.DateField(source='date')
    MilkStoreId = serializers.IntegerField(source='milk_store_id', allow_null=True)
    CreatedAt = serializers.DateTimeField(source='created_at')

    class Meta:
        model = Expense
        fields = ['Id', 'Amount', 'Description', 'PaidTo', 'Category', 'Date', 'MilkStoreId', 'CreatedAt']
