# backend/dairy/models.py
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from django.contrib.auth.models import User
from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.core.validators import RegexValidator
from django.db import models
from django.db.models import Q

MONEY_QUANTIZER = Decimal('0.01')
# Largest value a 12-digit, 2-decimal money column can hold
MAX_AMOUNT = Decimal('9999999999.99')

MILK_TYPE_CHOICES = (
    ('cow', 'Cow'),
    ('buffalo', 'Buffalo'),
)

PAYMENT_TYPE_CHOICES = (
    ('advance', 'Advance'),
    ('full', 'Full'),
    ('partial', 'Partial'),
)

PAYMENT_METHOD_CHOICES = (
    ('cash', 'Cash'),
    ('bank_transfer', 'Bank transfer'),
    ('upi', 'UPI'),
    ('cheque', 'Cheque'),
)

mobile_number_validator = RegexValidator(
    regex=r'^[0-9]{10}$',
    message='Mobile number must be 10 digits',
)


def compute_total(price, quantity) -> Decimal:
    """Return ``price × quantity`` rounded to two decimal places."""

    return (Decimal(str(price)) * Decimal(str(quantity))).quantize(
        MONEY_QUANTIZER, rounding=ROUND_HALF_UP
    )


class SoftDeleteManager(models.Manager):
    """Manager that hides soft-deleted rows."""

    def get_queryset(self):
        return super().get_queryset().filter(is_deleted=False)


class SoftDeleteModel(models.Model):
    """Base for business rows that are flagged instead of removed.

    ``objects`` still returns every row so deleted records stay addressable
    by primary key for auditing; read paths go through ``active``.
    """

    is_deleted = models.BooleanField(default=False, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = models.Manager()
    active = SoftDeleteManager()

    class Meta:
        abstract = True

    def soft_delete(self):
        self.is_deleted = True
        self.save(update_fields=['is_deleted', 'updated_at'])

    def restore(self):
        self.is_deleted = False
        self.save(update_fields=['is_deleted', 'updated_at'])


class Activity(models.Model):
    ACTION_TYPES = (
        ('created', 'Created'),
        ('updated', 'Updated'),
        ('deleted', 'Deleted'),
    )

    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, related_name='activities')
    action_type = models.CharField(max_length=10, choices=ACTION_TYPES)
    description = models.CharField(max_length=255)
    timestamp = models.DateTimeField(auto_now_add=True)

    content_type = models.ForeignKey(ContentType, on_delete=models.CASCADE)
    object_id = models.PositiveIntegerField()
    content_object = GenericForeignKey('content_type', 'object_id')

    # Snapshot of the row at the time it was soft-deleted
    object_repr = models.TextField(blank=True, null=True)

    class Meta:
        ordering = ['-timestamp']
        verbose_name_plural = 'Activities'

    def __str__(self):
        username = self.user.username if self.user else 'system'
        return f'{username} {self.action_type} - {self.description}'


class Counterparty(SoftDeleteModel):
    full_name = models.CharField(max_length=255)
    mobile_number = models.CharField(max_length=10, validators=[mobile_number_validator])
    city = models.CharField(max_length=100)

    class Meta:
        abstract = True
        ordering = ['-created_at']

    def __str__(self):
        return self.full_name


class Buyer(Counterparty):
    """A milk source: the dairy buys milk from buyers."""

    class Meta(Counterparty.Meta):
        constraints = [
            models.UniqueConstraint(
                fields=['mobile_number'],
                condition=Q(is_deleted=False),
                name='unique_active_buyer_mobile',
            ),
        ]


class Seller(Counterparty):
    """A milk destination: the dairy sells milk to sellers."""

    class Meta(Counterparty.Meta):
        constraints = [
            models.UniqueConstraint(
                fields=['mobile_number'],
                condition=Q(is_deleted=False),
                name='unique_active_seller_mobile',
            ),
        ]


class MilkStore(SoftDeleteModel):
    """A milk purchase from a buyer."""

    buyer = models.ForeignKey(Buyer, on_delete=models.PROTECT, related_name='milk_purchases')
    # Name of the buyer at the time the purchase was recorded
    buyer_name = models.CharField(max_length=255)
    milk_type = models.CharField(max_length=10, choices=MILK_TYPE_CHOICES)
    buyer_price = models.DecimalField(max_digits=10, decimal_places=2)
    total_qty = models.DecimalField(max_digits=10, decimal_places=2)
    fat_percentage = models.DecimalField(max_digits=5, decimal_places=2)
    date = models.DateField(default=date.today)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)

    class Meta:
        ordering = ['-date', '-created_at']

    def __str__(self):
        return f'{self.total_qty}L {self.milk_type} from {self.buyer_name} on {self.date}'

    def save(self, *args, **kwargs):
        self.total_amount = compute_total(self.buyer_price, self.total_qty)
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and 'total_amount' not in update_fields:
            kwargs['update_fields'] = list(update_fields) + ['total_amount']
        super().save(*args, **kwargs)


class MilkDistribution(SoftDeleteModel):
    """A milk sale to a seller."""

    seller = models.ForeignKey(Seller, on_delete=models.PROTECT, related_name='milk_sales')
    seller_name = models.CharField(max_length=255)
    milk_type = models.CharField(max_length=10, choices=MILK_TYPE_CHOICES)
    seller_price = models.DecimalField(max_digits=10, decimal_places=2)
    total_qty = models.DecimalField(max_digits=10, decimal_places=2)
    fat_percentage = models.DecimalField(max_digits=5, decimal_places=2)
    date = models.DateField(default=date.today)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)

    class Meta:
        ordering = ['-date', '-created_at']

    def __str__(self):
        return f'{self.total_qty}L {self.milk_type} to {self.seller_name} on {self.date}'

    def save(self, *args, **kwargs):
        self.total_amount = compute_total(self.seller_price, self.total_qty)
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and 'total_amount' not in update_fields:
            kwargs['update_fields'] = list(update_fields) + ['total_amount']
        super().save(*args, **kwargs)


class Payment(SoftDeleteModel):
    payment_amount = models.DecimalField(max_digits=12, decimal_places=2)
    payment_type = models.CharField(max_length=10, choices=PAYMENT_TYPE_CHOICES)
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES)
    transaction_id = models.CharField(max_length=100, blank=True, null=True)
    notes = models.TextField(blank=True, null=True)
    date = models.DateField(default=date.today)

    class Meta:
        abstract = True
        ordering = ['-date', '-created_at']


class BuyerPayment(Payment):
    buyer = models.ForeignKey(Buyer, on_delete=models.PROTECT, related_name='payments')
    buyer_name = models.CharField(max_length=255)

    def __str__(self):
        return f'Payment of {self.payment_amount} to {self.buyer_name} on {self.date}'


class SellerPayment(Payment):
    seller = models.ForeignKey(Seller, on_delete=models.PROTECT, related_name='payments')
    seller_name = models.CharField(max_length=255)

    def __str__(self):
        return f'Payment of {self.payment_amount} from {self.seller_name} on {self.date}'


class Income(SoftDeleteModel):
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    description = models.TextField()
    source = models.CharField(max_length=255)
    date = models.DateField(default=date.today)
    milk_distribution = models.OneToOneField(
        MilkDistribution,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='income',
    )

    class Meta:
        ordering = ['-date', '-created_at']
        verbose_name_plural = 'Income'

    def __str__(self):
        return f'Income of {self.amount} from {self.source} on {self.date}'


class Expense(SoftDeleteModel):
    DEFAULT_CATEGORY = 'other'
    MILK_PURCHASE_CATEGORY = 'milk_purchase'

    amount = models.DecimalField(max_digits=12, decimal_places=2)
    description = models.TextField()
    paid_to = models.CharField(max_length=255)
    category = models.CharField(max_length=100, default=DEFAULT_CATEGORY)
    date = models.DateField(default=date.today)
    milk_store = models.OneToOneField(
        MilkStore,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='expense',
    )

    class Meta:
        ordering = ['-date', '-created_at']

    def __str__(self):
        return f'Expense of {self.amount} to {self.paid_to} on {self.date}'
